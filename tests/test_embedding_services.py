"""Tests for embedding service implementations and factory."""

from unittest.mock import MagicMock, patch

import pytest

from warag.constants import get_embedding_model, get_embedding_service_name
from warag.llm import GeminiService, OllamaService, get_embedding_service


class TestOllamaService:
    """Tests for OllamaService."""

    @patch("warag.llm.ollama.ollama.Client")
    def test_client_created_with_timeout(self, mock_client_class):
        """Test that the client gets the host and per-request timeout."""
        OllamaService(host="http://localhost:11434", model="nomic-embed-text", timeout=12.0)

        mock_client_class.assert_called_once_with(host="http://localhost:11434", timeout=12.0)

    @patch("warag.llm.ollama.ollama.Client")
    def test_generate_embeddings_single_batch_call(self, mock_client_class):
        """Test that all texts are embedded in one request."""
        mock_client = mock_client_class.return_value
        mock_client.embed.return_value = {"embeddings": [[0.1, 0.2], [0.3, 0.4]]}
        service = OllamaService(host="http://localhost:11434", model="nomic-embed-text")

        result = service.generate_embeddings(["a", "b"])

        assert result == [[0.1, 0.2], [0.3, 0.4]]
        mock_client.embed.assert_called_once_with(model="nomic-embed-text", input=["a", "b"])

    @patch("warag.llm.ollama.ollama.Client")
    def test_empty_input_skips_request(self, mock_client_class):
        """Test that no texts means no request."""
        service = OllamaService(host="http://localhost:11434")

        assert service.generate_embeddings([]) == []
        mock_client_class.return_value.embed.assert_not_called()


class TestGeminiService:
    """Tests for GeminiService."""

    @patch("warag.llm.gemini.genai.Client")
    def test_generate_embeddings(self, mock_client_class):
        """Test that embed_content is called once with all texts."""
        mock_client = mock_client_class.return_value
        mock_client.models.embed_content.return_value = MagicMock(
            embeddings=[MagicMock(values=[1.0, 2.0]), MagicMock(values=[3.0, 4.0])]
        )
        service = GeminiService(model="text-embedding-004")

        result = service.generate_embeddings(["x", "y"])

        assert result == [[1.0, 2.0], [3.0, 4.0]]
        mock_client.models.embed_content.assert_called_once_with(
            model="text-embedding-004", contents=["x", "y"]
        )

    @patch("warag.llm.gemini.genai.Client")
    def test_errors_propagate(self, mock_client_class):
        """Test that provider errors are re-raised to the caller."""
        mock_client_class.return_value.models.embed_content.side_effect = RuntimeError("quota")
        service = GeminiService(model="text-embedding-004")

        with pytest.raises(RuntimeError, match="quota"):
            service.generate_embeddings(["x"])


class TestFactory:
    """Tests for get_embedding_service and model defaults."""

    @patch("warag.llm.factory.OllamaService")
    def test_ollama_from_config(self, mock_ollama):
        """Test building an Ollama service from explicit config."""
        get_embedding_service(
            {"service": "ollama", "host": "http://ollama:11434", "model": "m", "timeout": 5}
        )

        mock_ollama.assert_called_once_with(host="http://ollama:11434", model="m", timeout=5.0)

    @patch("warag.llm.factory.GeminiService")
    def test_gemini_from_config(self, mock_gemini):
        """Test building a Gemini service from explicit config."""
        get_embedding_service({"service": "gemini", "model": "text-embedding-004"})

        mock_gemini.assert_called_once()
        assert mock_gemini.call_args.kwargs["model"] == "text-embedding-004"

    def test_unsupported_service(self):
        """Test that unknown providers raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported"):
            get_embedding_service({"service": "mystery"})

    def test_embedding_service_env_wins(self, monkeypatch):
        """Test that EMBEDDING_SERVICE overrides LLM_SERVICE."""
        monkeypatch.setenv("LLM_SERVICE", "ollama")
        monkeypatch.setenv("EMBEDDING_SERVICE", "gemini")
        assert get_embedding_service_name() == "gemini"

    def test_model_defaults_per_service(self, monkeypatch):
        """Test service-specific default embedding models."""
        monkeypatch.delenv("EMBEDDING_MODEL", raising=False)
        assert get_embedding_model("ollama") == "nomic-embed-text"
        assert get_embedding_model("gemini") == "text-embedding-004"
