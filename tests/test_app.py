"""Tests for the Flask application module."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from warag.client.app import app
from warag.client.routes.config import RouteConfig
from warag.errors import (
    EmbeddingError,
    MappingNotFoundError,
    PersistenceError,
    SourceFetchError,
    SyncInProgressError,
)
from warag.sync import Source, SyncMapping, SyncResult

PHONE = "+15550001111"
SYNCED_AT = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_config():
    """Create a RouteConfig with mocked collaborators."""
    config = RouteConfig()
    config.sync_service = MagicMock()
    config.repository = MagicMock()
    return config


def ok_result(source=Source.GOOGLE_DOC):
    return SyncResult(
        phone_number=PHONE,
        source=source,
        total=4,
        added=1,
        deleted=2,
        unchanged=3,
        embedded=1,
        synced_at=SYNCED_AT,
        success=True,
        message="Google Doc synced successfully",
    )


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    @patch("warag.client.routes.health.get_config")
    def test_health_check_returns_status(self, mock_get_config, mock_config):
        """Test health endpoint reports service state."""
        mock_config.sync_service.applier.describe.return_value = {"batch_size": 16}
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            response = client.get("/health")

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "healthy"
        assert data["sync_service"] == "initialized"
        assert data["embedding"] == {"batch_size": 16}

    @patch("warag.client.routes.health.get_config")
    def test_health_without_services(self, mock_get_config):
        """Test health endpoint before services are initialized."""
        mock_get_config.return_value = RouteConfig()

        with app.test_client() as client:
            data = client.get("/health").get_json()

        assert data["sync_service"] == "not initialized"


class TestSyncEndpoints:
    """Tests for the sync endpoints."""

    @patch("warag.client.routes.sync.get_config")
    def test_sync_doc_success(self, mock_get_config, mock_config):
        """Test a successful doc sync returns chunk counts."""
        mock_config.sync_service.sync.return_value = ok_result()
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            response = client.post("/api/sync-google-doc", json={"phone_number": PHONE})

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["totalChunks"] == 4
        assert data["newChunks"] == 1
        assert data["deletedChunks"] == 2
        assert data["lastSyncedAt"] == SYNCED_AT.isoformat()
        mock_config.sync_service.sync.assert_called_once_with(PHONE, Source.GOOGLE_DOC)

    @patch("warag.client.routes.sync.get_config")
    def test_sync_sheet_reports_rows(self, mock_get_config, mock_config):
        """Test a sheet sync reports row counts."""
        mock_config.sync_service.sync.return_value = ok_result(Source.GOOGLE_SHEET)
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            data = client.post("/api/sync-google-sheet", json={"phone_number": PHONE}).get_json()

        assert data["totalRows"] == 4
        assert data["newRows"] == 1
        mock_config.sync_service.sync.assert_called_once_with(PHONE, Source.GOOGLE_SHEET)

    def test_sync_invalid_json(self):
        """Test that a non-JSON body is rejected with 400."""
        with app.test_client() as client:
            response = client.post(
                "/api/sync-google-doc", data="not json", content_type="application/json"
            )

        assert response.status_code == 400
        assert "Invalid JSON" in response.get_json()["error"]

    def test_sync_missing_phone_number(self):
        """Test that a body without phone_number is rejected with 400."""
        with app.test_client() as client:
            response = client.post("/api/sync-google-doc", json={})

        assert response.status_code == 400
        assert "phone_number is required" in response.get_json()["error"]

    @pytest.mark.parametrize(
        "error,status",
        [
            (MappingNotFoundError("No Google Doc configured for +1"), 404),
            (SyncInProgressError("already running"), 409),
            (SourceFetchError("Google Doc access denied.", status_code=403), 403),
            (SourceFetchError("Google Doc not found.", status_code=404), 404),
            (SourceFetchError("Failed to read Google Doc", status_code=500), 502),
            (SourceFetchError("Failed to read Google Doc"), 502),
            (PersistenceError("Failed to persist chunks"), 500),
        ],
    )
    @patch("warag.client.routes.sync.get_config")
    def test_sync_error_status_codes(self, mock_get_config, error, status, mock_config):
        """Test that each sync failure maps to its HTTP status."""
        mock_config.sync_service.sync.side_effect = error
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            response = client.post("/api/sync-google-doc", json={"phone_number": PHONE})

        assert response.status_code == status
        data = response.get_json()
        assert data["success"] is False
        assert data["error"] == error.message

    @patch("warag.client.routes.sync.get_config")
    def test_embedding_failure_reports_partial_counts(self, mock_get_config, mock_config):
        """Test that an embedding failure returns 500 with how far the sync got."""
        partial = SyncResult(phone_number=PHONE, source=Source.GOOGLE_DOC, total=5, embedded=1)
        mock_config.sync_service.sync.side_effect = EmbeddingError(
            "Embedding failed at chunk 2 of 5", embedded=1, result=partial
        )
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            response = client.post("/api/sync-google-doc", json={"phone_number": PHONE})

        assert response.status_code == 500
        data = response.get_json()
        assert data["totalChunks"] == 5
        assert data["embedded"] == 1
        assert data["newChunks"] == 0
        assert data["lastSyncedAt"] is None

    @patch("warag.client.routes.sync.get_config")
    def test_unexpected_error(self, mock_get_config, mock_config):
        """Test that unexpected exceptions return 500."""
        mock_config.sync_service.sync.side_effect = RuntimeError("boom")
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            response = client.post("/api/sync-google-doc", json={"phone_number": PHONE})

        assert response.status_code == 500
        assert "boom" in response.get_json()["error"]


class TestMappingEndpoints:
    """Tests for linking and status endpoints."""

    @patch("warag.client.routes.mappings.get_config")
    def test_save_google_doc(self, mock_get_config, mock_config):
        """Test linking a doc extracts the id from the URL."""
        mock_config.repository.save_mapping.return_value = SyncMapping(
            phone_number=PHONE, source=Source.GOOGLE_DOC, external_id="abc123"
        )
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            response = client.post(
                "/api/save-google-doc",
                json={
                    "phone_number": PHONE,
                    "doc_url": "https://docs.google.com/document/d/abc123/edit",
                },
            )

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["docId"] == "abc123"
        mock_config.repository.save_mapping.assert_called_once_with(
            PHONE, Source.GOOGLE_DOC, "abc123", name=None
        )

    @patch("warag.client.routes.mappings.get_config")
    def test_save_google_sheet(self, mock_get_config, mock_config):
        """Test linking a sheet uses sheet_url."""
        mock_config.repository.save_mapping.return_value = SyncMapping(
            phone_number=PHONE, source=Source.GOOGLE_SHEET, external_id="xyz"
        )
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            data = client.post(
                "/api/save-google-sheet", json={"phone_number": PHONE, "sheet_url": "xyz"}
            ).get_json()

        assert data["sheetId"] == "xyz"

    def test_save_requires_url(self):
        """Test that linking without a URL is rejected."""
        with app.test_client() as client:
            response = client.post("/api/save-google-doc", json={"phone_number": PHONE})

        assert response.status_code == 400
        assert "doc_url" in response.get_json()["error"]

    @patch("warag.client.routes.mappings.get_config")
    def test_save_storage_error(self, mock_get_config, mock_config):
        """Test that a storage failure while linking returns 500."""
        mock_config.repository.save_mapping.side_effect = PersistenceError("db down")
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            response = client.post(
                "/api/save-google-doc", json={"phone_number": PHONE, "doc_url": "abc"}
            )

        assert response.status_code == 500

    @patch("warag.client.routes.mappings.get_config")
    def test_doc_status_synced(self, mock_get_config, mock_config):
        """Test status of a linked and synced doc."""
        mock_config.repository.get_mapping.return_value = SyncMapping(
            phone_number=PHONE,
            source=Source.GOOGLE_DOC,
            external_id="abc123",
            name="Menu",
            last_synced_at=SYNCED_AT,
            last_chunk_count=3,
        )
        mock_config.repository.count_chunks.return_value = 3
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            response = client.get("/api/google-doc-status", query_string={"phone_number": PHONE})

        data = response.get_json()
        assert data["isConnected"] is True
        assert data["hasData"] is True
        assert data["docId"] == "abc123"
        assert data["lastSyncedAt"] == SYNCED_AT.isoformat()
        assert data["chunkCount"] == 3
        assert data["syncStatus"] == "synced"
        mock_config.repository.count_chunks.assert_called_once_with(PHONE, Source.GOOGLE_DOC)

    @patch("warag.client.routes.mappings.get_config")
    def test_sheet_status_not_connected(self, mock_get_config, mock_config):
        """Test status of a tenant without a linked sheet."""
        mock_config.repository.get_mapping.return_value = None
        mock_config.repository.count_chunks.return_value = 0
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            data = client.get(
                "/api/google-sheet-status", query_string={"phone_number": PHONE}
            ).get_json()

        assert data["isConnected"] is False
        assert data["sheetId"] is None
        assert data["syncStatus"] == "not_connected"

    def test_status_requires_phone_number(self):
        """Test that status without phone_number is rejected."""
        with app.test_client() as client:
            response = client.get("/api/google-doc-status")

        assert response.status_code == 400


class TestPreviewEndpoints:
    """Tests for the stored-content preview endpoints."""

    @patch("warag.client.routes.mappings.get_config")
    def test_doc_preview_lists_stored_chunks(self, mock_get_config, mock_config):
        """Test that a linked doc returns its first stored chunks."""
        mock_config.repository.get_mapping.return_value = SyncMapping(
            phone_number=PHONE,
            source=Source.GOOGLE_DOC,
            external_id="abc123",
            name="Menu",
            last_synced_at=SYNCED_AT,
            last_chunk_count=2,
        )
        mock_config.repository.list_chunk_contents.return_value = ["Open 9-18", "Closed Sunday"]
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            response = client.get("/api/doc-preview", query_string={"phone_number": PHONE})

        assert response.status_code == 200
        data = response.get_json()
        assert data["connected"] is True
        assert data["docId"] == "abc123"
        assert data["items"] == ["Open 9-18", "Closed Sunday"]
        assert data["total"] == 2
        assert data["lastSyncedAt"] == SYNCED_AT.isoformat()
        mock_config.repository.list_chunk_contents.assert_called_once_with(
            PHONE, Source.GOOGLE_DOC, limit=20
        )

    @patch("warag.client.routes.mappings.get_config")
    def test_sheet_preview_not_connected(self, mock_get_config, mock_config):
        """Test that an unlinked sheet reports connected=False without reading chunks."""
        mock_config.repository.get_mapping.return_value = None
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            data = client.get(
                "/api/sheet-preview", query_string={"phone_number": PHONE}
            ).get_json()

        assert data["success"] is True
        assert data["connected"] is False
        assert data["items"] == []
        assert data["total"] == 0
        mock_config.repository.list_chunk_contents.assert_not_called()

    @patch("warag.client.routes.mappings.get_config")
    def test_preview_storage_error(self, mock_get_config, mock_config):
        """Test that a storage failure while previewing returns 500."""
        mock_config.repository.get_mapping.side_effect = PersistenceError("db down")
        mock_get_config.return_value = mock_config

        with app.test_client() as client:
            response = client.get("/api/sheet-preview", query_string={"phone_number": PHONE})

        assert response.status_code == 500

    def test_preview_requires_phone_number(self):
        """Test that preview without phone_number is rejected."""
        with app.test_client() as client:
            response = client.get("/api/doc-preview")

        assert response.status_code == 400


class TestMain:
    """Tests for the main entry point."""

    @patch("warag.client.app.app.run")
    @patch("warag.client.app.initialize_services")
    def test_main_starts_flask_app(self, mock_initialize, mock_run, monkeypatch):
        """Test main initializes services and runs the server."""
        from warag.client.app import main

        monkeypatch.setenv("FLASK_PORT", "5050")
        monkeypatch.setenv("FLASK_ENV", "production")

        main()

        mock_initialize.assert_called_once()
        mock_run.assert_called_once_with(host="0.0.0.0", port=5050, debug=False)

    @patch("warag.client.app.init_config")
    @patch("warag.client.app.create_sync_service")
    def test_initialize_services_wires_routes(self, mock_create, mock_init_config):
        """Test that the sync service and its repository are handed to the routes."""
        from warag.client.app import initialize_services

        initialize_services()

        service = mock_create.return_value
        mock_init_config.assert_called_once_with(
            sync_service=service, repository=service.repository
        )
