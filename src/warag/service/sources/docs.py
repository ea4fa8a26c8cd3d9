"""Google Docs text source."""

import logging
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from warag.constants import GOOGLE_DOCS_SCOPES
from warag.errors import SourceFetchError
from warag.service.sources.common import translate_http_error
from warag.service.sources.config import GoogleConfig

logger = logging.getLogger(__name__)


def extract_paragraph_text(document: dict[str, Any]) -> str:
    """Concatenate the text runs of every paragraph in a Docs API document.

    Tables, images and other structural elements are skipped.
    """
    parts = []
    for element in document.get("body", {}).get("content", []):
        paragraph = element.get("paragraph")
        if not paragraph:
            continue
        for paragraph_element in paragraph.get("elements", []):
            text_run = paragraph_element.get("textRun")
            if text_run:
                parts.append(text_run.get("content", ""))
    return "".join(parts).strip()


class GoogleDocsSource:
    """Reads the current text of a Google Doc via the Docs API v1."""

    def __init__(self, service: Any = None) -> None:
        """Initialize the source.

        Args:
            service: Prebuilt Docs API resource. If None, one is built lazily
                from the service-account settings in GoogleConfig.
        """
        self._service = service

    @property
    def service(self) -> Any:
        if self._service is None:
            credentials = GoogleConfig.build_credentials(GOOGLE_DOCS_SCOPES)
            self._service = build("docs", "v1", credentials=credentials, cache_discovery=False)
        return self._service

    def fetch_document_text(self, doc_id: str) -> str:
        """Fetch the full text of a document.

        Args:
            doc_id: Google Doc ID

        Returns:
            str: Paragraph text, trimmed

        Raises:
            SourceFetchError: If the document is missing, not shared or unreadable
        """
        logger.info(f"📄 Reading Google Doc: {doc_id}")
        try:
            document = self.service.documents().get(documentId=doc_id).execute()
        except HttpError as e:
            logger.error(f"❌ Google Docs API error for {doc_id}: {e}")
            raise translate_http_error(e, "Google Doc") from e
        except Exception as e:
            logger.error(f"❌ Failed to read Google Doc {doc_id}: {e}", exc_info=True)
            raise SourceFetchError(f"Failed to read Google Doc: {e}") from e

        text = extract_paragraph_text(document)
        logger.info(f"  Extracted {len(text)} characters")
        return text
