"""Google Docs and Sheets readers feeding the sync pipeline."""

from warag.service.sources.common import extract_document_id
from warag.service.sources.config import GoogleConfig
from warag.service.sources.docs import GoogleDocsSource, extract_paragraph_text
from warag.service.sources.sheets import GoogleSheetsSource

__all__ = [
    "GoogleConfig",
    "GoogleDocsSource",
    "GoogleSheetsSource",
    "extract_document_id",
    "extract_paragraph_text",
]
