"""Helpers shared by the Google document sources."""

import re

from googleapiclient.errors import HttpError

from warag.errors import SourceFetchError

_DOCUMENT_ID_PATTERN = re.compile(r"/d/([a-zA-Z0-9_-]+)")


def extract_document_id(url_or_id: str) -> str:
    """Extract the document ID from a Google Docs/Sheets URL.

    Values without a ``/d/<id>`` segment are assumed to already be an ID.
    """
    value = url_or_id.strip()
    match = _DOCUMENT_ID_PATTERN.search(value)
    return match.group(1) if match else value


def translate_http_error(error: HttpError, kind: str) -> SourceFetchError:
    """Turn a Google API error into a SourceFetchError with a user-facing message.

    Args:
        error: The error raised by the API client
        kind: "Google Doc" or "Google Sheet"
    """
    status = getattr(error, "status_code", None) or getattr(error.resp, "status", None)
    status = int(status) if status is not None else None

    if status == 403:
        return SourceFetchError(
            f"{kind} access denied. Please share the {kind.split()[-1].lower()} "
            "with the service account email.",
            status_code=403,
        )
    if status == 404:
        return SourceFetchError(
            f"{kind} not found. Please check the {kind.split()[-1].lower()} URL.",
            status_code=404,
        )
    return SourceFetchError(f"Failed to read {kind}: {error}", status_code=status)
