"""Routes for linking Google Docs and Sheets to a phone number and reading sync status."""

import logging

from flask import Blueprint, jsonify, request

from warag.client.routes.config import get_config
from warag.errors import PersistenceError
from warag.service.sources import extract_document_id
from warag.sync import Source

logger = logging.getLogger(__name__)

mappings_bp = Blueprint("mappings", __name__)

_ID_KEYS = {Source.GOOGLE_DOC: "docId", Source.GOOGLE_SHEET: "sheetId"}

PREVIEW_LIMIT = 20


def save_mapping(source: Source, url_field: str):
    """Link the document in ``url_field`` of the JSON body to a phone number."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"success": False, "error": "Invalid JSON in request body"}), 400

    phone_number = body.get("phone_number")
    url = body.get(url_field)
    if not phone_number or not url:
        return (
            jsonify({"success": False, "error": f"phone_number and {url_field} are required"}),
            400,
        )

    external_id = extract_document_id(url)
    try:
        mapping = get_config().repository.save_mapping(
            phone_number, source, external_id, name=body.get("name")
        )
    except PersistenceError as e:
        logger.error(f"❌ Failed to save {source.value} mapping: {e}", exc_info=True)
        return jsonify({"success": False, "error": e.message}), 500

    label = source.value.replace("_", " ").title()
    return jsonify(
        {
            "success": True,
            _ID_KEYS[source]: mapping.external_id,
            "message": f"{label} mapping saved successfully",
        }
    )


def mapping_status(source: Source):
    """Report whether a phone number has a linked document and how much of it is stored."""
    phone_number = request.args.get("phone_number")
    if not phone_number:
        return jsonify({"success": False, "error": "phone_number is required"}), 400

    repository = get_config().repository
    try:
        mapping = repository.get_mapping(phone_number, source)
        chunk_count = repository.count_chunks(phone_number, source)
    except PersistenceError as e:
        logger.error(f"❌ Failed to fetch {source.value} status: {e}", exc_info=True)
        return jsonify({"success": False, "error": e.message}), 500

    is_connected = mapping is not None
    has_data = chunk_count > 0
    if not is_connected:
        sync_status = "not_connected"
    elif has_data:
        sync_status = "synced"
    else:
        sync_status = "pending_sync"

    return jsonify(
        {
            "success": True,
            "isConnected": is_connected,
            "hasData": has_data,
            _ID_KEYS[source]: mapping.external_id if mapping else None,
            "name": mapping.name if mapping else None,
            "lastSyncedAt": (
                mapping.last_synced_at.isoformat() if mapping and mapping.last_synced_at else None
            ),
            "chunkCount": chunk_count,
            "lastChunkCount": mapping.last_chunk_count if mapping else 0,
            "syncStatus": sync_status,
        }
    )


def preview(source: Source):
    """Return the linked mapping and the first stored chunks of the partition."""
    phone_number = request.args.get("phone_number")
    if not phone_number:
        return jsonify({"success": False, "error": "phone_number is required"}), 400

    repository = get_config().repository
    label = source.value.replace("_", " ").title()
    try:
        mapping = repository.get_mapping(phone_number, source)
        if mapping is None:
            return jsonify(
                {
                    "success": True,
                    "connected": False,
                    "message": f"No {label} connected",
                    "items": [],
                    "total": 0,
                    "lastSyncedAt": None,
                }
            )
        contents = repository.list_chunk_contents(phone_number, source, limit=PREVIEW_LIMIT)
    except PersistenceError as e:
        logger.error(f"❌ Failed to fetch {source.value} preview: {e}", exc_info=True)
        return jsonify({"success": False, "error": e.message}), 500

    return jsonify(
        {
            "success": True,
            "connected": True,
            _ID_KEYS[source]: mapping.external_id,
            "name": mapping.name,
            "items": contents,
            "total": mapping.last_chunk_count,
            "lastSyncedAt": mapping.last_synced_at.isoformat() if mapping.last_synced_at else None,
        }
    )


@mappings_bp.route("/api/save-google-doc", methods=["POST"])
def save_google_doc():
    """Link a Google Doc to a phone number.

    Expects JSON with:
        - phone_number: WhatsApp number of the business
        - doc_url: Google Doc URL or bare document id
        - name: Optional display name
    """
    return save_mapping(Source.GOOGLE_DOC, "doc_url")


@mappings_bp.route("/api/save-google-sheet", methods=["POST"])
def save_google_sheet():
    """Link a Google Sheet to a phone number.

    Expects JSON with:
        - phone_number: WhatsApp number of the business
        - sheet_url: Google Sheet URL or bare spreadsheet id
        - name: Optional display name
    """
    return save_mapping(Source.GOOGLE_SHEET, "sheet_url")


@mappings_bp.route("/api/google-doc-status", methods=["GET"])
def google_doc_status():
    """Get the linked Google Doc and its sync status for ``?phone_number=``."""
    return mapping_status(Source.GOOGLE_DOC)


@mappings_bp.route("/api/google-sheet-status", methods=["GET"])
def google_sheet_status():
    """Get the linked Google Sheet and its sync status for ``?phone_number=``."""
    return mapping_status(Source.GOOGLE_SHEET)


@mappings_bp.route("/api/doc-preview", methods=["GET"])
def doc_preview():
    """Preview the stored chunks of the Google Doc linked to ``?phone_number=``."""
    return preview(Source.GOOGLE_DOC)


@mappings_bp.route("/api/sheet-preview", methods=["GET"])
def sheet_preview():
    """Preview the stored rows of the Google Sheet linked to ``?phone_number=``."""
    return preview(Source.GOOGLE_SHEET)
