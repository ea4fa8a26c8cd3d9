"""Sync API routes for Google Docs and Sheets."""

import logging

from flask import Blueprint, jsonify, request

from warag.client.routes.config import get_config
from warag.errors import (
    MappingNotFoundError,
    SourceFetchError,
    SyncError,
    SyncInProgressError,
)
from warag.sync import Source, SyncResult

logger = logging.getLogger(__name__)

sync_bp = Blueprint("sync", __name__)


def format_sync_result(result: SyncResult) -> dict:
    """Build the JSON body for a sync outcome.

    Docs report chunk counts, sheets report row counts (one row per chunk).
    """
    noun = "Chunks" if result.source is Source.GOOGLE_DOC else "Rows"
    return {
        "success": result.success,
        "message": result.message,
        f"total{noun}": result.total,
        f"new{noun}": result.added,
        f"updated{noun}": result.updated,
        f"deleted{noun}": result.deleted,
        f"unchanged{noun}": result.unchanged,
        "embedded": result.embedded,
        "lastSyncedAt": result.synced_at.isoformat() if result.synced_at else None,
    }


def error_status(error: SyncError) -> int:
    """Map a sync failure to an HTTP status code."""
    if isinstance(error, MappingNotFoundError):
        return 404
    if isinstance(error, SyncInProgressError):
        return 409
    if isinstance(error, SourceFetchError):
        return error.status_code if error.status_code in (403, 404) else 502
    # EmbeddingError, PersistenceError
    return 500


def run_sync(source: Source):
    """Parse the request, run one sync and translate the outcome to a response."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"success": False, "error": "Invalid JSON in request body"}), 400

    phone_number = body.get("phone_number")
    if not phone_number:
        return jsonify({"success": False, "error": "phone_number is required"}), 400

    config = get_config()
    try:
        result = config.sync_service.sync(phone_number, source)
        return jsonify(format_sync_result(result))
    except SyncError as e:
        status = error_status(e)
        logger.warning(f"⚠️ Sync of {source.value} for {phone_number} returned {status}: {e}")
        payload = format_sync_result(e.result) if e.result is not None else {"success": False}
        payload["error"] = e.message
        return jsonify(payload), status
    except Exception as e:
        logger.error(f"❌ Unexpected error syncing {source.value}: {e}", exc_info=True)
        return jsonify({"success": False, "error": f"Unexpected error: {str(e)}"}), 500


@sync_bp.route("/api/sync-google-doc", methods=["POST"])
def sync_google_doc():
    """Sync the Google Doc linked to a phone number.

    Expects JSON with:
        - phone_number: WhatsApp number of the business

    Returns:
        JSON response with chunk counts
    """
    logger.info("📥 Received Google Doc sync request")
    return run_sync(Source.GOOGLE_DOC)


@sync_bp.route("/api/sync-google-sheet", methods=["POST"])
def sync_google_sheet():
    """Sync the Google Sheet linked to a phone number.

    Expects JSON with:
        - phone_number: WhatsApp number of the business

    Returns:
        JSON response with row counts
    """
    logger.info("📥 Received Google Sheet sync request")
    return run_sync(Source.GOOGLE_SHEET)
