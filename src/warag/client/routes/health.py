"""Health check route."""

import logging

from flask import Blueprint, jsonify

from warag.client.routes.config import get_config

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint.

    Returns:
        JSON with service status
    """
    sync_service = get_config().sync_service
    body = {
        "status": "healthy",
        "sync_service": "initialized" if sync_service else "not initialized",
    }
    if sync_service is not None:
        body["embedding"] = sync_service.applier.describe()
    return jsonify(body)
