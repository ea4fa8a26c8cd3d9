"""Flask web application for linking and syncing tenant knowledge sources.

This module serves the REST API a WhatsApp business dashboard uses to link
a Google Doc or Sheet to a phone number, trigger a sync, and read the sync
status.
"""

import logging
import os

from dotenv import load_dotenv
from flask import Flask

from warag.client.routes import health_bp, init_config, mappings_bp, sync_bp
from warag.service.factory import create_sync_service

# Configure logging
log_level = os.getenv("LOG_LEVEL", "DEBUG")
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()
logger.debug("Environment variables loaded")

# Create Flask app
app = Flask(__name__)
logger.debug("Flask app created")

# Register blueprints
app.register_blueprint(sync_bp)
app.register_blueprint(mappings_bp)
app.register_blueprint(health_bp)


def initialize_services():
    """Initialize the sync service and its repository on startup."""
    logger.info("🔧 Initializing services...")

    sync_service = create_sync_service()
    logger.info("✅ Sync service initialized successfully")

    # Initialize route configuration
    init_config(sync_service=sync_service, repository=sync_service.repository)


def create_app():
    """Factory function for creating the Flask application.

    This function is used by WSGI servers like gunicorn to create the app.
    It initializes services before returning the app instance.

    Returns:
        Flask: The configured Flask application instance
    """
    initialize_services()
    return app


def main() -> None:
    """Entry point for the Flask application command-line interface."""
    print("🚀 Starting warag Flask application...")

    # Initialize services
    print("📦 Initializing sync services...")
    initialize_services()
    print("✅ Services initialized successfully")

    # Run Flask app
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", "5000"))
    debug = os.getenv("FLASK_ENV", "development") == "development"

    print(f"🌐 Starting Flask server on http://{host}:{port}")
    print(f"🔧 Debug mode: {debug}")
    print("📝 Press CTRL+C to quit")

    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()
