"""Flask route blueprints for the warag web application."""

from warag.client.routes.config import get_config, init_config
from warag.client.routes.health import health_bp
from warag.client.routes.mappings import mappings_bp
from warag.client.routes.sync import sync_bp

__all__ = [
    "health_bp",
    "mappings_bp",
    "sync_bp",
    "init_config",
    "get_config",
]
