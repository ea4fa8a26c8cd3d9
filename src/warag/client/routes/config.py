"""Shared configuration for route modules."""

from dataclasses import dataclass
from typing import Any


@dataclass
class RouteConfig:
    """Configuration container for Flask route dependencies.

    Routes read their collaborators from here instead of module globals,
    so tests can swap them with mocks.
    """

    sync_service: Any = None
    repository: Any = None


# Single shared config instance
_config = RouteConfig()


def get_config() -> RouteConfig:
    """Get the shared route configuration.

    Returns:
        RouteConfig instance with current settings
    """
    return _config


def init_config(sync_service: Any = None, repository: Any = None) -> None:
    """Initialize the shared route configuration.

    Args:
        sync_service: SyncService instance
        repository: ChunkRepository used for mappings and counts
    """
    if sync_service is not None:
        _config.sync_service = sync_service
    if repository is not None:
        _config.repository = repository
