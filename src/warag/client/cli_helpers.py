"""Helper functions for CLI commands."""

import logging

import click

from warag.constants import CONTENT_PREVIEW_LENGTH
from warag.errors import PersistenceError
from warag.service.database import (
    RavenDBConfig,
    count_chunks,
    create_database,
    database_exists,
)
from warag.sync import SyncResult

logger = logging.getLogger(__name__)


def ensure_database_exists(create_if_missing: bool = False) -> bool:
    """Check if database exists, optionally create it.

    Args:
        create_if_missing: If True, attempt to create the database

    Returns:
        True if database exists (or was created)

    Raises:
        click.Abort: If database doesn't exist and can't be created
    """
    if database_exists():
        return True

    if create_if_missing:
        click.echo("Database does not exist. Creating database...")
        try:
            create_database()
            click.echo("✓ Database created successfully!")
            return True
        except Exception as e:
            click.echo(f"✗ Failed to create database: {e}", err=True)
            click.echo("\nPlease ensure RavenDB is running and accessible.", err=True)
            raise click.Abort()

    click.echo("✗ Error: Database does not exist!", err=True)
    click.echo("\nPlease create the database first using:", err=True)
    click.echo("  warag-link <phone> <url> --create-database", err=True)
    raise click.Abort()


def format_search_result(index: int, result: dict, max_length: int = CONTENT_PREVIEW_LENGTH) -> str:
    """Format a search result for display.

    Args:
        index: Result number (1-based)
        result: Search result dict with score, source and content
        max_length: Maximum content length before truncation

    Returns:
        Formatted string for display
    """
    score = result.get("score", 0.0)
    content = result["content"]
    display_content = content[:max_length] + "..." if len(content) > max_length else content

    lines = [
        f"{index}. [{result.get('source', 'unknown')}] (score: {score:.4f})",
        f"   {display_content}",
        "",
    ]
    return "\n".join(lines)


def format_sync_result(result: SyncResult) -> str:
    """Format a sync outcome as a short multi-line summary."""
    lines = [
        f"  Total:     {result.total}",
        f"  Added:     {result.added}",
        f"  Updated:   {result.updated}",
        f"  Deleted:   {result.deleted}",
        f"  Unchanged: {result.unchanged}",
        f"  Embedded:  {result.embedded}",
    ]
    if result.synced_at:
        lines.append(f"  Synced at: {result.synced_at.isoformat()}")
    return "\n".join(lines)


def get_database_info() -> tuple[str, str, int | None]:
    """Get database connection info and chunk count.

    Returns:
        Tuple of (url, database_name, chunk_count or None if the count failed)
    """
    url = RavenDBConfig.get_url()
    db_name = RavenDBConfig.get_database_name()

    chunk_count = None
    try:
        chunk_count = count_chunks()
    except PersistenceError as e:
        logger.warning(f"⚠️ Could not count chunks: {e}")

    return url, db_name, chunk_count
