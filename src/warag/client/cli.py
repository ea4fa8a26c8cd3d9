"""Command-line interface for warag using Click."""

import click
from dotenv import load_dotenv

from warag.client.cli_helpers import (
    ensure_database_exists,
    format_search_result,
    format_sync_result,
    get_database_info,
)
from warag.constants import DEFAULT_TOP_K
from warag.errors import PersistenceError, SyncError
from warag.service.database import (
    ChunkRepository,
    count_chunks,
    create_document_store,
    database_exists,
    delete_database,
    search_chunks,
)
from warag.service.factory import create_sync_service
from warag.service.sources import extract_document_id
from warag.sync import Source

# Load environment variables
load_dotenv()

SOURCE_CHOICES = ["doc", "sheet", "google_doc", "google_sheet"]


@click.command()
@click.argument("phone_number", type=str)
@click.argument("url", type=str)
@click.option(
    "--source",
    type=click.Choice(SOURCE_CHOICES),
    default="doc",
    help="Kind of document being linked (default: 'doc')",
)
@click.option("--name", type=str, default=None, help="Optional display name for the document")
@click.option(
    "--create-database",
    "create_database_flag",
    is_flag=True,
    default=False,
    help="Create the RavenDB database if it doesn't exist",
)
def link(
    phone_number: str, url: str, source: str, name: str | None, create_database_flag: bool
) -> None:
    """Link a Google Doc or Sheet at URL to PHONE_NUMBER.

    Linking resets the sync state; run warag-sync afterwards.

    Example:
        warag-link +15551234567 https://docs.google.com/document/d/abc123/edit
        warag-link +15551234567 https://docs.google.com/spreadsheets/d/xyz/edit --source sheet
    """
    ensure_database_exists(create_if_missing=create_database_flag)

    parsed = Source.parse(source)
    external_id = extract_document_id(url)

    store = create_document_store()
    try:
        ChunkRepository(store).save_mapping(phone_number, parsed, external_id, name=name)
    except PersistenceError as e:
        click.echo(f"✗ Error saving mapping: {e}", err=True)
        raise click.Abort()
    finally:
        store.close()

    click.echo(f"🔗 Linked {parsed.value} '{external_id}' to {phone_number}")
    click.echo(f"\nTo sync it, run:\n  warag-sync {phone_number} --source {source}")


@click.command()
@click.argument("phone_number", type=str)
@click.option(
    "--source",
    type=click.Choice(SOURCE_CHOICES),
    default="doc",
    help="Source to sync (default: 'doc')",
)
@click.option(
    "--create-database",
    "create_database_flag",
    is_flag=True,
    default=False,
    help="Create the RavenDB database if it doesn't exist",
)
def sync(phone_number: str, source: str, create_database_flag: bool) -> None:
    """Sync the Google Doc or Sheet linked to PHONE_NUMBER.

    Only new or changed chunks are embedded; chunks removed from the
    document are deleted.

    Example:
        warag-sync +15551234567
        warag-sync +15551234567 --source sheet
    """
    ensure_database_exists(create_if_missing=create_database_flag)

    parsed = Source.parse(source)
    click.echo(f"🔄 Syncing {parsed.value} for {phone_number}...")

    service = create_sync_service()
    try:
        result = service.sync(phone_number, parsed)
    except SyncError as e:
        click.echo(f"\n✗ Sync failed: {e.message}", err=True)
        if e.result is not None:
            click.echo(format_sync_result(e.result), err=True)
        raise click.Abort()
    finally:
        service.repository.store.close()

    click.echo(f"✓ {result.message}")
    click.echo(format_sync_result(result))


@click.command()
@click.option("--phone", "phone_number", type=str, default=None, help="Only count this tenant")
@click.option(
    "--source",
    type=click.Choice(SOURCE_CHOICES),
    default=None,
    help="Only count chunks from this source",
)
def count(phone_number: str | None, source: str | None) -> None:
    """Show the number of stored chunks.

    Example:
        warag-count
        warag-count --phone +15551234567 --source sheet
    """
    ensure_database_exists()
    parsed = Source.parse(source) if source else None

    try:
        chunk_count = count_chunks(phone_number, parsed)
    except PersistenceError as e:
        click.echo(f"✗ Error counting chunks: {e}", err=True)
        raise click.Abort()

    scope = f" for {phone_number}" if phone_number else ""
    click.echo(f"📊 Database contains {chunk_count} chunk(s){scope}")


@click.command()
@click.argument("phone_number", type=str)
@click.argument("query", type=str)
@click.option(
    "--top-k", type=int, default=DEFAULT_TOP_K, help="Number of results to return (default: 5)"
)
@click.option(
    "--source",
    type=click.Choice(SOURCE_CHOICES),
    default=None,
    help="Only search chunks from this source",
)
def search(phone_number: str, query: str, top_k: int, source: str | None) -> None:
    """Search the chunks of PHONE_NUMBER for QUERY using vector search.

    Example:
        warag-search +15551234567 "opening hours"
        warag-search +15551234567 "price list" --top-k 3
    """
    ensure_database_exists()

    click.echo(f"🔍 Searching {phone_number} for: '{query}'")
    click.echo(f"   Returning top {top_k} results...\n")

    try:
        results = search_chunks(
            query,
            phone_number,
            top_k=top_k,
            source=Source.parse(source) if source else None,
        )

        if not results:
            click.echo("No results found.")
            return

        click.echo(f"✅ Found {len(results)} result(s):\n")
        for i, result in enumerate(results, 1):
            click.echo(format_search_result(i, result))

    except ConnectionError as e:
        click.echo(f"✗ Connection error: {e}", err=True)
        click.echo("\nPlease ensure the embedding service and RavenDB are running.", err=True)
        raise click.Abort()
    except ValueError as e:
        click.echo(f"✗ Error: {e}", err=True)
        raise click.Abort()
    except Exception as e:
        click.echo(f"✗ Unexpected error: {e}", err=True)
        raise click.Abort()


@click.command()
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation prompt")
def delete_db(yes: bool) -> None:
    """Delete the RavenDB database and all its contents.

    WARNING: This is irreversible and deletes every tenant's chunks and links.

    Example:
        warag-delete-db          # Will prompt for confirmation
        warag-delete-db --yes    # Skip confirmation
    """
    url, db_name, chunk_count = get_database_info()

    if not database_exists():
        click.echo(f"✓ Database '{db_name}' does not exist at {url}")
        return

    if not yes:
        click.echo(f"⚠️  WARNING: You are about to delete the database '{db_name}'")
        click.echo(f"   Location: {url}\n")
        click.echo("This will permanently delete:")
        click.echo("  • All synced chunks and embeddings")
        click.echo("  • All Google Doc and Sheet links")
        click.echo("  • All indexes\n")

        if chunk_count is not None:
            click.echo(f"📊 Current database contains: {chunk_count} chunk(s)\n")

        if not click.confirm("Are you sure you want to proceed?", default=False):
            click.echo("Deletion cancelled.")
            return

    click.echo(f"🗑️  Deleting database '{db_name}'...")
    try:
        delete_database()
        click.echo(f"✓ Database '{db_name}' successfully deleted!")
        click.echo("\nTo create a new database, run:")
        click.echo("  warag-link <phone> <url> --create-database")
    except Exception as e:
        click.echo(f"✗ Error deleting database: {e}", err=True)
        raise click.Abort()


if __name__ == "__main__":
    sync()
