"""FastMCP server exposing tenant-scoped retrieval and source sync."""

import asyncio
import logging
import os
from typing import Any

from dotenv import load_dotenv
from fastmcp import FastMCP

from warag.constants import DEFAULT_MCP_HOST, DEFAULT_MCP_PORT, DEFAULT_TOP_K
from warag.errors import SyncError
from warag.service.database import search_chunks
from warag.service.factory import create_sync_service
from warag.sync import Source, SyncService

# Configure logging
log_level = os.getenv("LOG_LEVEL", "DEBUG")
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()
logger.debug("Environment variables loaded for MCP server")

# Create FastMCP instance
mcp = FastMCP("warag Knowledge Sync")

_sync_service: SyncService | None = None


def get_sync_service() -> SyncService:
    """Return the process-wide sync service, building it on first use."""
    global _sync_service
    if _sync_service is None:
        _sync_service = create_sync_service()
    return _sync_service


async def retrieve_tenant_chunks_impl(
    phone_number: str,
    query: str,
    top_k: int = DEFAULT_TOP_K,
    source: str | None = None,
) -> list[dict[str, Any]]:
    logger.debug(
        f"MCP Tool: Parameters - phone_number={phone_number}, query='{query[:100]}...', "
        f"top_k={top_k}, source={source}"
    )

    try:
        results = search_chunks(
            query=query,
            phone_number=phone_number,
            top_k=top_k,
            source=Source.parse(source) if source else None,
        )
        logger.info(f"✅ MCP Tool: Returning {len(results)} chunks for {phone_number}")
        return results
    except Exception as e:
        error_msg = f"Unexpected error: {type(e).__name__}: {e}"
        logger.error(f"❌ MCP Tool: {error_msg}", exc_info=True)
        raise ValueError(error_msg) from e


async def sync_tenant_source_impl(phone_number: str, source: str) -> dict[str, Any]:
    logger.info(f"🔄 MCP Tool sync_tenant_source: {source} for {phone_number}")

    try:
        parsed = Source.parse(source)
    except ValueError:
        return {"success": False, "message": f"Unknown source: {source}"}

    try:
        result = await asyncio.to_thread(get_sync_service().sync, phone_number, parsed)
        return result.to_dict()
    except SyncError as e:
        response = e.result.to_dict() if e.result is not None else {}
        response.update({"success": False, "message": e.message})
        return response
    except Exception as e:
        error_msg = f"Sync error: {type(e).__name__}: {e}"
        logger.error(f"❌ MCP Tool: {error_msg}", exc_info=True)
        return {"success": False, "message": error_msg}


@mcp.tool()
async def retrieve_tenant_chunks(
    phone_number: str,
    query: str,
    top_k: int = DEFAULT_TOP_K,
    source: str | None = None,
) -> list[dict[str, Any]]:
    """
    Searches one business's knowledge base for text chunks that are semantically
    similar to a customer's message. Only chunks owned by phone_number are
    returned. Use this tool to find information to answer a customer.

    Args:
        phone_number: WhatsApp phone number of the business
        query: The search query text
        top_k: Number of top results to return (default: 5)
        source: Optional "google_doc" or "google_sheet" (None = both)
    """
    return await retrieve_tenant_chunks_impl(phone_number, query, top_k, source)


@mcp.tool()
async def sync_tenant_source(phone_number: str, source: str) -> dict[str, Any]:
    """
    Brings a business's stored chunks in line with its linked Google Doc or
    Sheet. Only new or changed content is embedded.

    Args:
        phone_number: WhatsApp phone number of the business
        source: "google_doc" or "google_sheet" ("doc" and "sheet" also work)

    Returns:
        dict with success, message and the added/updated/deleted/unchanged counts
    """
    return await sync_tenant_source_impl(phone_number, source)


def main() -> None:
    """Entry point for the MCP server command-line interface."""
    logger.info("🚀 Starting warag MCP Server...")
    host = os.getenv("MCP_HOST", DEFAULT_MCP_HOST)
    port = int(os.getenv("MCP_PORT", str(DEFAULT_MCP_PORT)))
    mcp.run(transport="sse", host=host, port=port)


if __name__ == "__main__":
    main()
