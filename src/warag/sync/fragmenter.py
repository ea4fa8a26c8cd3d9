"""Turn fetched document text and sheet rows into chunk texts."""

from collections.abc import Sequence
from typing import Any

from warag.constants import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE, SHEET_CELL_SEPARATOR
from warag.errors import ConfigurationError


def chunk_text(
    text: str, chunk_size: int = DEFAULT_CHUNK_SIZE, overlap: int = DEFAULT_CHUNK_OVERLAP
) -> list[str]:
    """Split text into overlapping chunks based on character count.

    Consecutive chunks share exactly ``overlap`` characters and no chunk is
    longer than ``chunk_size``. The last chunk may be shorter. Whitespace is
    kept as-is.

    Args:
        text: The text to chunk
        chunk_size: Maximum number of characters per chunk (default: 1600)
        overlap: Number of characters to overlap between chunks (default: 200)

    Returns:
        list[str]: List of text chunks, empty for empty text

    Raises:
        ConfigurationError: If overlap is not smaller than chunk_size, or either is negative
    """
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ConfigurationError(f"overlap must not be negative, got {overlap}")
    if overlap >= chunk_size:
        raise ConfigurationError(
            f"overlap ({overlap}) must be smaller than chunk_size ({chunk_size})"
        )

    chunks = []
    step = chunk_size - overlap
    start = 0

    while start < len(text):
        end = start + chunk_size
        chunks.append(text[start:end])
        if end >= len(text):
            break
        start += step

    return chunks


def rows_to_texts(rows: Sequence[Sequence[Any]]) -> list[str]:
    """Flatten sheet rows into one chunk text per data row.

    The first row is the header and is skipped. Each remaining row keeps its
    non-empty, stripped cells joined with " | "; rows with no content are dropped.
    """
    texts = []
    for row in rows[1:]:
        cells = [str(cell if cell is not None else "").strip() for cell in row]
        text = SHEET_CELL_SEPARATOR.join(cell for cell in cells if cell)
        if text:
            texts.append(text)
    return texts
