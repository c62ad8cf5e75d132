"""Text chunking strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator

from langchain_text_splitters import RecursiveCharacterTextSplitter

from pdf_chat.errors import ConfigurationError
from pdf_chat.ingestion.models import Chunk

if TYPE_CHECKING:
    from langchain_core.documents import Document

STRATEGIES = ("recursive", "fixed")


def validate_chunk_params(chunk_size: int, chunk_overlap: int) -> None:
    """Raise :class:`ConfigurationError` unless the window can advance."""
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
    if chunk_overlap < 0:
        raise ConfigurationError(f"chunk_overlap must not be negative, got {chunk_overlap}")
    if chunk_overlap >= chunk_size:
        raise ConfigurationError(
            f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})"
        )


def chunk_text(
    text: str,
    chunk_size: int = 500,
    chunk_overlap: int = 50,
    *,
    metadata: dict[str, Any] | None = None,
    start_index: int = 0,
) -> Iterator[Chunk]:
    """Yield fixed-size windows over *text*.

    Consecutive chunks share exactly *chunk_overlap* characters and only
    the final chunk may be shorter than *chunk_size*, so dropping the
    leading overlap from every chunk but the first rebuilds *text*.

    Parameters
    ----------
    text:
        Source text.
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of characters repeated at the head of the next chunk.
    metadata:
        Copied onto every chunk, extended with ``chunk_index``.
    start_index:
        Sequence index assigned to the first chunk.

    Raises
    ------
    ConfigurationError
        When ``chunk_overlap >= chunk_size``.
    """
    validate_chunk_params(chunk_size, chunk_overlap)
    return _windows(text, chunk_size, chunk_overlap, metadata or {}, start_index)


def _windows(
    text: str,
    chunk_size: int,
    chunk_overlap: int,
    metadata: dict[str, Any],
    start_index: int,
) -> Iterator[Chunk]:
    step = chunk_size - chunk_overlap
    index = start_index
    offset = 0
    while offset < len(text):
        yield Chunk(
            text=text[offset : offset + chunk_size],
            index=index,
            start=offset,
            metadata={**metadata, "chunk_index": index},
        )
        if offset + chunk_size >= len(text):
            break
        offset += step
        index += 1


def chunk_pages(
    pages: list[Document],
    chunk_size: int = 500,
    chunk_overlap: int = 200,
    *,
    strategy: str = "recursive",
) -> list[Chunk]:
    """Split loader *pages* into chunks, keeping each chunk's page metadata.

    Pages are split independently so every chunk can be traced back to
    the page it came from; ``Chunk.index`` runs across the whole document.

    Parameters
    ----------
    pages:
        Documents produced by a loader, typically one per PDF page.
    chunk_size / chunk_overlap:
        Window bounds in characters.
    strategy:
        ``"recursive"`` splits on paragraph, line, sentence and word
        boundaries via LangChain; ``"fixed"`` uses :func:`chunk_text`.
    """
    validate_chunk_params(chunk_size, chunk_overlap)
    if strategy not in STRATEGIES:
        raise ConfigurationError(f"Unknown chunk strategy {strategy!r}; expected one of {STRATEGIES}")

    chunks: list[Chunk] = []
    if strategy == "fixed":
        for page in pages:
            chunks.extend(
                chunk_text(
                    page.page_content,
                    chunk_size,
                    chunk_overlap,
                    metadata=dict(page.metadata),
                    start_index=len(chunks),
                )
            )
        return chunks

    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=["\n\n", "\n", ". ", " ", ""],
        add_start_index=True,
    )
    for piece in splitter.split_documents(pages):
        meta = dict(piece.metadata)
        start = meta.pop("start_index", 0)
        index = len(chunks)
        chunks.append(
            Chunk(
                text=piece.page_content,
                index=index,
                start=start,
                metadata={**meta, "chunk_index": index},
            )
        )
    return chunks
