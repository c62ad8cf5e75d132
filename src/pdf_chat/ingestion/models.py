"""Domain models produced by the ingestion pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """A bounded, overlapping slice of extracted document text.

    Attributes
    ----------
    text:
        The chunk content.
    index:
        Sequence index across the whole document (0-based).
    start:
        Character offset of ``text`` inside the page / source text it
        was cut from.
    metadata:
        Provenance inherited from the source page (``source``, ``page``)
        plus ``chunk_index``.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    index: int
    start: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)


class IngestionStage(str, Enum):
    """Lifecycle of a single ingestion run."""

    RECEIVED = "received"
    PARSED = "parsed"
    CHUNKED = "chunked"
    STORED = "stored"
    DONE = "done"
    FAILED = "failed"


class BatchReport(BaseModel):
    """Outcome of one embed-and-upsert batch."""

    batch: int
    attempted: int
    stored: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class IngestionReport(BaseModel):
    """Summary returned to the caller after a document has been ingested."""

    namespace: str
    chunk_count: int = 0
    original_page_count: int = 0
    stored_count: int = 0
    stage: IngestionStage = IngestionStage.RECEIVED
    batches: list[BatchReport] = Field(default_factory=list)
