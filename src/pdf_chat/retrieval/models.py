"""Domain models for vector records, retrieval results and citation tracking."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class VectorRecord(BaseModel):
    """One ``(id, vector, metadata)`` triple destined for a namespace.

    The chunk text travels in ``metadata["text"]`` so that stores
    without a dedicated document field can return it from a search.
    """

    id: str
    values: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("values")
    @classmethod
    def _non_empty(cls, values: list[float]) -> list[float]:
        if not values:
            raise ValueError("vector must not be empty")
        return values

    @property
    def text(self) -> str:
        return str(self.metadata.get("text", ""))


class Citation(BaseModel):
    """Where a retrieved chunk came from.

    Attributes
    ----------
    document_id:
        Record id of the chunk (``None`` when the store omits it).
    source:
        File name of the uploaded PDF.
    chunk_index:
        Position of the chunk within its upload.
    page:
        Page the chunk was cut from.
    score:
        Similarity score returned by the vector store (higher = closer).
    metadata:
        The chunk metadata as stored, minus the chunk text.
    """

    document_id: str | None = None
    source: str = "unknown"
    chunk_index: int | None = None
    page: int | None = None
    score: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class RetrievalResult(BaseModel):
    """A single retrieved passage together with its citation."""

    content: str
    citation: Citation
