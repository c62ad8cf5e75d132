"""Request / response schemas of the HTTP API (camelCase on the wire)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pdf_chat.ingestion.models import IngestionReport
from pdf_chat.qa.pipeline import Answer


class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QueryRequest(_Schema):
    """Incoming question; both fields are validated by the query pipeline."""

    question: str | None = None
    namespace: str | None = None


class Source(_Schema):
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class QueryResponse(_Schema):
    """Answer plus the chunks it was generated from."""

    answer: str
    sources: list[Source] = Field(default_factory=list)

    @classmethod
    def from_answer(cls, answer: Answer) -> QueryResponse:
        return cls(
            answer=answer.answer,
            sources=[Source(content=r.content, metadata=r.citation.metadata) for r in answer.sources],
        )


class UploadResponse(_Schema):
    """Result of a successful PDF ingestion."""

    message: str = "PDF processed and stored successfully"
    namespace: str
    chunk_count: int
    original_page_count: int
    stored_count: int

    @classmethod
    def from_report(cls, report: IngestionReport) -> UploadResponse:
        return cls(
            namespace=report.namespace,
            chunk_count=report.chunk_count,
            original_page_count=report.original_page_count,
            stored_count=report.stored_count,
        )


class ErrorResponse(_Schema):
    error: str
    details: dict[str, Any] | None = None
