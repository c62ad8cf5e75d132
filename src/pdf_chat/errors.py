"""Exception hierarchy shared by the ingestion, retrieval and QA layers.

The serving layer maps these onto HTTP responses:

* :class:`ClientInputError` → 400
* :class:`UpstreamError` → 500 (details only exposed in development)
"""

from __future__ import annotations


class PdfChatError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(PdfChatError):
    """Invalid static configuration, e.g. a chunk overlap that never advances."""


class ClientInputError(PdfChatError):
    """The caller supplied a missing or malformed input."""


class UpstreamError(PdfChatError):
    """A remote service (parser, embedder, vector store, LLM) failed.

    Parameters
    ----------
    stage:
        Pipeline stage that failed — ``parse``, ``embed``, ``upsert``,
        ``search`` or ``complete``.
    message:
        Human-readable description of the failure.
    stored_count / attempted_count:
        For ingestion failures, how many chunks made it into the vector
        store before the failing batch versus how many were attempted.
    """

    def __init__(
        self,
        stage: str,
        message: str,
        *,
        stored_count: int | None = None,
        attempted_count: int | None = None,
    ) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage
        self.message = message
        self.stored_count = stored_count
        self.attempted_count = attempted_count


class ResourceCleanupFailure(PdfChatError):
    """A temporary resource could not be released. Logged, never surfaced."""
