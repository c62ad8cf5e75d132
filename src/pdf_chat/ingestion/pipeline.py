"""Ingestion pipeline — parse → chunk → embed → upsert for one uploaded PDF.

Each run mints a fresh namespace so that documents sharing one vector
index never see each other's chunks.  Chunks are embedded and upserted
batch by batch; every batch is reported on its own so a failure tells
the caller how many chunks were stored before it.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, Callable
from uuid import uuid4

from pdf_chat.config import settings
from pdf_chat.errors import ClientInputError, PdfChatError, UpstreamError
from pdf_chat.ingestion.chunker import chunk_pages, validate_chunk_params
from pdf_chat.ingestion.embedder import EmbeddingClient
from pdf_chat.ingestion.loader import load_pdf, temporary_upload
from pdf_chat.ingestion.models import BatchReport, Chunk, IngestionReport, IngestionStage
from pdf_chat.retrieval.base import VectorStoreBase
from pdf_chat.retrieval.models import VectorRecord
from pdf_chat.stages import run_stage

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Turn an uploaded PDF into namespaced vectors.

    Parameters
    ----------
    embedder:
        Client used to embed chunk text.
    store:
        Destination vector store.
    chunk_size / chunk_overlap / strategy:
        Chunking parameters, see :func:`~pdf_chat.ingestion.chunker.chunk_pages`.
    batch_size:
        Chunks embedded and upserted per batch.
    upload_dir:
        Directory for the temporary copy of uploaded bytes.
    timeout:
        Per-stage time limit in seconds (parse, embed, upsert).
    loader:
        ``loader(path, source=...) -> list[Document]``; defaults to
        :func:`~pdf_chat.ingestion.loader.load_pdf`.

    Raises
    ------
    ConfigurationError
        When the chunk parameters cannot advance.
    """

    def __init__(
        self,
        embedder: EmbeddingClient,
        store: VectorStoreBase,
        *,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
        strategy: str = settings.chunk_strategy,
        batch_size: int = settings.upsert_batch_size,
        upload_dir: str | Path | None = settings.upload_dir,
        timeout: float | None = None,
        loader: Callable[..., list[Document]] = load_pdf,
    ) -> None:
        validate_chunk_params(chunk_size, chunk_overlap)
        self.embedder = embedder
        self.store = store
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.strategy = strategy
        self.batch_size = max(1, batch_size)
        self.upload_dir = upload_dir
        self.timeout = timeout
        self._loader = loader

    # -- public API -----------------------------------------------------------

    def ingest_upload(self, data: bytes, filename: str) -> IngestionReport:
        """Ingest uploaded PDF bytes; the temporary copy is always removed."""
        if not data:
            raise ClientInputError("Uploaded file is empty")
        with temporary_upload(data, filename, self.upload_dir) as path:
            return self.ingest_file(path, source=filename)

    def ingest_file(self, path: str | Path, *, source: str | None = None) -> IngestionReport:
        """Ingest a PDF already on disk into a freshly minted namespace."""
        report = IngestionReport(namespace=str(uuid4()))
        source = source or Path(path).name
        logger.info("Ingesting %s into namespace %s", source, report.namespace)

        try:
            pages = run_stage("parse", self._loader, path, source=source, timeout=self.timeout)
            report.original_page_count = len(pages)
            report.stage = IngestionStage.PARSED

            chunks = chunk_pages(pages, self.chunk_size, self.chunk_overlap, strategy=self.strategy)
            report.chunk_count = len(chunks)
            report.stage = IngestionStage.CHUNKED

            self._store_chunks(report, chunks)
            report.stage = IngestionStage.STORED
        except PdfChatError:
            logger.error("Ingestion of %s failed after stage %s", source, report.stage.value)
            report.stage = IngestionStage.FAILED
            raise

        report.stage = IngestionStage.DONE
        logger.info(
            "Stored %d/%d chunks from %d page(s) of %s",
            report.stored_count,
            report.chunk_count,
            report.original_page_count,
            source,
        )
        return report

    # -- internals ------------------------------------------------------------

    def _store_chunks(self, report: IngestionReport, chunks: list[Chunk]) -> None:
        total = math.ceil(len(chunks) / self.batch_size)
        for number, start in enumerate(range(0, len(chunks), self.batch_size), 1):
            batch = chunks[start : start + self.batch_size]
            batch_report = BatchReport(batch=number, attempted=len(batch))
            report.batches.append(batch_report)
            try:
                vectors = run_stage(
                    "embed",
                    self.embedder.embed_many,
                    [c.text for c in batch],
                    timeout=self.timeout,
                )
                records = [_to_record(report.namespace, chunk, vector) for chunk, vector in zip(batch, vectors)]
                stored = run_stage("upsert", self.store.upsert, report.namespace, records, timeout=self.timeout)
            except UpstreamError as exc:
                batch_report.error = exc.message
                logger.error("Batch %d/%d failed at %s: %s", number, total, exc.stage, exc.message)
                raise UpstreamError(
                    exc.stage,
                    exc.message,
                    stored_count=report.stored_count,
                    attempted_count=len(chunks),
                ) from exc

            batch_report.stored = stored
            report.stored_count += stored
            logger.info("Processed batch %d/%d", number, total)


def _to_record(namespace: str, chunk: Chunk, vector: list[float]) -> VectorRecord:
    return VectorRecord(
        id=f"{namespace}-{chunk.index}",
        values=vector,
        metadata={**chunk.metadata, "text": chunk.text},
    )
