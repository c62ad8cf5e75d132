"""Semantic retriever — namespaced search with citation tracking.

Usage::

    from pdf_chat.retrieval.retriever import SemanticRetriever

    retriever = SemanticRetriever(store, embedder)
    results   = retriever.search(namespace, "What is the refund policy?", k=5)
    for r in results:
        print(r.citation.source, r.content[:80])
"""

from __future__ import annotations

import logging
from typing import Any

from pdf_chat.errors import ClientInputError
from pdf_chat.ingestion.embedder import EmbeddingClient
from pdf_chat.retrieval.base import VectorStoreBase
from pdf_chat.retrieval.models import Citation, RetrievalResult
from pdf_chat.stages import run_stage

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """High-level retriever that wraps any :class:`VectorStoreBase`.

    Parameters
    ----------
    store:
        A concrete vector-store backend.
    embedder:
        Client used to embed query text.
    default_k:
        Default number of results returned by :meth:`search`.
    timeout:
        Per-stage time limit in seconds for the embed and search calls.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        embedder: EmbeddingClient,
        *,
        default_k: int = 5,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self.default_k = default_k
        self.timeout = timeout

    @property
    def store(self) -> VectorStoreBase:
        return self._store

    # -- public API -----------------------------------------------------------

    def search(self, namespace: str, query: str, *, k: int | None = None) -> list[RetrievalResult]:
        """Embed *query* and return the closest chunks of *namespace*.

        Returns
        -------
        list[RetrievalResult]
            At most *k* results ordered by descending similarity; empty
            when the namespace holds no records.

        Raises
        ------
        UpstreamError
            When embedding or the vector-store query fails.
        """
        _require_namespace(namespace)
        embedding = run_stage("embed", self._embedder.embed, query, timeout=self.timeout)
        return self.search_by_embedding(namespace, embedding, k=k)

    def search_by_embedding(
        self,
        namespace: str,
        embedding: list[float],
        *,
        k: int | None = None,
    ) -> list[RetrievalResult]:
        """Same as :meth:`search` but accepts a pre-computed embedding."""
        _require_namespace(namespace)
        k = k or self.default_k
        raw_hits = run_stage(
            "search",
            self._store.similarity_search,
            namespace,
            embedding,
            k=k,
            timeout=self.timeout,
        )
        logger.debug("Namespace %s returned %d hit(s)", namespace, len(raw_hits))
        return self._to_results(raw_hits)[:k]

    # -- internals ------------------------------------------------------------

    @staticmethod
    def _to_results(raw_hits: list[dict[str, Any]]) -> list[RetrievalResult]:
        results: list[RetrievalResult] = []
        for hit in sorted(raw_hits, key=lambda h: h.get("score") or 0.0, reverse=True):
            meta = hit.get("metadata", {})
            citation = Citation(
                document_id=hit.get("id"),
                source=meta.get("source", "unknown"),
                chunk_index=meta.get("chunk_index"),
                page=meta.get("page"),
                score=hit.get("score"),
                metadata=meta,
            )
            results.append(RetrievalResult(content=hit.get("content", ""), citation=citation))
        return results


def _require_namespace(namespace: str) -> None:
    if not namespace or not namespace.strip():
        raise ClientInputError("Namespace is required")
