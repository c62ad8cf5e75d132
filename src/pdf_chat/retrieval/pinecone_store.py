"""Pinecone implementation of the vector-store abstraction.

Pinecone partitions an index into native namespaces, so namespace
isolation is enforced server-side.  Pinecone has no document field: the
chunk text is stored in the ``text`` metadata key.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from pdf_chat.config import settings
from pdf_chat.retrieval.base import VectorStoreBase, flatten_metadata
from pdf_chat.retrieval.models import VectorRecord

logger = logging.getLogger(__name__)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read *name* from SDK response objects and plain dicts alike."""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class PineconeVectorStore(VectorStoreBase):
    """Pinecone-backed vector store.

    Parameters
    ----------
    index_name:
        Name of an existing Pinecone index.
    api_key:
        Pinecone API key, used when *index* is not given.
    index:
        Pre-built ``pinecone.Index`` handle (tests pass a mock).
    """

    def __init__(
        self,
        index_name: str = settings.index_name,
        *,
        api_key: str = settings.pinecone_api_key,
        index: Any | None = None,
    ) -> None:
        super().__init__(index_name)
        if index is None:
            from pinecone import Pinecone

            index = Pinecone(api_key=api_key).Index(index_name)
        self._index = index

    # -- VectorStoreBase overrides --------------------------------------------

    def upsert(self, namespace: str, records: Sequence[VectorRecord]) -> int:
        if not records:
            return 0
        vectors = [
            {
                "id": record.id,
                "values": record.values,
                "metadata": flatten_metadata(record.metadata),
            }
            for record in records
        ]
        response = self._index.upsert(vectors=vectors, namespace=namespace)
        count = _field(response, "upserted_count")
        return count if isinstance(count, int) else len(vectors)

    def similarity_search(
        self,
        namespace: str,
        query_embedding: list[float],
        *,
        k: int = 5,
    ) -> list[dict[str, Any]]:
        if k <= 0:
            return []
        response = self._index.query(
            vector=query_embedding,
            top_k=k,
            namespace=namespace,
            include_metadata=True,
        )

        hits: list[dict[str, Any]] = []
        for match in _field(response, "matches") or []:
            meta = dict(_field(match, "metadata") or {})
            content = meta.pop("text", "")
            hits.append(
                {
                    "id": _field(match, "id"),
                    "content": content or "",
                    "score": float(_field(match, "score", 0.0) or 0.0),
                    "metadata": meta,
                }
            )
        hits.sort(key=lambda h: h["score"], reverse=True)
        return hits[:k]

    def health_check(self) -> bool:
        try:
            self._index.describe_index_stats()
            return True
        except Exception:
            logger.warning("Pinecone health-check failed", exc_info=True)
            return False
