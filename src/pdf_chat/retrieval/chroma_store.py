"""Chroma implementation of the vector-store abstraction.

Chroma has no namespaces, so every record carries a ``namespace``
metadata field that each query filters on, and record ids are prefixed
with their namespace to keep them unique inside the shared collection.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import chromadb

from pdf_chat.config import settings
from pdf_chat.retrieval.base import VectorStoreBase, flatten_metadata
from pdf_chat.retrieval.models import VectorRecord

logger = logging.getLogger(__name__)

_NAMESPACE_KEY = "namespace"
_RECORD_ID_KEY = "record_id"
_INTERNAL_KEYS = {_NAMESPACE_KEY, _RECORD_ID_KEY, "text"}


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Parameters
    ----------
    index_name:
        Name of the Chroma collection.
    host / port:
        Chroma server location, used when *client* is not given.
    client:
        Pre-built Chroma client (e.g. ``chromadb.EphemeralClient()``).
    distance_metric:
        HNSW space — ``cosine`` | ``l2`` | ``ip``.
    """

    def __init__(
        self,
        index_name: str = settings.index_name,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        client: Any | None = None,
        distance_metric: str = "cosine",
    ) -> None:
        super().__init__(index_name)
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)
        self._distance_metric = distance_metric
        self._collection = self._client.get_or_create_collection(
            name=index_name,
            metadata={"hnsw:space": distance_metric},
        )

    # -- VectorStoreBase overrides --------------------------------------------

    def upsert(self, namespace: str, records: Sequence[VectorRecord]) -> int:
        if not records:
            return 0
        ids: list[str] = []
        embeddings: list[list[float]] = []
        documents: list[str] = []
        metadatas: list[dict[str, Any]] = []
        for record in records:
            ids.append(self._chroma_id(namespace, record.id))
            embeddings.append(record.values)
            documents.append(record.text)
            meta = flatten_metadata(record.metadata)
            meta.pop("text", None)
            meta[_NAMESPACE_KEY] = namespace
            meta[_RECORD_ID_KEY] = record.id
            metadatas.append(meta)

        self._collection.upsert(ids=ids, embeddings=embeddings, documents=documents, metadatas=metadatas)
        return len(ids)

    def similarity_search(
        self,
        namespace: str,
        query_embedding: list[float],
        *,
        k: int = 5,
    ) -> list[dict[str, Any]]:
        if k <= 0 or self._collection.count() == 0:
            return []

        results = self._collection.query(
            query_embeddings=[query_embedding],
            n_results=k,
            where={_NAMESPACE_KEY: {"$eq": namespace}},
            include=["documents", "metadatas", "distances"],
        )

        hits: list[dict[str, Any]] = []
        ids = (results.get("ids") or [[]])[0]
        docs = (results.get("documents") or [[]])[0]
        metas = (results.get("metadatas") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]

        for doc_id, content, meta, dist in zip(ids, docs, metas, distances):
            meta = dict(meta or {})
            record_id = meta.get(_RECORD_ID_KEY, doc_id)
            hits.append(
                {
                    "id": record_id,
                    "content": content or "",
                    "score": self._to_score(dist),
                    "metadata": {k_: v for k_, v in meta.items() if k_ not in _INTERNAL_KEYS},
                }
            )
        hits.sort(key=lambda h: h["score"], reverse=True)
        return hits[:k]

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    # -- internals ------------------------------------------------------------

    @staticmethod
    def _chroma_id(namespace: str, record_id: str) -> str:
        return f"{namespace}:{record_id}"

    def _to_score(self, distance: float) -> float:
        if self._distance_metric == "cosine":
            return 1.0 - distance
        # l2 / ip distances are unbounded; squash to a 0-1 similarity score.
        return 1.0 / (1.0 + distance)
