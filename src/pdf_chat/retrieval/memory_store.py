"""In-process vector store for local development and tests.

Brute-force cosine similarity over numpy arrays; nothing is persisted.
"""

from __future__ import annotations

import threading
from typing import Any, Sequence

import numpy as np

from pdf_chat.retrieval.base import VectorStoreBase
from pdf_chat.retrieval.models import VectorRecord


class InMemoryVectorStore(VectorStoreBase):
    """Namespaced vector store kept in a dict of dicts."""

    def __init__(self, index_name: str = "pdf-chat") -> None:
        super().__init__(index_name)
        self._namespaces: dict[str, dict[str, VectorRecord]] = {}
        self._lock = threading.Lock()

    def upsert(self, namespace: str, records: Sequence[VectorRecord]) -> int:
        with self._lock:
            bucket = self._namespaces.setdefault(namespace, {})
            for record in records:
                bucket[record.id] = record.model_copy(deep=True)
        return len(records)

    def similarity_search(
        self,
        namespace: str,
        query_embedding: list[float],
        *,
        k: int = 5,
    ) -> list[dict[str, Any]]:
        with self._lock:
            records = list(self._namespaces.get(namespace, {}).values())
        if not records or k <= 0:
            return []

        query = np.asarray(query_embedding, dtype=float)
        matrix = np.asarray([r.values for r in records], dtype=float)
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        scores = (matrix @ query) / np.where(norms == 0, 1.0, norms)

        order = np.argsort(-scores, kind="stable")[:k]
        return [
            {
                "id": records[i].id,
                "content": records[i].text,
                "score": float(scores[i]),
                "metadata": {key: value for key, value in records[i].metadata.items() if key != "text"},
            }
            for i in order
        ]

    def health_check(self) -> bool:
        return True

    def count(self, namespace: str) -> int:
        """Number of records stored under *namespace*."""
        with self._lock:
            return len(self._namespaces.get(namespace, {}))

    def get(self, namespace: str, record_id: str) -> VectorRecord | None:
        """Fetch a record by id, or ``None``."""
        with self._lock:
            return self._namespaces.get(namespace, {}).get(record_id)
