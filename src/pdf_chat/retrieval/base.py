"""Abstract base class for vector-store backends.

Every backend partitions one shared index into **namespaces**: a search
in namespace *N* only ever sees records upserted under *N*.  Adding a
backend only requires subclassing :class:`VectorStoreBase` and
implementing the abstract methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from pdf_chat.retrieval.models import VectorRecord


def flatten_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Keep only scalar metadata values; remote stores reject nested ones."""
    return {k: v for k, v in metadata.items() if isinstance(v, (str, int, float, bool))}


class VectorStoreBase(ABC):
    """Backend-agnostic, namespaced vector-store interface.

    Parameters
    ----------
    index_name:
        Name of the shared index / collection.
    """

    def __init__(self, index_name: str) -> None:
        self.index_name = index_name

    @abstractmethod
    def upsert(self, namespace: str, records: Sequence[VectorRecord]) -> int:
        """Insert or overwrite *records* in *namespace*.

        Re-upserting an existing id replaces its vector and metadata.

        Returns
        -------
        int
            Number of records the backend acknowledged.
        """
        ...

    @abstractmethod
    def similarity_search(
        self,
        namespace: str,
        query_embedding: list[float],
        *,
        k: int = 5,
    ) -> list[dict[str, Any]]:
        """Return the top-*k* records of *namespace* nearest *query_embedding*.

        Each result dict **must** contain:

        * ``"id"`` – record identifier
        * ``"content"`` – the chunk text
        * ``"score"`` – similarity score (higher = more similar)
        * ``"metadata"`` – stored metadata without the ``text`` key

        Results are ordered by descending score.  An empty or unknown
        namespace yields ``[]``.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
