"""
Retrieval — namespaced vector storage, similarity search, citations.

This module wraps the vector store behind a clean interface so that
the pipelines never need to know which DB is backing retrieval.

Public surface
--------------
- :class:`SemanticRetriever` — namespaced search returning citations.
- :class:`VectorStoreBase` — abstract backend.
- :class:`InMemoryVectorStore`, :class:`ChromaVectorStore`,
  :class:`PineconeVectorStore` — concrete backends.
- :class:`VectorRecord`, :class:`Citation`, :class:`RetrievalResult` — data models.
- :func:`get_vector_store` — backend factory driven by settings.
"""

from pdf_chat.retrieval.base import VectorStoreBase
from pdf_chat.retrieval.factory import get_vector_store
from pdf_chat.retrieval.memory_store import InMemoryVectorStore
from pdf_chat.retrieval.models import Citation, RetrievalResult, VectorRecord
from pdf_chat.retrieval.retriever import SemanticRetriever

__all__ = [
    "Citation",
    "ChromaVectorStore",
    "InMemoryVectorStore",
    "PineconeVectorStore",
    "RetrievalResult",
    "SemanticRetriever",
    "VectorRecord",
    "VectorStoreBase",
    "get_vector_store",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import remote backends to avoid pulling in their SDKs at import time."""
    if name == "ChromaVectorStore":
        from pdf_chat.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    if name == "PineconeVectorStore":
        from pdf_chat.retrieval.pinecone_store import PineconeVectorStore

        return PineconeVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
