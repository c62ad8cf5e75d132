"""Build the configured vector-store backend."""

from __future__ import annotations

import logging

from pdf_chat.config import Settings, settings
from pdf_chat.errors import ConfigurationError
from pdf_chat.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


def get_vector_store(config: Settings = settings) -> VectorStoreBase:
    """Return a vector store for ``config.vector_backend``.

    Backend modules are imported lazily so that only the selected
    client library has to be importable.
    """
    backend = config.vector_backend
    logger.info("Using %s vector store (index=%s)", backend, config.index_name)

    if backend == "pinecone":
        if not config.pinecone_api_key:
            raise ConfigurationError("PINECONE_API_KEY is required for the pinecone backend")
        from pdf_chat.retrieval.pinecone_store import PineconeVectorStore

        return PineconeVectorStore(config.index_name, api_key=config.pinecone_api_key)

    if backend == "chroma":
        from pdf_chat.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore(config.index_name, host=config.chroma_host, port=config.chroma_port)

    if backend == "memory":
        from pdf_chat.retrieval.memory_store import InMemoryVectorStore

        return InMemoryVectorStore(config.index_name)

    raise ConfigurationError(f"Unknown vector backend: {backend!r}")
