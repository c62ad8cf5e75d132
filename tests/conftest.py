"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import pytest
from fakes import KeywordEmbeddings

from pdf_chat.ingestion.embedder import EmbeddingClient
from pdf_chat.retrieval.memory_store import InMemoryVectorStore


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


@pytest.fixture()
def keyword_embeddings() -> KeywordEmbeddings:
    return KeywordEmbeddings()


@pytest.fixture()
def embedder(keyword_embeddings: KeywordEmbeddings) -> EmbeddingClient:
    return EmbeddingClient(keyword_embeddings, batch_size=4, max_workers=2, max_attempts=1)


@pytest.fixture()
def memory_store() -> InMemoryVectorStore:
    return InMemoryVectorStore("test-index")
