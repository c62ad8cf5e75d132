"""Unit tests for the Pinecone and Chroma adapters and the backend factory.

The remote SDK handles are replaced by mocks; these tests check the
translation between :class:`VectorStoreBase` calls and the SDK calls.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from pdf_chat.config import Settings
from pdf_chat.errors import ConfigurationError
from pdf_chat.retrieval.chroma_store import ChromaVectorStore
from pdf_chat.retrieval.factory import get_vector_store
from pdf_chat.retrieval.memory_store import InMemoryVectorStore
from pdf_chat.retrieval.models import VectorRecord
from pdf_chat.retrieval.pinecone_store import PineconeVectorStore

RECORDS = [
    VectorRecord(id="ns-0", values=[0.1, 0.2], metadata={"text": "first", "page": 0, "nested": {"x": 1}}),
    VectorRecord(id="ns-1", values=[0.3, 0.4], metadata={"text": "second", "page": 1}),
]


# ── Pinecone ───────────────────────────────────────────────────────────


class TestPineconeVectorStore:
    def test_upsert_uses_native_namespace(self) -> None:
        index = MagicMock()
        index.upsert.return_value = SimpleNamespace(upserted_count=2)
        store = PineconeVectorStore("pdf-chat", index=index)

        assert store.upsert("ns", RECORDS) == 2
        kwargs = index.upsert.call_args.kwargs
        assert kwargs["namespace"] == "ns"
        assert kwargs["vectors"][0] == {
            "id": "ns-0",
            "values": [0.1, 0.2],
            "metadata": {"text": "first", "page": 0},
        }

    def test_upsert_falls_back_to_record_count(self) -> None:
        index = MagicMock()
        index.upsert.return_value = {}
        store = PineconeVectorStore("pdf-chat", index=index)
        assert store.upsert("ns", RECORDS) == 2

    def test_upsert_nothing(self) -> None:
        index = MagicMock()
        store = PineconeVectorStore("pdf-chat", index=index)
        assert store.upsert("ns", []) == 0
        index.upsert.assert_not_called()

    def test_search_maps_matches(self) -> None:
        index = MagicMock()
        index.query.return_value = SimpleNamespace(
            matches=[
                SimpleNamespace(id="ns-1", score=0.5, metadata={"text": "second", "page": 1.0}),
                SimpleNamespace(id="ns-0", score=0.9, metadata={"text": "first", "page": 0.0}),
            ]
        )
        store = PineconeVectorStore("pdf-chat", index=index)

        hits = store.similarity_search("ns", [0.1, 0.2], k=2)

        assert [h["id"] for h in hits] == ["ns-0", "ns-1"]
        assert hits[0]["content"] == "first"
        assert "text" not in hits[0]["metadata"]
        index.query.assert_called_once_with(
            vector=[0.1, 0.2],
            top_k=2,
            namespace="ns",
            include_metadata=True,
        )

    def test_search_empty_namespace(self) -> None:
        index = MagicMock()
        index.query.return_value = {"matches": []}
        store = PineconeVectorStore("pdf-chat", index=index)
        assert store.similarity_search("empty", [0.1], k=5) == []

    def test_health_check(self) -> None:
        index = MagicMock()
        store = PineconeVectorStore("pdf-chat", index=index)
        assert store.health_check() is True
        index.describe_index_stats.side_effect = ConnectionError("down")
        assert store.health_check() is False


# ── Chroma ─────────────────────────────────────────────────────────────


@pytest.fixture()
def chroma_client() -> MagicMock:
    client = MagicMock()
    client.get_or_create_collection.return_value.count.return_value = 2
    return client


class TestChromaVectorStore:
    def test_collection_uses_index_name(self, chroma_client: MagicMock) -> None:
        ChromaVectorStore("pdf-chat", client=chroma_client)
        chroma_client.get_or_create_collection.assert_called_once_with(
            name="pdf-chat", metadata={"hnsw:space": "cosine"}
        )

    def test_upsert_tags_namespace(self, chroma_client: MagicMock) -> None:
        store = ChromaVectorStore("pdf-chat", client=chroma_client)
        assert store.upsert("ns", RECORDS) == 2

        kwargs = chroma_client.get_or_create_collection.return_value.upsert.call_args.kwargs
        assert kwargs["ids"] == ["ns:ns-0", "ns:ns-1"]
        assert kwargs["documents"] == ["first", "second"]
        assert kwargs["metadatas"][0] == {"page": 0, "namespace": "ns", "record_id": "ns-0"}

    def test_search_filters_on_namespace(self, chroma_client: MagicMock) -> None:
        collection = chroma_client.get_or_create_collection.return_value
        collection.query.return_value = {
            "ids": [["ns:ns-0", "ns:ns-1"]],
            "documents": [["first", "second"]],
            "metadatas": [[{"page": 0, "namespace": "ns", "record_id": "ns-0"}, {"page": 1, "namespace": "ns", "record_id": "ns-1"}]],
            "distances": [[0.1, 0.4]],
        }
        store = ChromaVectorStore("pdf-chat", client=chroma_client)

        hits = store.similarity_search("ns", [0.1, 0.2], k=2)

        assert [h["id"] for h in hits] == ["ns-0", "ns-1"]
        assert hits[0]["score"] == pytest.approx(0.9)
        assert hits[0]["metadata"] == {"page": 0}
        assert collection.query.call_args.kwargs["where"] == {"namespace": {"$eq": "ns"}}

    def test_search_empty_collection(self, chroma_client: MagicMock) -> None:
        collection = chroma_client.get_or_create_collection.return_value
        collection.count.return_value = 0
        store = ChromaVectorStore("pdf-chat", client=chroma_client)
        assert store.similarity_search("ns", [0.1], k=5) == []
        collection.query.assert_not_called()


# ── Factory ────────────────────────────────────────────────────────────


class TestFactory:
    def test_memory_backend(self) -> None:
        store = get_vector_store(Settings(vector_backend="memory", index_name="idx"))
        assert isinstance(store, InMemoryVectorStore)
        assert store.index_name == "idx"

    def test_pinecone_requires_api_key(self) -> None:
        with pytest.raises(ConfigurationError, match="PINECONE_API_KEY"):
            get_vector_store(Settings(vector_backend="pinecone", pinecone_api_key=""))

    def test_pinecone_backend(self) -> None:
        with patch("pinecone.Pinecone") as pinecone_cls:
            store = get_vector_store(Settings(vector_backend="pinecone", pinecone_api_key="key", index_name="idx"))
        assert isinstance(store, PineconeVectorStore)
        pinecone_cls.assert_called_once_with(api_key="key")
        pinecone_cls.return_value.Index.assert_called_once_with("idx")
