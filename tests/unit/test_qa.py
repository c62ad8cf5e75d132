"""Unit tests for prompt assembly, the completion client and the query pipeline.

All tests run without a chat-completion provider by injecting mocks.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from pdf_chat.errors import ClientInputError, UpstreamError
from pdf_chat.ingestion.embedder import EmbeddingClient
from pdf_chat.qa.llm import CompletionClient, CompletionOptions
from pdf_chat.qa.pipeline import Answer, QueryPipeline
from pdf_chat.qa.prompts import build_system_prompt, format_context
from pdf_chat.retrieval.memory_store import InMemoryVectorStore
from pdf_chat.retrieval.models import Citation, RetrievalResult, VectorRecord
from pdf_chat.retrieval.retriever import SemanticRetriever


def _result(content: str, **meta: Any) -> RetrievalResult:
    return RetrievalResult(content=content, citation=Citation(metadata=meta))


def _mock_llm(content: Any = "The refund window is 30 days.") -> MagicMock:
    llm = MagicMock()
    llm.invoke.return_value = AIMessage(content=content)
    return llm


# ── Prompts ────────────────────────────────────────────────────────────


class TestPrompts:
    def test_context_blocks(self) -> None:
        context = format_context([_result("Refunds within 30 days.", source="manual.pdf"), _result("Ships in 5 days.")])
        assert context == (
            "[Context 1]: Refunds within 30 days.\nSource: manual.pdf\n\n"
            "[Context 2]: Ships in 5 days.\nSource: PDF"
        )

    def test_empty_context(self) -> None:
        assert format_context([]) == ""

    def test_system_prompt_embeds_context_verbatim(self) -> None:
        prompt = build_system_prompt([_result("Braces {like this} survive.", source="a.pdf")])
        assert "[Context 1]: Braces {like this} survive." in prompt
        assert "stay truthful to the context" in prompt
        assert "If you don't know, say you don't know" in prompt
        assert "concise" in prompt


# ── CompletionClient ───────────────────────────────────────────────────


class TestCompletionClient:
    def test_sends_system_and_user_messages(self) -> None:
        llm = _mock_llm()
        client = CompletionClient(llm)
        options = CompletionOptions(model="llama-3.1-8b-instant", temperature=0.0, max_tokens=64)

        assert client.complete("system text", "question?", options) == "The refund window is 30 days."

        messages = llm.invoke.call_args.args[0]
        assert isinstance(messages[0], SystemMessage) and messages[0].content == "system text"
        assert isinstance(messages[1], HumanMessage) and messages[1].content == "question?"
        assert llm.invoke.call_args.kwargs == {"model": "llama-3.1-8b-instant", "temperature": 0.0, "max_tokens": 64}

    def test_uses_defaults_without_options(self) -> None:
        llm = _mock_llm()
        defaults = CompletionOptions(model="m", temperature=0.3, max_tokens=1024)
        CompletionClient(llm, defaults=defaults).complete("s", "u")
        assert llm.invoke.call_args.kwargs == {"model": "m", "temperature": 0.3, "max_tokens": 1024}

    def test_provider_error_becomes_upstream_error(self) -> None:
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("503 Service Unavailable")
        with pytest.raises(UpstreamError) as excinfo:
            CompletionClient(llm).complete("s", "u")
        assert excinfo.value.stage == "complete"

    @pytest.mark.parametrize("content", ["", "   "])
    def test_empty_reply_is_upstream_error(self, content: str) -> None:
        with pytest.raises(UpstreamError, match="no text"):
            CompletionClient(_mock_llm(content)).complete("s", "u")

    def test_invalid_options(self) -> None:
        with pytest.raises(ValueError):
            CompletionOptions(max_tokens=0)


# ── QueryPipeline ──────────────────────────────────────────────────────


@pytest.fixture()
def populated_store(embedder: EmbeddingClient) -> InMemoryVectorStore:
    store = InMemoryVectorStore("test-index")
    texts = ["refund policy: 30 days", "shipping takes days", "warranty contact email", "price per order"]
    vectors = embedder.embed_many(texts)
    store.upsert(
        "ns",
        [
            VectorRecord(id=f"ns-{i}", values=v, metadata={"text": t, "source": "manual.pdf", "page": 0, "chunk_index": i})
            for i, (t, v) in enumerate(zip(texts, vectors))
        ],
    )
    return store


class TestQueryPipeline:
    def test_answer_with_sources(self, embedder: EmbeddingClient, populated_store: InMemoryVectorStore) -> None:
        llm = _mock_llm()
        pipeline = QueryPipeline(SemanticRetriever(populated_store, embedder), CompletionClient(llm), top_k=2)

        answer = pipeline.answer("ns", "What is the refund policy?")

        assert isinstance(answer, Answer)
        assert answer.answer == "The refund window is 30 days."
        assert len(answer.sources) == 2
        assert answer.sources[0].content == "refund policy: 30 days"
        system = llm.invoke.call_args.args[0][0].content
        assert "[Context 1]: refund policy: 30 days\nSource: manual.pdf" in system
        assert llm.invoke.call_args.args[0][1].content == "What is the refund policy?"

    def test_empty_namespace_proceeds_without_context(self, embedder: EmbeddingClient, memory_store: InMemoryVectorStore) -> None:
        llm = _mock_llm("I don't know.")
        pipeline = QueryPipeline(SemanticRetriever(memory_store, embedder), CompletionClient(llm))

        answer = pipeline.answer("unknown-namespace", "Anything?")

        assert answer.answer == "I don't know."
        assert answer.sources == []
        assert llm.invoke.call_args.args[0][0].content.rstrip().endswith("Context:")

    @pytest.mark.parametrize("question", [None, "", "   "])
    def test_missing_question_makes_no_remote_call(self, question: str | None) -> None:
        retriever, completion = MagicMock(), MagicMock()
        pipeline = QueryPipeline(retriever, completion)
        with pytest.raises(ClientInputError, match="Question is required"):
            pipeline.answer("ns", question)
        retriever.search.assert_not_called()
        completion.complete.assert_not_called()

    def test_missing_namespace_makes_no_remote_call(self) -> None:
        retriever, completion = MagicMock(), MagicMock()
        with pytest.raises(ClientInputError, match="Namespace is required"):
            QueryPipeline(retriever, completion).answer(None, "What?")
        retriever.search.assert_not_called()

    def test_completion_failure_is_reported(self, embedder: EmbeddingClient, populated_store: InMemoryVectorStore) -> None:
        llm = MagicMock()
        llm.invoke.side_effect = ConnectionError("reset by peer")
        pipeline = QueryPipeline(SemanticRetriever(populated_store, embedder), CompletionClient(llm))
        with pytest.raises(UpstreamError) as excinfo:
            pipeline.answer("ns", "refund?")
        assert excinfo.value.stage == "complete"

    def test_options_are_forwarded(self, embedder: EmbeddingClient, populated_store: InMemoryVectorStore) -> None:
        llm = _mock_llm()
        options = CompletionOptions(model="custom", temperature=0.0, max_tokens=10)
        pipeline = QueryPipeline(SemanticRetriever(populated_store, embedder), CompletionClient(llm), options=options)
        pipeline.answer("ns", "refund?")
        assert llm.invoke.call_args.kwargs["model"] == "custom"
