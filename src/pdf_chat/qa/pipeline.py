"""Query pipeline — retrieve, assemble the prompt, complete, shape the answer."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from pdf_chat.errors import ClientInputError
from pdf_chat.qa.llm import CompletionClient, CompletionOptions
from pdf_chat.qa.prompts import build_system_prompt
from pdf_chat.retrieval.models import RetrievalResult
from pdf_chat.retrieval.retriever import SemanticRetriever
from pdf_chat.stages import run_stage

logger = logging.getLogger(__name__)


class Answer(BaseModel):
    """Generated answer plus the retrieved chunks that justified it."""

    answer: str
    sources: list[RetrievalResult] = Field(default_factory=list)


class QueryPipeline:
    """Answer questions against one namespace of the vector index.

    Parameters
    ----------
    retriever:
        Namespaced semantic retriever.
    completion:
        Chat-completion client.
    top_k:
        Number of chunks placed into the prompt.
    options:
        Generation options forwarded to the completion client.
    timeout:
        Per-stage time limit in seconds for the completion call.
    """

    def __init__(
        self,
        retriever: SemanticRetriever,
        completion: CompletionClient,
        *,
        top_k: int = 5,
        options: CompletionOptions | None = None,
        timeout: float | None = None,
    ) -> None:
        self.retriever = retriever
        self.completion = completion
        self.top_k = top_k
        self.options = options
        self.timeout = timeout

    def answer(self, namespace: str | None, question: str | None) -> Answer:
        """Answer *question* from the chunks stored under *namespace*.

        Raises
        ------
        ClientInputError
            When *question* or *namespace* is missing; no remote call is
            made in that case.
        UpstreamError
            When embedding, search or completion fails.
        """
        if not question or not question.strip():
            raise ClientInputError("Question is required")
        if not namespace or not namespace.strip():
            raise ClientInputError("Namespace is required")

        results = self.retriever.search(namespace, question, k=self.top_k)
        if not results:
            logger.info("No context found in namespace %s; answering without context", namespace)

        system_prompt = build_system_prompt(results)
        text = run_stage(
            "complete",
            self.completion.complete,
            system_prompt,
            question,
            self.options,
            timeout=self.timeout,
        )
        return Answer(answer=text, sources=results)
