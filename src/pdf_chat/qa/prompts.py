"""Prompt templates for question answering over an uploaded PDF.

Retrieved chunk text is embedded verbatim into the system prompt; the
user message is the bare question.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdf_chat.retrieval.models import RetrievalResult

SYSTEM_PROMPT_TEMPLATE = """\
You are an AI assistant that answers questions based on the provided context from PDF documents.
- Always stay truthful to the context
- If you don't know, say you don't know
- Keep answers concise and accurate
- Give all the details (can give in paragraph)

Context:
{context}
"""


def format_context(results: list[RetrievalResult]) -> str:
    """Render retrieved chunks as ``[Context i]`` blocks.

    An empty result list renders as an empty string.
    """
    parts: list[str] = []
    for i, result in enumerate(results, 1):
        source = result.citation.metadata.get("source") or "PDF"
        parts.append(f"[Context {i}]: {result.content}\nSource: {source}")
    return "\n\n".join(parts)


def build_system_prompt(results: list[RetrievalResult]) -> str:
    """Assemble the system prompt for the completion call."""
    return SYSTEM_PROMPT_TEMPLATE.format(context=format_context(results))
