"""
QA — prompt assembly and chat completion over retrieved PDF chunks.

Public API
----------
- :class:`QueryPipeline` — search → prompt → completion → :class:`Answer`.
- :class:`CompletionClient` / :class:`CompletionOptions` — chat model wrapper.
"""

from pdf_chat.qa.llm import CompletionClient, CompletionOptions
from pdf_chat.qa.pipeline import Answer, QueryPipeline

__all__ = [
    "Answer",
    "CompletionClient",
    "CompletionOptions",
    "QueryPipeline",
]
