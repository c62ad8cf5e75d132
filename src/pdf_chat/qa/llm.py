"""Chat-completion client — single place to swap providers.

The default provider is Groq, which exposes an OpenAI-compatible
``/chat/completions`` endpoint, so ``ChatOpenAI`` is pointed at
``settings.llm_base_url``.  Any other OpenAI-compatible server works the
same way.
"""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, Field

from pdf_chat.config import settings
from pdf_chat.errors import UpstreamError

logger = logging.getLogger(__name__)


class CompletionOptions(BaseModel):
    """Per-call generation options."""

    model: str = settings.llm_model_name
    temperature: float = Field(default=settings.llm_temperature, ge=0.0, le=2.0)
    max_tokens: int = Field(default=settings.llm_max_tokens, gt=0)


def get_llm(temperature: float = settings.llm_temperature) -> ChatOpenAI:
    """Return the configured chat model."""
    kwargs: dict[str, Any] = {
        "model": settings.llm_model_name,
        "temperature": temperature,
        "max_tokens": settings.llm_max_tokens,
        # Groq rejects requests without a key; keep a placeholder so the
        # client can be built for tests and local servers.
        "api_key": settings.groq_api_key or "EMPTY",
    }
    if settings.llm_base_url:
        logger.info("Using chat completions endpoint: %s", settings.llm_base_url)
        kwargs["base_url"] = settings.llm_base_url
    return ChatOpenAI(**kwargs)


class CompletionClient:
    """Send a system prompt plus a user message, get generated text back.

    Parameters
    ----------
    llm:
        A LangChain chat model. Defaults to :func:`get_llm`.
    defaults:
        Options used when :meth:`complete` is called without any.
    """

    def __init__(self, llm: Any | None = None, *, defaults: CompletionOptions | None = None) -> None:
        self._llm = llm if llm is not None else get_llm()
        self.defaults = defaults or CompletionOptions()

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        options: CompletionOptions | None = None,
    ) -> str:
        """Return the model's reply.

        Raises
        ------
        UpstreamError
            When the provider call fails or returns no text.
        """
        opts = options or self.defaults
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_message)]
        try:
            response = self._llm.invoke(
                messages,
                model=opts.model,
                temperature=opts.temperature,
                max_tokens=opts.max_tokens,
            )
        except Exception as exc:
            logger.error("Chat completion failed (model=%s): %s", opts.model, exc)
            raise UpstreamError("complete", str(exc) or type(exc).__name__) from exc

        content = getattr(response, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise UpstreamError("complete", "completion response contained no text")
        return content
