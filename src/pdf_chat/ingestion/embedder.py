"""Embedding client — text in, fixed-length vectors out."""

from __future__ import annotations

import logging
import numbers
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from tenacity import Retrying, retry_if_not_exception_type, stop_after_attempt, wait_exponential

from pdf_chat.config import settings
from pdf_chat.errors import PdfChatError, UpstreamError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_embedding_function(
    model_name: str = settings.embedding_model,
    api_key: str = settings.hf_api_key,
) -> Embeddings:
    """Return the configured embedding model.

    With an API key the Hugging Face Inference API is used, otherwise the
    sentence-transformer is loaded locally.
    """
    if api_key:
        from langchain_huggingface import HuggingFaceEndpointEmbeddings

        logger.info("Using Hugging Face Inference API for embeddings: %s", model_name)
        return HuggingFaceEndpointEmbeddings(model=model_name, huggingfacehub_api_token=api_key)

    from langchain_huggingface import HuggingFaceEmbeddings

    logger.info("Using local sentence-transformer for embeddings: %s", model_name)
    return HuggingFaceEmbeddings(model_name=model_name)


class EmbeddingClient:
    """Order-preserving, validated wrapper around a LangChain ``Embeddings``.

    Parameters
    ----------
    embeddings:
        Backend model. Defaults to :func:`get_embedding_function`.
    batch_size:
        Texts per remote call in :meth:`embed_many`.
    max_workers:
        Number of batches embedded concurrently.
    max_attempts:
        Attempts per remote call; transient failures back off
        exponentially (capped at 8 s). ``1`` disables retries.
    """

    def __init__(
        self,
        embeddings: Embeddings | None = None,
        *,
        batch_size: int = settings.embed_batch_size,
        max_workers: int = settings.embed_max_workers,
        max_attempts: int = settings.embed_max_attempts,
    ) -> None:
        self._embeddings = embeddings if embeddings is not None else get_embedding_function()
        self.batch_size = max(1, batch_size)
        self.max_workers = max(1, max_workers)
        self.max_attempts = max(1, max_attempts)

    def embed(self, text: str) -> list[float]:
        """Embed a single query text."""
        vector = self._call(self._embeddings.embed_query, text)
        return _validate_vector(vector)

    def embed_many(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts*, returning one vector per text in input order."""
        if not texts:
            return []
        batches = [texts[i : i + self.batch_size] for i in range(0, len(texts), self.batch_size)]
        if len(batches) == 1:
            results = [self._embed_batch(batches[0])]
        else:
            workers = min(self.max_workers, len(batches))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="embed") as pool:
                results = list(pool.map(self._embed_batch, batches))

        vectors = [vector for batch in results for vector in batch]
        if len(vectors) != len(texts):
            raise UpstreamError("embed", f"expected {len(texts)} vectors, got {len(vectors)}")
        return vectors

    # -- internals ------------------------------------------------------------

    def _embed_batch(self, batch: list[str]) -> list[list[float]]:
        vectors = self._call(self._embeddings.embed_documents, batch)
        if not isinstance(vectors, list) or len(vectors) != len(batch):
            got = len(vectors) if isinstance(vectors, list) else type(vectors).__name__
            raise UpstreamError("embed", f"expected {len(batch)} vectors, got {got}")
        return [_validate_vector(v) for v in vectors]

    def _call(self, func: Callable[[Any], T], arg: Any) -> T:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=0.5, max=8),
            retry=retry_if_not_exception_type(PdfChatError),
            reraise=True,
        )
        try:
            return retrying(func, arg)
        except PdfChatError:
            raise
        except Exception as exc:
            logger.warning("Embedding call failed after %d attempt(s): %s", self.max_attempts, exc)
            raise UpstreamError("embed", str(exc) or type(exc).__name__) from exc


def _validate_vector(vector: Any) -> list[float]:
    if not isinstance(vector, (list, tuple)) or not vector:
        raise UpstreamError("embed", "embedding response is missing the vector")
    if not all(isinstance(x, numbers.Real) and not isinstance(x, bool) for x in vector):
        raise UpstreamError("embed", "embedding response contains non-numeric values")
    return [float(x) for x in vector]
