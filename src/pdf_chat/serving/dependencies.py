"""FastAPI dependencies.

Remote clients are built once, on first use, and shared by every
request; the pipelines wrapping them are cheap and built per request.
Tests replace any of these through ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from pdf_chat.config import Settings, settings
from pdf_chat.ingestion.embedder import EmbeddingClient
from pdf_chat.ingestion.pipeline import IngestionPipeline
from pdf_chat.qa.llm import CompletionClient
from pdf_chat.qa.pipeline import QueryPipeline
from pdf_chat.retrieval.base import VectorStoreBase
from pdf_chat.retrieval.factory import get_vector_store
from pdf_chat.retrieval.retriever import SemanticRetriever


def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def get_embedding_client() -> EmbeddingClient:
    return EmbeddingClient()


@lru_cache(maxsize=1)
def get_store() -> VectorStoreBase:
    return get_vector_store(settings)


@lru_cache(maxsize=1)
def get_completion_client() -> CompletionClient:
    return CompletionClient()


def get_ingestion_pipeline(
    config: Settings = Depends(get_settings),
    embedder: EmbeddingClient = Depends(get_embedding_client),
    store: VectorStoreBase = Depends(get_store),
) -> IngestionPipeline:
    return IngestionPipeline(
        embedder,
        store,
        chunk_size=config.chunk_size,
        chunk_overlap=config.chunk_overlap,
        strategy=config.chunk_strategy,
        batch_size=config.upsert_batch_size,
        upload_dir=config.upload_dir,
        timeout=config.stage_timeout_seconds,
    )


def get_query_pipeline(
    config: Settings = Depends(get_settings),
    embedder: EmbeddingClient = Depends(get_embedding_client),
    store: VectorStoreBase = Depends(get_store),
    completion: CompletionClient = Depends(get_completion_client),
) -> QueryPipeline:
    retriever = SemanticRetriever(store, embedder, default_k=config.top_k, timeout=config.stage_timeout_seconds)
    return QueryPipeline(retriever, completion, top_k=config.top_k, timeout=config.stage_timeout_seconds)
