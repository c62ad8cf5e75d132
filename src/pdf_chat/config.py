"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM (Groq exposes an OpenAI-compatible chat completions API)
    groq_api_key: str = Field(default="", description="API key for the chat-completion provider")
    llm_base_url: str = Field(
        default="https://api.groq.com/openai/v1",
        description="Base URL of an OpenAI-compatible chat completions endpoint",
    )
    llm_model_name: str = Field(default="llama-3.3-70b-versatile", description="LLM model identifier")
    llm_temperature: float = 0.3
    llm_max_tokens: int = 1024

    # Embedding
    hf_api_key: str = Field(
        default="",
        description="Hugging Face Inference API token. Leave empty to embed locally.",
    )
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embed_batch_size: int = 32
    embed_max_workers: int = 4
    embed_max_attempts: int = 3

    # Vector store
    vector_backend: Literal["pinecone", "chroma", "memory"] = "pinecone"
    pinecone_api_key: str = ""
    index_name: str = Field(
        default="pdf-chat",
        validation_alias=AliasChoices("pinecone_index_name", "index_name"),
        description="Shared vector index / collection name",
    )
    chroma_host: str = "localhost"
    chroma_port: int = 8000

    # Ingestion
    chunk_strategy: Literal["recursive", "fixed"] = "recursive"
    chunk_size: int = 500
    chunk_overlap: int = 200
    upsert_batch_size: int = 100
    upload_dir: str = "upload"

    # Query
    top_k: int = 5

    # Runtime
    stage_timeout_seconds: float = Field(
        default=120.0,
        description="Upper bound for each remote stage; 0 disables the limit.",
    )
    environment: str = "production"
    log_level: str = "INFO"
    port: int = 8000
    cors_origins: list[str] = Field(
        default=["*"],
        description='Origins allowed to call the API from a browser, as JSON (e.g. ["http://localhost:3000"]).',
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


# Singleton — import `settings` wherever needed.
settings = Settings()
