"""Shared configuration loaded from environment / ``.env``."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM
    openai_api_key: str = Field(default="", description="OpenAI API key (or dummy value for a local runner)")
    llm_model_name: str = Field(default="gpt-4o-mini", description="Chat model identifier")
    vision_model_name: str = Field(
        default="",
        description="Vision-capable model identifier. Empty reuses ``llm_model_name``.",
    )
    llm_base_url: str = Field(
        default="",
        description=(
            "Base URL for the LLM API. Leave empty to use OpenAI cloud. "
            "Set to any OpenAI-compatible endpoint for local serving, e.g. "
            "'http://localhost:12434/engines/v1'"
        ),
    )
    llm_timeout: float = 60.0

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "knowledge_enrichment"

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embed_batch_size: int = 32

    # Figure / image analysis
    min_image_width: int = 50
    min_image_height: int = 50
    max_context_chars: int = 500
    page_workers: int = Field(default=4, description="Worker threads used to analyse the pages of one document")

    # Chunking
    chunk_size: int = Field(default=256, description="Target chunk size in estimated tokens")
    chunk_overlap: int = 50
    min_chunk_chars: int = Field(default=10, description="Chunks shorter than this are dropped")
    max_chunk_chars: int = Field(default=1024, description="Hard ceiling enforced before storage")
    chunk_window_chars: int = 500

    # Retrieval
    retrieval_k: int = 4

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton — import `settings` wherever needed.
settings = Settings()
