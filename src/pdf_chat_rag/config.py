"""Application configuration loaded from environment / ``.env`` file.

A single :class:`Settings` instance is built at process startup (see
:func:`get_settings`) and handed explicitly to every component, so tests
can construct their own without touching the environment.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Storage
    collection_name: str = Field(default="pdf_chat", description="Vector-store collection holding the chunks")
    docs_folder: Path = Field(default=Path("docs"), description="Folder scanned by the bulk load")
    load_on_startup: bool = Field(default=True, description="Run the conditional bulk load when the API starts")

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_persist_dir: str = Field(
        default="",
        description="Local Chroma directory. Leave empty to talk to a Chroma server over HTTP.",
    )

    # LLM
    openai_api_key: str = Field(default="", description="OpenAI API key (or dummy value for local vLLM)")
    llm_model_name: str = Field(default="gpt-4o-mini", description="Chat model identifier")
    llm_base_url: str = Field(
        default="",
        description=(
            "Base URL for an OpenAI-compatible API. Leave empty to use OpenAI cloud, "
            "e.g. 'http://localhost:8001/v1' for a local vLLM server."
        ),
    )
    llm_temperature: float = 0.0

    # Embedding
    embedding_model: str = "text-embedding-3-small"

    # Ingestion / retrieval
    chunk_size: int = Field(default=800, gt=0, description="Maximum tokens per chunk")
    chunk_overlap: int = Field(default=0, ge=0, description="Tokens shared by consecutive chunks")
    top_k: int = Field(default=4, gt=0, description="Chunks retrieved per query")
    download_timeout: float = Field(default=30.0, gt=0, description="Seconds to wait for a remote PDF")

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @model_validator(mode="after")
    def _check_chunking(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than chunk_size ({self.chunk_size})"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler with a timestamped format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
