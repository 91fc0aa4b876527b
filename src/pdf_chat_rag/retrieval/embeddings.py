"""Embedding model factory."""

from __future__ import annotations

import logging

from langchain_openai import OpenAIEmbeddings

from pdf_chat_rag.config import Settings

logger = logging.getLogger(__name__)


def get_embeddings(settings: Settings) -> OpenAIEmbeddings:
    """Return the configured embedding model.

    Like :func:`pdf_chat_rag.chat.llm.get_llm`, this honours
    ``settings.llm_base_url`` so a single OpenAI-compatible server can
    serve both chat and embeddings.
    """
    kwargs: dict = {"model": settings.embedding_model}

    if settings.llm_base_url:
        logger.info("Using OpenAI-compatible embedding endpoint: %s", settings.llm_base_url)
        kwargs["base_url"] = settings.llm_base_url
        kwargs["api_key"] = settings.openai_api_key or "EMPTY"
        # Local servers rarely accept pre-tokenised input.
        kwargs["check_embedding_ctx_length"] = False
    else:
        kwargs["api_key"] = settings.openai_api_key

    return OpenAIEmbeddings(**kwargs)
