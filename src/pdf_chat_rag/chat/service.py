"""Chat orchestrator — retrieve, build the prompt, call the model."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Iterator

from pdf_chat_rag.chat.prompts import build_prompt
from pdf_chat_rag.ingestion.models import IngestionReport

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from pdf_chat_rag.ingestion.service import DataLoader
    from pdf_chat_rag.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)


def _message_text(message: Any) -> str:
    """Plain text of a chat message or chunk, whatever its content shape."""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class ChatBotService:
    """Answers questions from the stored PDFs and manages their loading.

    Parameters
    ----------
    retriever:
        Similarity search over the stored chunks.
    llm:
        Any LangChain chat model.
    loader:
        Ingestion orchestrator writing to the same collection.
    """

    def __init__(self, retriever: SemanticRetriever, llm: BaseChatModel, loader: DataLoader) -> None:
        self._retriever = retriever
        self._llm = llm
        self._loader = loader

    # -- chat -----------------------------------------------------------------

    def chat(self, query: str) -> str:
        """Return the model's full answer to *query*."""
        logger.info("Received chat request with query: %s", query)
        response = self._llm.invoke(self._prompt_for(query))
        return _message_text(response)

    def chat_stream(self, query: str) -> Iterator[str]:
        """Return the answer to *query* as text fragments, produced as the model generates them.

        Retrieval happens before this returns; the model is only called once
        the iterator is consumed.  The iterator is single-use.
        """
        logger.info("Received chat stream request with query: %s", query)
        return self._stream_text(self._prompt_for(query))

    async def achat_stream(self, query: str) -> AsyncIterator[str]:
        """Async variant of :meth:`chat_stream`.

        Retrieval runs in a worker thread before this returns, so a failing
        store raises here rather than mid-stream.  Closing the returned
        iterator early (``aclose()`` or task cancellation) stops the
        underlying model stream.
        """
        logger.info("Received async chat stream request with query: %s", query)
        prompt = await asyncio.to_thread(self._prompt_for, query)
        return self._astream_text(prompt)

    def _stream_text(self, prompt: str) -> Iterator[str]:
        for chunk in self._llm.stream(prompt):
            text = _message_text(chunk)
            if text:
                yield text

    async def _astream_text(self, prompt: str) -> AsyncIterator[str]:
        async for chunk in self._llm.astream(prompt):
            text = _message_text(chunk)
            if text:
                yield text

    def _prompt_for(self, query: str) -> str:
        results = self._retriever.search(query)
        prompt = build_prompt(query, results)
        logger.debug("Rendered prompt: %s", prompt)
        return prompt

    # -- loading --------------------------------------------------------------

    def load(self, source: str | None = None) -> IngestionReport:
        """Load documents into the collection.

        * ``load()`` — bulk-load the docs folder, but only when the
          collection is empty.  A failing count check propagates.
        * ``load("")`` — bulk-load the docs folder unconditionally.
        * ``load(url)`` — load the single PDF at *url*.
        """
        if source is None:
            if self._loader.count() == 0:
                logger.info("Collection is empty; loading documents from %s", self._loader.docs_folder)
                return self._loader.load()
            logger.info("There are already documents in the collection; skipping bulk load")
            return IngestionReport(skipped=True)

        if not source:
            logger.info("Loading documents from whatever is in %s", self._loader.docs_folder)
        else:
            logger.info("Loading documents from specified file: %s", source)
        return self._loader.load(source)

    def clear(self) -> None:
        """Remove every stored chunk.  Use with caution."""
        logger.info("Clearing all documents from the collection")
        self._loader.clear()

    def health_check(self) -> bool:
        """``True`` when the vector store backing retrieval is reachable."""
        return self._retriever.store.health_check()
