"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING, Any

import chromadb

from pdf_chat_rag.retrieval.base import VectorStoreBase

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_core.embeddings import Embeddings

    from pdf_chat_rag.config import Settings

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float, bool)


def chunk_id(document: Document) -> str:
    """Deterministic id for a chunk: same source, position and text → same id."""
    meta = document.metadata
    key = f"{meta.get('source', '')}\x00{meta.get('chunk_index', '')}\x00{document.page_content}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:32]


def _flatten_metadata(metadata: dict[str, Any]) -> dict[str, str | int | float | bool]:
    """Chroma only stores scalar metadata; drop ``None`` and stringify the rest."""
    flat: dict[str, str | int | float | bool] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        flat[key] = value if isinstance(value, _SCALAR_TYPES) else str(value)
    return flat


def build_client(settings: Settings) -> Any:
    """Return a local persistent client or an HTTP client, depending on settings."""
    if settings.chroma_persist_dir:
        logger.info("Using local Chroma store at %s", settings.chroma_persist_dir)
        return chromadb.PersistentClient(path=settings.chroma_persist_dir)
    logger.info("Using Chroma server at %s:%d", settings.chroma_host, settings.chroma_port)
    return chromadb.HttpClient(host=settings.chroma_host, port=settings.chroma_port)


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    client:
        Any ``chromadb`` client (HTTP, persistent or ephemeral).
    embeddings:
        LangChain embedding model used for both chunks and queries.
    batch_size:
        Max records per upsert call.
    """

    def __init__(
        self,
        collection_name: str,
        *,
        client: Any,
        embeddings: Embeddings,
        batch_size: int = 5000,
    ) -> None:
        super().__init__(collection_name)
        self._client = client
        self._collection = client.get_or_create_collection(collection_name)
        self._embedder = embeddings
        self._batch_size = batch_size

    @classmethod
    def from_settings(cls, settings: Settings, embeddings: Embeddings) -> ChromaVectorStore:
        return cls(settings.collection_name, client=build_client(settings), embeddings=embeddings)

    # -- VectorStoreBase overrides --------------------------------------------

    def add_documents(self, documents: list[Document]) -> list[str]:
        # Keyed by id so a batch never carries the same id twice.
        unique = {chunk_id(doc): doc for doc in documents}
        ids = list(unique)

        for start in range(0, len(ids), self._batch_size):
            batch_ids = ids[start : start + self._batch_size]
            batch_docs = [unique[i] for i in batch_ids]
            texts = [d.page_content for d in batch_docs]
            self._collection.upsert(
                ids=batch_ids,
                documents=texts,
                metadatas=[_flatten_metadata(d.metadata) for d in batch_docs],
                embeddings=self._embedder.embed_documents(texts),
            )
            logger.debug("Upserted %d chunks into %r", len(batch_ids), self.collection_name)
        return ids

    def clear(self) -> None:
        ids = self._collection.get(include=[])["ids"]
        for start in range(0, len(ids), self._batch_size):
            self._collection.delete(ids=ids[start : start + self._batch_size])
        logger.info("Deleted %d chunks from %r", len(ids), self.collection_name)

    def similarity_search_by_text(self, query: str, *, k: int = 4) -> list[dict[str, Any]]:
        embedding = self._embedder.embed_query(query)
        results = self._collection.query(
            query_embeddings=[embedding],
            n_results=k,
            include=["documents", "metadatas", "distances"],
        )

        hits: list[dict[str, Any]] = []
        ids = (results.get("ids") or [[]])[0]
        docs = (results.get("documents") or [[]])[0]
        metas = (results.get("metadatas") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]

        for doc_id, content, meta, dist in zip(ids, docs, metas, distances):
            # Chroma returns L2 distances; convert to a 0-1 similarity score.
            score = 1.0 / (1.0 + dist)
            hits.append(
                {
                    "id": doc_id,
                    "content": content or "",
                    "score": score,
                    "metadata": dict(meta or {}),
                }
            )
        return hits

    def count(self) -> int:
        return self._collection.count()

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
