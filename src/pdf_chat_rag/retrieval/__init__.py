"""
Retrieval — vector storage and similarity search with citations.

This module wraps the vector store behind a clean interface so that the
ingestion and chat layers never need to know which DB is backing them.

Public surface
--------------
- :class:`SemanticRetriever` — similarity search returning cited results.
- :class:`VectorStoreBase` — abstract backend (subclass for other stores).
- :class:`ChromaVectorStore` — default Chroma backend.
- :class:`Citation`, :class:`RetrievalResult` — data models.
"""

from pdf_chat_rag.retrieval.base import VectorStoreBase
from pdf_chat_rag.retrieval.models import Citation, RetrievalResult
from pdf_chat_rag.retrieval.retriever import SemanticRetriever

__all__ = [
    "Citation",
    "ChromaVectorStore",
    "RetrievalResult",
    "SemanticRetriever",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from pdf_chat_rag.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
