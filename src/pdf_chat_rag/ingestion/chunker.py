"""Text chunking strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_text_splitters import TokenTextSplitter

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_text_splitters import TextSplitter


def build_splitter(
    chunk_size: int = 800,
    chunk_overlap: int = 0,
    encoding_name: str = "cl100k_base",
) -> TextSplitter:
    """Return a token-bounded splitter.

    Parameters
    ----------
    chunk_size:
        Maximum number of tokens per chunk.
    chunk_overlap:
        Number of overlapping tokens between consecutive chunks.
    encoding_name:
        ``tiktoken`` encoding used to count tokens.
    """
    return TokenTextSplitter(
        encoding_name=encoding_name,
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
    )


def chunk_documents(documents: list[Document], splitter: TextSplitter) -> list[Document]:
    """Split *documents* into chunks ready for embedding.

    Whitespace-only chunks are dropped.  Surviving chunks are numbered per
    ``source`` in ``metadata["chunk_index"]``.
    """
    counters: dict[str, int] = {}
    chunks: list[Document] = []
    for chunk in splitter.split_documents(documents):
        if not chunk.page_content.strip():
            continue
        source = str(chunk.metadata.get("source", "unknown"))
        chunk.metadata["chunk_index"] = counters.get(source, 0)
        counters[source] = chunk.metadata["chunk_index"] + 1
        chunks.append(chunk)
    return chunks
