"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fpdf import FPDF
from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

from pdf_chat_rag.config import Settings
from pdf_chat_rag.retrieval.base import VectorStoreBase
from pdf_chat_rag.retrieval.chroma_store import chunk_id


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services or downloads")


# ── Fakes ──────────────────────────────────────────────────────────────


class FakeVectorStore(VectorStoreBase):
    """In-memory store; search returns chunks sharing the most words with the query."""

    def __init__(self, collection_name: str = "test-collection") -> None:
        super().__init__(collection_name)
        self.documents: dict[str, Document] = {}
        self.add_calls = 0
        self.healthy = True

    def add_documents(self, documents: list[Document]) -> list[str]:
        self.add_calls += 1
        ids = []
        for doc in documents:
            doc_id = chunk_id(doc)
            self.documents[doc_id] = doc
            ids.append(doc_id)
        return ids

    def clear(self) -> None:
        self.documents.clear()

    def similarity_search_by_text(self, query: str, *, k: int = 4) -> list[dict[str, Any]]:
        words = set(query.lower().split())
        ranked = sorted(
            self.documents.items(),
            key=lambda item: len(words & set(item[1].page_content.lower().split())),
            reverse=True,
        )
        return [
            {"id": doc_id, "content": doc.page_content, "score": 0.9, "metadata": dict(doc.metadata)}
            for doc_id, doc in ranked[:k]
        ]

    def count(self) -> int:
        return len(self.documents)

    def health_check(self) -> bool:
        return self.healthy

    def sources(self) -> set[str]:
        return {doc.metadata.get("source") for doc in self.documents.values()}


# ── PDF helpers ────────────────────────────────────────────────────────


def write_pdf(path: Path, pages: list[str], *, outline: bool = False) -> Path:
    """Write a text PDF with one page per entry; optionally one bookmark per page."""
    pdf = FPDF()
    for i, text in enumerate(pages, start=1):
        pdf.add_page()
        pdf.set_font("Helvetica", size=12)
        if outline:
            pdf.start_section(f"Section {i}")
        pdf.multi_cell(0, 10, text)
    path.parent.mkdir(parents=True, exist_ok=True)
    pdf.output(str(path))
    return path


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture()
def docs_folder(tmp_path: Path) -> Path:
    folder = tmp_path / "docs"
    folder.mkdir()
    return folder


@pytest.fixture()
def settings(docs_folder: Path) -> Settings:
    return Settings(
        _env_file=None,
        collection_name="test-collection",
        docs_folder=docs_folder,
        load_on_startup=False,
        top_k=3,
    )


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def splitter() -> RecursiveCharacterTextSplitter:
    """Character splitter standing in for the token splitter (no encoding download)."""
    return RecursiveCharacterTextSplitter(chunk_size=200, chunk_overlap=0)


@pytest.fixture()
def make_pdf():
    """Factory fixture: ``make_pdf(path, pages, outline=False)``."""
    return write_pdf
