"""PDF reader strategies and the ordered fallback between them.

Two strategies are provided:

* :class:`ParagraphPdfReader` — one document per outline entry
  (bookmark / table-of-contents item).  Gives the best chunk boundaries
  but only works on PDFs that carry an outline.
* :class:`PagePdfReader` — one document per page via LangChain's
  ``PyPDFLoader``.  Works on any text PDF.

:func:`read_with_fallback` tries them in order and returns the first
result that contains text.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from langchain_community.document_loaders import PyPDFLoader
from langchain_core.documents import Document
from pypdf import PdfReader

from pdf_chat_rag.errors import ExtractionError

logger = logging.getLogger(__name__)


class DocumentReader(ABC):
    """Turns one PDF on disk into LangChain documents."""

    name: str = "base"

    @abstractmethod
    def read(self, path: Path, source: str) -> list[Document]:
        """Extract documents from *path*, tagging each with *source*.

        Raises on any failure; the caller decides whether to fall back.
        """
        ...


@dataclass(frozen=True)
class _OutlineEntry:
    title: str
    level: int
    start_page: int


def _flatten_outline(reader: PdfReader, outline: list[Any], level: int = 0) -> list[_OutlineEntry]:
    """Walk pypdf's nested outline; a nested list holds the previous item's children."""
    entries: list[_OutlineEntry] = []
    for item in outline:
        if isinstance(item, list):
            entries.extend(_flatten_outline(reader, item, level + 1))
            continue
        page = reader.get_destination_page_number(item)
        if page is None or page < 0:
            continue
        entries.append(_OutlineEntry(title=str(item.title), level=level, start_page=page))
    return entries


class ParagraphPdfReader(DocumentReader):
    """Split a PDF along its outline.

    Each outline entry covers the pages from its own start page up to
    (excluding) the next entry's start page; entries sharing a start page
    both get that page.  Page numbers in metadata are zero-based, like
    ``PyPDFLoader``'s ``page``.
    """

    name = "paragraph"

    def read(self, path: Path, source: str) -> list[Document]:
        reader = PdfReader(str(path))
        entries = sorted(_flatten_outline(reader, reader.outline), key=lambda e: e.start_page)
        if not entries:
            raise ExtractionError(
                f"{source} has no document outline (table of contents); "
                "it cannot be split into paragraphs"
            )

        page_count = len(reader.pages)
        page_text: dict[int, str] = {}

        def text_of(page: int) -> str:
            if page not in page_text:
                page_text[page] = reader.pages[page].extract_text() or ""
            return page_text[page]

        documents: list[Document] = []
        for i, entry in enumerate(entries):
            next_start = entries[i + 1].start_page if i + 1 < len(entries) else page_count
            end = min(max(next_start, entry.start_page + 1), page_count)
            text = "\n".join(text_of(p) for p in range(entry.start_page, end)).strip()
            if not text:
                continue
            documents.append(
                Document(
                    page_content=text,
                    metadata={
                        "source": source,
                        "title": entry.title,
                        "level": entry.level,
                        "start_page": entry.start_page,
                        "end_page": end - 1,
                        "reader": self.name,
                    },
                )
            )
        return documents


class PagePdfReader(DocumentReader):
    """One document per page, via ``PyPDFLoader``."""

    name = "page"

    def read(self, path: Path, source: str) -> list[Document]:
        documents = PyPDFLoader(str(path)).load()
        for doc in documents:
            doc.metadata["source"] = source
            doc.metadata["reader"] = self.name
        return documents


DEFAULT_READERS: tuple[DocumentReader, ...] = (ParagraphPdfReader(), PagePdfReader())


def read_with_fallback(
    path: Path,
    source: str,
    readers: Sequence[DocumentReader] = DEFAULT_READERS,
) -> list[Document]:
    """Return the documents from the first reader that succeeds with text.

    A reader that raises, or that returns only empty documents, counts as a
    failure and the next one is tried.

    Raises
    ------
    ExtractionError
        When every reader failed.
    """
    failures: list[str] = []
    for reader in readers:
        try:
            documents = reader.read(path, source)
        except Exception as exc:
            logger.warning("%s reader failed on %s (%s); trying next strategy", reader.name, source, exc)
            failures.append(f"{reader.name}: {exc}")
            continue

        if not any(doc.page_content.strip() for doc in documents):
            logger.warning("%s reader extracted no text from %s; trying next strategy", reader.name, source)
            failures.append(f"{reader.name}: no text extracted")
            continue

        logger.info("Read %d document(s) from %s with the %s reader", len(documents), source, reader.name)
        return documents

    raise ExtractionError(f"Could not extract text from {source}: " + "; ".join(failures))
