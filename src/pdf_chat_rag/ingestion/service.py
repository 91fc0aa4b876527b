"""Ingestion orchestrator — from PDF files or URLs to stored chunks."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from pdf_chat_rag.errors import IngestionError
from pdf_chat_rag.ingestion.chunker import build_splitter, chunk_documents
from pdf_chat_rag.ingestion.fetch import download_pdf, validate_url
from pdf_chat_rag.ingestion.models import FileFailure, IngestionReport
from pdf_chat_rag.ingestion.readers import DEFAULT_READERS, DocumentReader, read_with_fallback

if TYPE_CHECKING:
    from langchain_text_splitters import TextSplitter

    from pdf_chat_rag.config import Settings
    from pdf_chat_rag.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


class DataLoader:
    """Loads PDFs into the vector store.

    Parameters
    ----------
    store:
        Destination for the chunks.
    settings:
        Supplies the docs folder, chunking parameters and download timeout.
    splitter:
        Text splitter to use.  Defaults to a token splitter built from
        ``settings`` on first use.
    readers:
        Extraction strategies, tried in order for every PDF.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        settings: Settings,
        *,
        splitter: TextSplitter | None = None,
        readers: Sequence[DocumentReader] = DEFAULT_READERS,
    ) -> None:
        self._store = store
        self.docs_folder = Path(settings.docs_folder)
        self._chunk_size = settings.chunk_size
        self._chunk_overlap = settings.chunk_overlap
        self._download_timeout = settings.download_timeout
        self._splitter = splitter
        self._readers = tuple(readers)

    @property
    def splitter(self) -> TextSplitter:
        if self._splitter is None:
            self._splitter = build_splitter(self._chunk_size, self._chunk_overlap)
        return self._splitter

    # -- public API -----------------------------------------------------------

    def load(self, source: str = "") -> IngestionReport:
        """Load the docs folder (empty *source*) or the single PDF at URL *source*.

        Raises
        ------
        InvalidSourceError
            *source* is not an http(s) URL.
        """
        if not source:
            return self.load_folder()
        return self.load_url(source)

    def load_folder(self) -> IngestionReport:
        """Ingest every PDF in the docs folder, deleting each one once stored.

        Files that fail stay on disk and are reported; the rest of the
        folder is still processed.

        Raises
        ------
        IngestionError
            After the whole folder was attempted, if any file failed.
        """
        report = IngestionReport()
        pdf_files = self._discover()
        logger.info("Loading %d PDF file(s) from %s", len(pdf_files), self.docs_folder)

        for path in pdf_files:
            try:
                report.chunks_stored += self._ingest(path, path.name)
            except Exception as exc:
                logger.exception("Failed to ingest %s; leaving it in place", path.name)
                report.failed.append(FileFailure(source=path.name, reason=str(exc)))
                continue

            report.processed.append(path.name)
            logger.info("Successfully processed and stored %s", path.name)
            if self._delete_file(path):
                report.deleted.append(path.name)

        if report.failed:
            names = ", ".join(f.source for f in report.failed)
            raise IngestionError(f"{len(report.failed)} file(s) could not be ingested: {names}", report)
        return report

    def load_url(self, url: str) -> IngestionReport:
        """Download and ingest one remote PDF.  No local file is ever deleted."""
        url = validate_url(url)
        report = IngestionReport()

        with tempfile.TemporaryDirectory(prefix="pdf-chat-") as tmp:
            path = download_pdf(url, Path(tmp), timeout=self._download_timeout)
            report.chunks_stored = self._ingest(path, url)

        report.processed.append(url)
        logger.info("Successfully processed and stored %s", url)
        return report

    def count(self) -> int:
        """Number of chunks in the collection."""
        return self._store.count()

    def clear(self) -> None:
        """Remove every chunk from the collection.  Use with caution."""
        logger.info("Clearing all documents from collection %r", self._store.collection_name)
        self._store.clear()
        logger.info("All documents cleared from collection %r", self._store.collection_name)

    # -- internals ------------------------------------------------------------

    def _discover(self) -> list[Path]:
        if not self.docs_folder.is_dir():
            logger.warning("Docs folder %s does not exist; nothing to load", self.docs_folder)
            return []
        files = sorted(
            p for p in self.docs_folder.iterdir() if p.is_file() and p.suffix.lower() == ".pdf"
        )
        for path in files:
            logger.debug("Found PDF file: %s", path.name)
        return files

    def _ingest(self, path: Path, source: str) -> int:
        logger.debug("Processing PDF resource: %s", source)
        documents = read_with_fallback(path, source, self._readers)
        chunks = chunk_documents(documents, self.splitter)
        self._store.add_documents(chunks)
        return len(chunks)

    @staticmethod
    def _delete_file(path: Path) -> bool:
        try:
            path.unlink()
        except OSError:
            logger.error("Could not delete file %s", path, exc_info=True)
            return False
        logger.info("Deleted file %s", path)
        return True
