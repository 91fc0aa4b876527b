"""Unit tests for the ingestion orchestrator (``DataLoader``).

PDFs are generated on the fly with fpdf2, the vector store is the
in-memory fake from ``conftest``, and remote downloads are patched, so
nothing here needs Chroma, OpenAI or the network.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from langchain_core.documents import Document

from pdf_chat_rag.config import Settings
from pdf_chat_rag.errors import DownloadError, ExtractionError, IngestionError, InvalidSourceError
from pdf_chat_rag.ingestion.readers import DocumentReader, PagePdfReader
from pdf_chat_rag.ingestion.service import DataLoader


@pytest.fixture()
def loader(fake_store, settings: Settings, splitter) -> DataLoader:
    return DataLoader(fake_store, settings, splitter=splitter)


def _fake_download(pdf_bytes: bytes):
    """Build a ``download_pdf`` replacement writing *pdf_bytes* into the temp dir."""

    def _download(url: str, dest_dir: Path, *, timeout: float) -> Path:
        target = dest_dir / "remote.pdf"
        target.write_bytes(pdf_bytes)
        return target

    return _download


# ═══════════════════════════════════════════════════════════════════════
# Folder loading
# ═══════════════════════════════════════════════════════════════════════


class TestLoadFolder:
    def test_every_pdf_contributes_chunks(self, loader: DataLoader, fake_store, docs_folder: Path, make_pdf) -> None:
        make_pdf(docs_folder / "a.pdf", ["Alpha handbook text."])
        make_pdf(docs_folder / "b.pdf", ["Beta policy text."], outline=True)

        report = loader.load()

        assert fake_store.sources() == {"a.pdf", "b.pdf"}
        assert report.processed == ["a.pdf", "b.pdf"]
        assert report.chunks_stored == fake_store.count() >= 2
        assert report.ok

    def test_processed_files_are_deleted(self, loader: DataLoader, docs_folder: Path, make_pdf) -> None:
        make_pdf(docs_folder / "a.pdf", ["Alpha."])
        make_pdf(docs_folder / "b.PDF", ["Beta."])

        report = loader.load()

        assert list(docs_folder.iterdir()) == []
        assert sorted(report.deleted) == ["a.pdf", "b.PDF"]

    def test_non_pdf_files_are_ignored(self, loader: DataLoader, docs_folder: Path, make_pdf) -> None:
        make_pdf(docs_folder / "a.pdf", ["Alpha."])
        notes = docs_folder / "notes.txt"
        notes.write_text("not a pdf")

        report = loader.load()

        assert report.processed == ["a.pdf"]
        assert notes.exists()

    def test_failed_file_stays_and_others_still_load(
        self, loader: DataLoader, fake_store, docs_folder: Path, make_pdf
    ) -> None:
        make_pdf(docs_folder / "good.pdf", ["Good text."])
        broken = docs_folder / "broken.pdf"
        broken.write_bytes(b"this is not a pdf")

        with pytest.raises(IngestionError) as excinfo:
            loader.load()

        report = excinfo.value.report
        assert report.processed == ["good.pdf"]
        assert [f.source for f in report.failed] == ["broken.pdf"]
        assert broken.exists()
        assert not (docs_folder / "good.pdf").exists()
        assert fake_store.sources() == {"good.pdf"}

    def test_storage_failure_leaves_file_in_place(self, settings: Settings, splitter, docs_folder: Path, make_pdf) -> None:
        store = MagicMock()
        store.add_documents.side_effect = ConnectionError("store unavailable")
        pdf = make_pdf(docs_folder / "a.pdf", ["Alpha."])

        with pytest.raises(IngestionError):
            DataLoader(store, settings, splitter=splitter).load()

        assert pdf.exists()

    def test_paragraph_failure_falls_back_to_pages(
        self, fake_store, settings: Settings, splitter, docs_folder: Path, make_pdf
    ) -> None:
        broken_paragraphs = MagicMock(spec=DocumentReader)
        broken_paragraphs.name = "paragraph"
        broken_paragraphs.read.side_effect = RuntimeError("paragraph extraction exploded")
        make_pdf(docs_folder / "a.pdf", ["Fallback content."], outline=True)

        loader = DataLoader(fake_store, settings, splitter=splitter, readers=[broken_paragraphs, PagePdfReader()])
        report = loader.load()

        broken_paragraphs.read.assert_called_once()
        assert report.ok
        assert {d.metadata["reader"] for d in fake_store.documents.values()} == {"page"}

    def test_delete_failure_is_not_fatal(self, loader: DataLoader, fake_store, docs_folder: Path, make_pdf) -> None:
        pdf = make_pdf(docs_folder / "a.pdf", ["Alpha."])

        with patch.object(Path, "unlink", side_effect=PermissionError("read-only")):
            report = loader.load()

        assert report.processed == ["a.pdf"]
        assert report.deleted == []
        assert pdf.exists()
        assert fake_store.count() > 0

    def test_missing_folder_loads_nothing(self, fake_store, splitter, tmp_path: Path) -> None:
        settings = Settings(_env_file=None, docs_folder=tmp_path / "nowhere")
        report = DataLoader(fake_store, settings, splitter=splitter).load()

        assert report.processed == []
        assert fake_store.count() == 0

    def test_chunks_carry_source_and_index(self, loader: DataLoader, fake_store, docs_folder: Path, make_pdf) -> None:
        make_pdf(docs_folder / "long.pdf", ["Lorem ipsum dolor sit amet. " * 40])

        loader.load()

        indexes = sorted(d.metadata["chunk_index"] for d in fake_store.documents.values())
        assert indexes == list(range(len(indexes)))
        assert len(indexes) > 1


# ═══════════════════════════════════════════════════════════════════════
# URL loading
# ═══════════════════════════════════════════════════════════════════════


class TestLoadUrl:
    URL = "https://example.com/files/remote.pdf"

    @pytest.fixture()
    def remote_pdf_bytes(self, tmp_path: Path, make_pdf) -> bytes:
        return make_pdf(tmp_path / "source" / "remote.pdf", ["Remote document text."]).read_bytes()

    def test_stores_chunks_under_url(self, loader: DataLoader, fake_store, remote_pdf_bytes: bytes) -> None:
        with patch("pdf_chat_rag.ingestion.service.download_pdf", side_effect=_fake_download(remote_pdf_bytes)):
            report = loader.load(self.URL)

        assert report.processed == [self.URL]
        assert report.deleted == []
        assert fake_store.sources() == {self.URL}

    def test_never_deletes_local_files(
        self, loader: DataLoader, docs_folder: Path, make_pdf, remote_pdf_bytes: bytes
    ) -> None:
        local = make_pdf(docs_folder / "local.pdf", ["Local text."])

        with patch("pdf_chat_rag.ingestion.service.download_pdf", side_effect=_fake_download(remote_pdf_bytes)):
            loader.load(self.URL)

        assert local.exists()

    def test_malformed_url_rejected_before_download(self, loader: DataLoader, fake_store) -> None:
        with patch("pdf_chat_rag.ingestion.service.download_pdf") as mock_download:
            with pytest.raises(InvalidSourceError):
                loader.load("htp:/broken")

        mock_download.assert_not_called()
        assert fake_store.count() == 0

    def test_download_error_propagates(self, loader: DataLoader) -> None:
        with patch("pdf_chat_rag.ingestion.service.download_pdf", side_effect=DownloadError("timeout")):
            with pytest.raises(DownloadError):
                loader.load(self.URL)

    def test_unreadable_download_raises_extraction_error(self, loader: DataLoader) -> None:
        with patch("pdf_chat_rag.ingestion.service.download_pdf", side_effect=_fake_download(b"<html>oops</html>")):
            with pytest.raises(ExtractionError):
                loader.load(self.URL)

    def test_download_uses_configured_timeout(self, fake_store, splitter, docs_folder: Path, remote_pdf_bytes: bytes) -> None:
        settings = Settings(_env_file=None, docs_folder=docs_folder, download_timeout=7.5)
        loader = DataLoader(fake_store, settings, splitter=splitter)

        with patch(
            "pdf_chat_rag.ingestion.service.download_pdf", side_effect=_fake_download(remote_pdf_bytes)
        ) as mock_download:
            loader.load(self.URL)

        assert mock_download.call_args.kwargs["timeout"] == 7.5


# ═══════════════════════════════════════════════════════════════════════
# Count / clear
# ═══════════════════════════════════════════════════════════════════════


class TestCountAndClear:
    def test_clear_empties_collection(self, loader: DataLoader, fake_store) -> None:
        fake_store.add_documents([Document(page_content="x", metadata={"source": "a.pdf", "chunk_index": 0})])
        assert loader.count() == 1

        loader.clear()

        assert loader.count() == 0

    def test_reloading_same_file_does_not_duplicate(
        self, loader: DataLoader, fake_store, docs_folder: Path, make_pdf
    ) -> None:
        make_pdf(docs_folder / "a.pdf", ["Same content."])
        loader.load()
        first = fake_store.count()

        make_pdf(docs_folder / "a.pdf", ["Same content."])
        loader.load()

        assert fake_store.count() == first
