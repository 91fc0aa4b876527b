"""Exception hierarchy shared by the ingestion, chat and serving layers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdf_chat_rag.ingestion.models import IngestionReport


class RAGError(Exception):
    """Base class for every error raised by this package."""


class InvalidSourceError(RAGError, ValueError):
    """A resource locator (URL) is malformed or uses an unsupported scheme."""


class DownloadError(RAGError):
    """A remote PDF could not be fetched."""


class ExtractionError(RAGError):
    """No reader strategy could extract text from a PDF."""


class IngestionError(RAGError):
    """A folder load finished, but one or more files failed.

    The full :class:`IngestionReport` is attached so callers can see
    which files were stored and which were left in place.
    """

    def __init__(self, message: str, report: IngestionReport) -> None:
        super().__init__(message)
        self.report = report
