"""Outcome records for ingestion runs."""

from __future__ import annotations

from pydantic import BaseModel, Field


class FileFailure(BaseModel):
    """A resource that could not be ingested, and why."""

    source: str
    reason: str


class IngestionReport(BaseModel):
    """Summary of one load call.

    Attributes
    ----------
    skipped:
        ``True`` when the conditional bulk load found a non-empty collection
        and did nothing.
    processed:
        Sources (file names or URLs) whose chunks were stored.
    deleted:
        Local files removed from the docs folder after being stored.
    failed:
        Sources that could not be ingested; local ones stay on disk.
    chunks_stored:
        Total chunks handed to the vector store.
    """

    skipped: bool = False
    processed: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    failed: list[FileFailure] = Field(default_factory=list)
    chunks_stored: int = 0

    @property
    def ok(self) -> bool:
        return not self.failed
