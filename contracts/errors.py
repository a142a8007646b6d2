"""Error taxonomy for manifest ingestion and export execution.

Every error is fatal for a run: callers are expected to let these propagate
up to the CLI, which turns them into a one-line message and a non-zero exit.
"""

from __future__ import annotations


class ExportViewsError(Exception):
    """Base error for the export views pipeline."""


class ManifestReadError(ExportViewsError):
    """Raised when the manifest exists but cannot be read."""


class ManifestParseError(ExportViewsError, ValueError):
    """Base error for manifest content that cannot be turned into tables."""


class ManifestFormatError(ManifestParseError):
    """Raised when a record is structurally invalid (missing key, wrong type, bad timestamp)."""


class ReferenceResolutionError(ManifestParseError):
    """Raised when a document references a tag pk that was not parsed before it."""

    def __init__(self, *, document_pk: int, tag_pk: int) -> None:
        super().__init__(f"document {document_pk} references unknown tag pk {tag_pk}")
        self.document_pk = document_pk
        self.tag_pk = tag_pk


class ExecutionError(ExportViewsError):
    """Raised when a wipe, copy or link operation fails."""
