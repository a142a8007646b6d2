"""Contracts shared across the export pipeline.

The contracts package defines:
- the typed entities (tags, correspondents, documents) built from a manifest
- the manifest wire records and their decoding step
- the error taxonomy used by the parser, the planner and the executors
"""

from contracts import entities
from contracts import errors
from contracts import manifest_records

# Explicit re-exports to satisfy ruff F401
__all__ = [
    "Correspondent",
    "Document",
    "ManifestTables",
    "Tag",
    "ExecutionError",
    "ExportViewsError",
    "ManifestFormatError",
    "ManifestParseError",
    "ManifestReadError",
    "ReferenceResolutionError",
    "decode_record",
]

Correspondent = entities.Correspondent
Document = entities.Document
ManifestTables = entities.ManifestTables
Tag = entities.Tag

ExecutionError = errors.ExecutionError
ExportViewsError = errors.ExportViewsError
ManifestFormatError = errors.ManifestFormatError
ManifestParseError = errors.ManifestParseError
ManifestReadError = errors.ManifestReadError
ReferenceResolutionError = errors.ReferenceResolutionError

decode_record = manifest_records.decode_record
