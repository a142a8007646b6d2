"""Manifest ingestion: bytes -> typed entity tables.

Records are interpreted in sequence. A document's references are resolved
against the tables as they exist at that point, so a manifest must list tags
and correspondents before the documents that use them.

Resolution policy is deliberately asymmetric:

- an unknown tag pk is fatal (:class:`ReferenceResolutionError`);
- an unknown correspondent pk degrades to "no correspondent", since the
  exporter may legitimately reference soft-deleted correspondents.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from contracts.entities import Correspondent, Document, ManifestTables, Tag
from contracts.errors import ManifestFormatError, ManifestReadError, ReferenceResolutionError
from contracts.manifest_records import (
    CorrespondentRecord,
    DocumentRecord,
    TagRecord,
    decode_record,
)
from infra.logging_config import StructuredLogger

logger = StructuredLogger(__name__)


def read_manifest_bytes(path: str | Path) -> bytes | None:
    """Return the manifest bytes, or ``None`` when no manifest exists.

    A missing manifest is the normal state of a fresh export directory. Any
    other failure to read it is fatal.
    """
    p = Path(path)
    try:
        return p.read_bytes()
    except FileNotFoundError:
        logger.info("manifest_missing", path=str(p))
        return None
    except OSError as exc:
        raise ManifestReadError(f"cannot read manifest {p}: {exc}") from exc


def _load_records(data: bytes) -> list[object]:
    try:
        payload = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ManifestFormatError(f"manifest is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise ManifestFormatError(
            f"manifest must be a JSON array of records, got {type(payload).__name__}"
        )
    return payload


def _resolve_document(
    record: DocumentRecord,
    *,
    tags: Mapping[int, Tag],
    correspondents: Mapping[int, Correspondent],
) -> Document:
    resolved_tags: list[Tag] = []
    for tag_pk in record.fields.tags:
        tag = tags.get(tag_pk)
        if tag is None:
            raise ReferenceResolutionError(document_pk=record.pk, tag_pk=tag_pk)
        resolved_tags.append(tag)

    correspondent = None
    if record.fields.correspondent is not None:
        correspondent = correspondents.get(record.fields.correspondent)
        if correspondent is None:
            logger.debug(
                "correspondent_unresolved",
                document_pk=record.pk,
                correspondent_pk=record.fields.correspondent,
            )

    return Document(
        pk=record.pk,
        file_name=record.file_name,
        archive_name=record.stored_name,
        created=record.fields.created,
        correspondent=correspondent,
        tags=tuple(resolved_tags),
    )


def parse_manifest(data: bytes | None) -> ManifestTables:
    """Build entity tables from manifest bytes.

    ``None`` (no manifest) yields empty tables. Duplicate pks overwrite
    earlier entries of the same table.

    Raises:
        ManifestFormatError: malformed JSON, records or timestamps.
        ReferenceResolutionError: a document references an unknown tag pk.
    """
    tables = ManifestTables.empty()
    if data is None:
        return tables

    for index, raw in enumerate(_load_records(data)):
        record = decode_record(raw, index=index)
        if isinstance(record, TagRecord):
            tables.tags[record.pk] = Tag(pk=record.pk, name=record.fields.name)
        elif isinstance(record, CorrespondentRecord):
            tables.correspondents[record.pk] = Correspondent(pk=record.pk, name=record.fields.name)
        elif isinstance(record, DocumentRecord):
            tables.documents[record.pk] = _resolve_document(
                record,
                tags=tables.tags,
                correspondents=tables.correspondents,
            )

    logger.debug("manifest_parsed", **tables.counts())
    return tables


def load_manifest(path: str | Path) -> ManifestTables:
    """Read and parse the manifest at *path*."""
    return parse_manifest(read_manifest_bytes(path))
