"""Wire format of the export manifest.

A manifest is a JSON array of records. Each record carries a ``model``
discriminator, an integer ``pk`` and a ``fields`` map; document records also
carry the stored file names as top-level attributes::

    {"model": "documents.tag", "pk": 1, "fields": {"name": "invoice"}}
    {"model": "documents.document", "pk": 10,
     "__exported_file_name__": "a.pdf",
     "__exported_archive_name__": "a.pdf",
     "fields": {"created": "2021-06-01T00:00:00Z", "correspondent": 5, "tags": [1]}}

Records are decoded once, here, into a small tagged variant. All "missing
field" and "wrong type" failures surface at this boundary as
:class:`contracts.errors.ManifestFormatError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from contracts.errors import ManifestFormatError


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 date-time; an explicit UTC offset is required."""
    txt = value.strip()
    if txt.endswith(("Z", "z")):
        txt = txt[:-1] + "+00:00"
    dt = datetime.fromisoformat(txt)
    if dt.tzinfo is None:
        raise ValueError(f"timestamp has no UTC offset: {value!r}")
    return dt


class _Fields(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class NamedFields(_Fields):
    """``fields`` of tag and correspondent records."""

    name: StrictStr


class DocumentFields(_Fields):
    """``fields`` of document records.

    ``correspondent`` must be present but may be ``null``.
    """

    created: datetime
    correspondent: StrictInt | None
    tags: list[StrictInt]

    @field_validator("created", mode="before")
    @classmethod
    def _parse_created(cls, value: object) -> datetime:
        if not isinstance(value, str):
            raise ValueError("created must be an RFC 3339 date-time string")
        return parse_timestamp(value)


class IgnoredRecord(BaseModel):
    """Any record whose model is not interpreted. Only the envelope is checked."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    pk: StrictInt
    model: StrictStr


class TagRecord(IgnoredRecord):
    fields: NamedFields


class CorrespondentRecord(IgnoredRecord):
    fields: NamedFields


class DocumentRecord(IgnoredRecord):
    file_name: StrictStr = Field(
        validation_alias=AliasChoices("__exported_file_name__", "exported_file_name"),
    )
    archive_name: StrictStr | None = Field(
        default=None,
        validation_alias=AliasChoices("__exported_archive_name__", "exported_archive_name"),
    )
    fields: DocumentFields

    @property
    def stored_name(self) -> str:
        """Name of the canonical stored copy, falling back to the original upload."""
        return self.archive_name or self.file_name


ManifestRecord = TagRecord | CorrespondentRecord | DocumentRecord | IgnoredRecord

# Bare names plus the qualified Django model labels written by paperless-ngx.
RECORD_TYPES: dict[str, type[IgnoredRecord]] = {
    "tag": TagRecord,
    "documents.tag": TagRecord,
    "correspondent": CorrespondentRecord,
    "documents.correspondent": CorrespondentRecord,
    "document": DocumentRecord,
    "documents.document": DocumentRecord,
}


def _describe(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<record>"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return " | ".join(parts)


def decode_record(raw: Any, *, index: int) -> ManifestRecord:
    """Decode one raw manifest entry into its typed record.

    Raises:
        ManifestFormatError: the entry is not an object, lacks ``pk``/``model``,
            or lacks the fields its model requires.
    """
    if not isinstance(raw, Mapping):
        raise ManifestFormatError(f"record #{index}: expected an object, got {type(raw).__name__}")

    try:
        envelope = IgnoredRecord.model_validate(raw)
        record_type = RECORD_TYPES.get(envelope.model)
        if record_type is None:
            return envelope
        return record_type.model_validate(raw)
    except ValidationError as exc:
        raise ManifestFormatError(f"record #{index}: {_describe(exc)}") from exc


__all__ = [
    "CorrespondentRecord",
    "DocumentFields",
    "DocumentRecord",
    "IgnoredRecord",
    "ManifestRecord",
    "NamedFields",
    "RECORD_TYPES",
    "TagRecord",
    "decode_record",
    "parse_timestamp",
]
