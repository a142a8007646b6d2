"""Typed entities produced by manifest ingestion.

Documents carry value copies of their tags and correspondent. Once parsed,
nothing downstream needs the lookup tables to interpret a document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(frozen=True)
class Tag:
    pk: int
    name: str


@dataclass(frozen=True)
class Correspondent:
    pk: int
    name: str


@dataclass(frozen=True)
class Document:
    """One archived document with its references resolved."""

    pk: int
    file_name: str
    archive_name: str
    created: datetime
    correspondent: Correspondent | None = None
    tags: tuple[Tag, ...] = ()

    @property
    def tag_names(self) -> tuple[str, ...]:
        return tuple(tag.name for tag in self.tags)

    @property
    def created_year(self) -> int:
        """Year of ``created`` interpreted in UTC."""
        return self.created.astimezone(UTC).year


@dataclass
class ManifestTables:
    """Entity tables keyed by primary key.

    Iteration order of ``documents`` is not part of the contract.
    """

    tags: dict[int, Tag] = field(default_factory=dict)
    correspondents: dict[int, Correspondent] = field(default_factory=dict)
    documents: dict[int, Document] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> ManifestTables:
        return cls()

    def counts(self) -> dict[str, int]:
        return {
            "tags": len(self.tags),
            "correspondents": len(self.correspondents),
            "documents": len(self.documents),
        }
