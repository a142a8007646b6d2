"""Document skip policy.

A document is left out of the export when any of its tags is in the
exclusion set (exact, case-sensitive match) or ends with the excluded
suffix. By convention a trailing ``2`` marks a second or duplicate revision.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from contracts.entities import Document

DEFAULT_EXCLUDED_TAGS: frozenset[str] = frozenset({"fine", "legal", "private"})
DEFAULT_EXCLUDED_SUFFIX = "2"


@dataclass(frozen=True)
class SkipPolicy:
    excluded_tags: frozenset[str] = DEFAULT_EXCLUDED_TAGS
    excluded_suffix: str = DEFAULT_EXCLUDED_SUFFIX

    def __post_init__(self) -> None:
        if not self.excluded_suffix:
            raise ValueError("excluded_suffix must be a non-empty string")

    @classmethod
    def from_names(cls, excluded_tags: Iterable[str], excluded_suffix: str) -> SkipPolicy:
        return cls(excluded_tags=frozenset(excluded_tags), excluded_suffix=excluded_suffix)

    def excludes(self, tag_name: str) -> bool:
        return tag_name in self.excluded_tags or tag_name.endswith(self.excluded_suffix)


DEFAULT_SKIP_POLICY = SkipPolicy()


def should_skip(document: Document, policy: SkipPolicy = DEFAULT_SKIP_POLICY) -> bool:
    """Return True if *document* must not be exported."""
    return any(policy.excludes(name) for name in document.tag_names)


def skip_message(document: Document) -> str:
    """Diagnostic line reported for a skipped document."""
    return f"skipping {document.archive_name} ({', '.join(document.tag_names)})"
