"""Output planning: which destinations each exported document gets.

The planner is side-effect free. It produces relative paths only; joining
them onto the export root, creating parent directories and touching the
filesystem is the executor's job.

Per document, in order:

1. a physical copy ``files/<archive_name>`` of the stored file;
2. a link ``by_year/<YYYY>/<archive_name>``;
3. a link ``by_correspondent/<name or placeholder>/<archive_name>``;
4. one link ``by_tag/<tag>/<archive_name>`` per tag.

Every link points at the canonical copy, never at the stored source.
Collisions between documents are not detected: executing the plan in order
means the last document wins.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any

from contracts.entities import Document
from infra.export_paths import ExportLayout
from pipeline.classification import DEFAULT_SKIP_POLICY, SkipPolicy, should_skip

COPY = "copy"
LINK = "link"


@dataclass(frozen=True)
class PlannedOperation:
    """One filesystem instruction.

    For ``copy`` the target is the stored source file; for ``link`` it is the
    canonical copy. Both are relative to the export root.
    """

    kind: str
    destination: PurePosixPath
    target: PurePosixPath


@dataclass(frozen=True)
class DocumentPlan:
    document_pk: int
    archive_name: str
    source: PurePosixPath
    canonical: PurePosixPath
    links: tuple[PurePosixPath, ...]

    def destinations(self) -> tuple[PurePosixPath, ...]:
        return (self.canonical, *self.links)

    def operations(self) -> list[PlannedOperation]:
        ops = [PlannedOperation(kind=COPY, destination=self.canonical, target=self.source)]
        ops.extend(PlannedOperation(kind=LINK, destination=link, target=self.canonical) for link in self.links)
        return ops

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_pk": self.document_pk,
            "source": self.source.as_posix(),
            "canonical": self.canonical.as_posix(),
            "links": [link.as_posix() for link in self.links],
        }


@dataclass(frozen=True)
class ExportPlan:
    entries: tuple[DocumentPlan, ...] = ()
    skipped: tuple[Document, ...] = ()

    @property
    def copied_count(self) -> int:
        return len(self.entries)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def to_dict(self) -> dict[str, Any]:
        return {
            "documents": [entry.to_dict() for entry in self.entries],
            "skipped": [
                {"document_pk": doc.pk, "archive_name": doc.archive_name, "tags": list(doc.tag_names)}
                for doc in self.skipped
            ],
            "copied_count": self.copied_count,
            "skipped_count": self.skipped_count,
        }


def plan_document(document: Document, layout: ExportLayout | None = None) -> DocumentPlan:
    """Compute the destinations of one document that is not skipped."""
    layout = layout or ExportLayout()
    archive_name = document.archive_name
    correspondent_name = document.correspondent.name if document.correspondent else None

    links = [
        layout.by_year(document.created_year, archive_name),
        layout.by_correspondent(correspondent_name, archive_name),
    ]
    links.extend(layout.by_tag(tag.name, archive_name) for tag in document.tags)

    return DocumentPlan(
        document_pk=document.pk,
        archive_name=archive_name,
        source=PurePosixPath(archive_name),
        canonical=layout.canonical(archive_name),
        links=tuple(links),
    )


def build_plan(
    documents: Iterable[Document],
    *,
    policy: SkipPolicy = DEFAULT_SKIP_POLICY,
    layout: ExportLayout | None = None,
) -> ExportPlan:
    """Split *documents* into planned and skipped, preserving iteration order."""
    layout = layout or ExportLayout()
    entries: list[DocumentPlan] = []
    skipped: list[Document] = []
    for document in documents:
        if should_skip(document, policy):
            skipped.append(document)
        else:
            entries.append(plan_document(document, layout))
    return ExportPlan(entries=tuple(entries), skipped=tuple(skipped))
