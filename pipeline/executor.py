"""Export executors: the only components that touch the export tree.

An executor is prepared once (wiping the view trees owned by the export) and
then applies one :class:`pipeline.planner.DocumentPlan` at a time. Any
failure raises :class:`contracts.errors.ExecutionError`; nothing already
written is rolled back.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Protocol

from contracts.errors import ExecutionError
from infra.export_paths import ExportLayout
from infra.logging_config import StructuredLogger
from pipeline.planner import DocumentPlan, PlannedOperation

logger = StructuredLogger(__name__)

LINK_STYLES = ("absolute", "relative")


class ExportExecutor(Protocol):
    """Protocol for plan executors."""

    def executor_name(self) -> str:
        """Return deterministic executor name for diagnostics."""

    def prepare(self) -> None:
        """Clear the view trees before any document is applied."""

    def apply(self, plan: DocumentPlan) -> None:
        """Materialize one document's canonical copy and links."""


class FilesystemExecutor:
    """Copy files and create symlinks below an export root."""

    def __init__(
        self,
        root: str | Path,
        *,
        layout: ExportLayout | None = None,
        link_style: str = "absolute",
    ) -> None:
        if link_style not in LINK_STYLES:
            raise ValueError(f"link_style must be one of {LINK_STYLES}, got {link_style!r}")
        self._root = Path(root)
        self._layout = layout or ExportLayout()
        self._link_style = link_style

    def executor_name(self) -> str:
        return "filesystem"

    @property
    def root(self) -> Path:
        return self._root

    def prepare(self) -> None:
        wiped: list[str] = []
        for dirname in self._layout.view_dirnames():
            path = self._root / dirname
            try:
                if path.is_symlink() or path.is_file():
                    path.unlink()
                else:
                    shutil.rmtree(path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise ExecutionError(f"cannot clear {path}: {exc}") from exc
            wiped.append(dirname)
        logger.info("views_wiped", wiped=",".join(wiped) or "-")

    def apply(self, plan: DocumentPlan) -> None:
        canonical = self._root / plan.canonical
        self._copy(self._root / plan.source, canonical)
        for link in plan.links:
            self._link(canonical, self._root / link)
        logger.debug("document_exported", document_pk=plan.document_pk, links=len(plan.links))

    def _copy(self, source: Path, destination: Path) -> None:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy(source, destination)
        except OSError as exc:
            raise ExecutionError(f"cannot copy {source} to {destination}: {exc}") from exc

    def _link_text(self, canonical: Path, link: Path) -> str:
        if self._link_style == "relative":
            return os.path.relpath(canonical, link.parent)
        return os.path.abspath(canonical)

    def _link(self, canonical: Path, link: Path) -> None:
        try:
            link.parent.mkdir(parents=True, exist_ok=True)
            if link.is_symlink():
                link.unlink()
            elif link.exists():
                raise ExecutionError(f"cannot link {link}: destination exists and is not a symlink")
            os.symlink(self._link_text(canonical, link), link)
        except OSError as exc:
            raise ExecutionError(f"cannot link {link} to {canonical}: {exc}") from exc


class RecordingExecutor:
    """In-memory executor for dry runs and deterministic unit tests."""

    def __init__(self, *, layout: ExportLayout | None = None) -> None:
        self._layout = layout or ExportLayout()
        self._wiped: list[str] = []
        self._operations: list[PlannedOperation] = []

    def executor_name(self) -> str:
        return "recording"

    def prepare(self) -> None:
        self._wiped.extend(self._layout.view_dirnames())

    def apply(self, plan: DocumentPlan) -> None:
        self._operations.extend(plan.operations())

    def wiped(self) -> list[str]:
        """Return a copy of the wiped view directory names."""
        return list(self._wiped)

    def operations(self) -> list[PlannedOperation]:
        """Return a copy of recorded operations in application order."""
        return list(self._operations)
