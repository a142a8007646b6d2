"""Path conventions for the export tree.

All code that needs to know how the export root is laid out (the manifest
name, the canonical ``files`` tree and the derived views) should go through
:class:`infra.export_paths.ExportLayout`.

Paths produced here are relative, POSIX-style and root-independent; the
executor is the only component that joins them onto a real directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath


def _rel(*parts: str) -> PurePosixPath:
    return PurePosixPath(*parts)


@dataclass(frozen=True)
class ExportLayout:
    """
    Central layout conventions for an export root.

    Rules:
      - Directory names are simple names, never paths
      - The four view trees are the only directories the executor wipes
      - ``archive_name`` is appended verbatim and may contain subdirectories

    This class should be the ONLY place that knows the canonical layout.
    """

    manifest_filename: str = "manifest.json"

    files_dirname: str = "files"
    by_tag_dirname: str = "by_tag"
    by_year_dirname: str = "by_year"
    by_correspondent_dirname: str = "by_correspondent"

    placeholder_correspondent: str = "dummy"

    def __post_init__(self) -> None:
        for dname in (
            "manifest_filename",
            "files_dirname",
            "by_tag_dirname",
            "by_year_dirname",
            "by_correspondent_dirname",
            "placeholder_correspondent",
        ):
            v = getattr(self, dname)
            if not isinstance(v, str) or not v.strip():
                raise ValueError(f"{dname} must be a non-empty string")
            if "/" in v or "\\" in v:
                raise ValueError(f"{dname} must be a simple name, not a path: {v!r}")

        names = self.view_dirnames()
        if len(set(names)) != len(names):
            raise ValueError(f"view directory names must be distinct: {names}")

    # -------------------------
    # Roots
    # -------------------------

    def view_dirnames(self) -> tuple[str, ...]:
        """Top-level trees owned by the export, in wipe order."""
        return (
            self.files_dirname,
            self.by_tag_dirname,
            self.by_year_dirname,
            self.by_correspondent_dirname,
        )

    def manifest_path(self) -> PurePosixPath:
        return _rel(self.manifest_filename)

    # -------------------------
    # Destinations
    # -------------------------

    def canonical(self, archive_name: str) -> PurePosixPath:
        return _rel(self.files_dirname, archive_name)

    def by_year(self, year: int, archive_name: str) -> PurePosixPath:
        return _rel(self.by_year_dirname, f"{year:04d}", archive_name)

    def by_correspondent(self, correspondent_name: str | None, archive_name: str) -> PurePosixPath:
        name = correspondent_name if correspondent_name is not None else self.placeholder_correspondent
        return _rel(self.by_correspondent_dirname, name, archive_name)

    def by_tag(self, tag_name: str, archive_name: str) -> PurePosixPath:
        return _rel(self.by_tag_dirname, tag_name, archive_name)
