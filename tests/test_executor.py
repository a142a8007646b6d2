"""Tests for the filesystem and recording executors."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from contracts.errors import ExecutionError
from infra.export_paths import ExportLayout
from pipeline.executor import FilesystemExecutor, RecordingExecutor
from pipeline.planner import plan_document
from tests.factories import make_document


def _symlinks_supported(tmp_path: Path) -> bool:
    probe = tmp_path / ".probe"
    try:
        os.symlink(tmp_path, probe)
    except (OSError, NotImplementedError):
        return False
    probe.unlink()
    return True


@pytest.fixture
def export_root(tmp_path: Path) -> Path:
    if not _symlinks_supported(tmp_path):
        pytest.skip("platform cannot create symlinks")
    root = tmp_path / "export"
    root.mkdir()
    (root / "a.pdf").write_bytes(b"%PDF-a")
    (root / "sub").mkdir()
    (root / "sub" / "b.pdf").write_bytes(b"%PDF-b")
    return root


def test_apply_copies_and_links(export_root: Path) -> None:
    executor = FilesystemExecutor(export_root)
    executor.apply(plan_document(make_document(archive_name="a.pdf", tags=("invoice",), correspondent="Acme")))

    canonical = export_root / "files" / "a.pdf"
    assert canonical.read_bytes() == b"%PDF-a"
    assert not canonical.is_symlink()

    for rel in ("by_year/2021/a.pdf", "by_correspondent/Acme/a.pdf", "by_tag/invoice/a.pdf"):
        link = export_root / rel
        assert link.is_symlink()
        assert Path(os.readlink(link)) == canonical.absolute()
        assert link.read_bytes() == b"%PDF-a"

    # the stored source is untouched
    assert (export_root / "a.pdf").read_bytes() == b"%PDF-a"


def test_relative_links_survive_moving_the_tree(export_root: Path, tmp_path: Path) -> None:
    executor = FilesystemExecutor(export_root, link_style="relative")
    executor.apply(plan_document(make_document(archive_name="sub/b.pdf", tags=("t",))))

    link = export_root / "by_tag" / "t" / "sub" / "b.pdf"
    assert os.readlink(link) == os.path.join("..", "..", "..", "files", "sub", "b.pdf")

    moved = tmp_path / "moved"
    export_root.rename(moved)
    assert (moved / "by_tag" / "t" / "sub" / "b.pdf").read_bytes() == b"%PDF-b"


def test_prepare_wipes_only_view_trees(export_root: Path) -> None:
    for name in ("files", "by_tag", "by_year", "by_correspondent"):
        (export_root / name / "old").mkdir(parents=True)
        (export_root / name / "old" / "stale.pdf").write_bytes(b"x")

    FilesystemExecutor(export_root).prepare()

    for name in ("files", "by_tag", "by_year", "by_correspondent"):
        assert not (export_root / name).exists()
    assert (export_root / "a.pdf").exists()
    assert (export_root / "sub" / "b.pdf").exists()


def test_prepare_on_fresh_root_is_a_noop(export_root: Path) -> None:
    FilesystemExecutor(export_root).prepare()
    assert sorted(p.name for p in export_root.iterdir()) == ["a.pdf", "sub"]


def test_later_link_replaces_earlier_link(export_root: Path) -> None:
    """Two documents with the same archive name under one tag: last write wins."""
    executor = FilesystemExecutor(export_root)

    executor.apply(plan_document(make_document(pk=1, archive_name="a.pdf", tags=("t",))))
    (export_root / "a.pdf").write_bytes(b"%PDF-a2")
    executor.apply(plan_document(make_document(pk=2, archive_name="a.pdf", tags=("t",))))

    link = export_root / "by_tag" / "t" / "a.pdf"
    assert link.is_symlink()
    assert link.read_bytes() == b"%PDF-a2"


def test_link_over_regular_file_fails(export_root: Path) -> None:
    blocker = export_root / "by_year" / "2021" / "a.pdf"
    blocker.parent.mkdir(parents=True)
    blocker.write_bytes(b"not a link")

    with pytest.raises(ExecutionError, match="not a symlink"):
        FilesystemExecutor(export_root).apply(plan_document(make_document(archive_name="a.pdf")))


def test_missing_source_fails(export_root: Path) -> None:
    with pytest.raises(ExecutionError, match="cannot copy"):
        FilesystemExecutor(export_root).apply(plan_document(make_document(archive_name="missing.pdf")))


def test_invalid_link_style() -> None:
    with pytest.raises(ValueError):
        FilesystemExecutor(".", link_style="hard")


def test_recording_executor_records_operations() -> None:
    executor = RecordingExecutor(layout=ExportLayout())
    executor.prepare()
    executor.apply(plan_document(make_document(archive_name="a.pdf", tags=("x",))))

    assert executor.wiped() == ["files", "by_tag", "by_year", "by_correspondent"]
    ops = executor.operations()
    assert [(op.kind, op.destination.as_posix()) for op in ops] == [
        ("copy", "files/a.pdf"),
        ("link", "by_year/2021/a.pdf"),
        ("link", "by_correspondent/dummy/a.pdf"),
        ("link", "by_tag/x/a.pdf"),
    ]
