"""
runner.py

Export views runner (manifest -> entity tables -> plan -> executor).

Pipeline:
  <root>/manifest.json
    -> parse + resolve references (fatal on unknown tag pk)
      -> skip policy (fine/legal/private, or any tag ending in "2")
        -> plan: files/, by_year/, by_correspondent/, by_tag/
          -> wipe the four view trees, copy canonical files, link views

The manifest is fully parsed before the executor is prepared, so a broken
manifest never wipes an existing export.

Reporting goes through ``emit`` (stdout by default): one line per skipped
document and a final summary line.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from infra.config import Settings
from infra.export_paths import ExportLayout
from infra.logging_config import StructuredLogger, clear_run_context, set_run_context
from pipeline.classification import DEFAULT_SKIP_POLICY, SkipPolicy, skip_message
from pipeline.executor import ExportExecutor, FilesystemExecutor, RecordingExecutor
from pipeline.manifest_parser import load_manifest
from pipeline.planner import ExportPlan, build_plan
from version import ENGINE_NAME, ENGINE_VERSION

logger = StructuredLogger(__name__)


@dataclass(frozen=True)
class RunOptions:
    """Resolved inputs for one export run."""

    root_dir: Path
    link_style: str = "absolute"
    dry_run: bool = False
    policy: SkipPolicy = DEFAULT_SKIP_POLICY
    layout: ExportLayout = field(default_factory=ExportLayout)

    @property
    def manifest_path(self) -> Path:
        return self.root_dir / self.layout.manifest_path()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        root_dir: str | Path | None = None,
        link_style: str | None = None,
        dry_run: bool | None = None,
    ) -> RunOptions:
        """Build options from settings; explicit arguments (CLI flags) win."""
        return cls(
            root_dir=Path(root_dir or settings.export.root_dir),
            link_style=link_style or settings.export.link_style,
            dry_run=settings.export.dry_run if dry_run is None else dry_run,
            policy=SkipPolicy.from_names(settings.policy.excluded_tags, settings.policy.excluded_suffix),
            layout=ExportLayout(
                manifest_filename=settings.export.manifest_name,
                placeholder_correspondent=settings.policy.placeholder_correspondent,
            ),
        )


@dataclass(frozen=True)
class RunSummary:
    copied: int
    skipped: int

    def summary_line(self) -> str:
        return f"copied {self.copied} files, {self.skipped} were skipped."


def plan_export(options: RunOptions) -> ExportPlan:
    """Load the manifest below ``options.root_dir`` and plan the export."""
    tables = load_manifest(options.manifest_path)
    logger.info("manifest_loaded", path=str(options.manifest_path), **tables.counts())
    return build_plan(tables.documents.values(), policy=options.policy, layout=options.layout)


def make_executor(options: RunOptions) -> ExportExecutor:
    if options.dry_run:
        return RecordingExecutor(layout=options.layout)
    return FilesystemExecutor(options.root_dir, layout=options.layout, link_style=options.link_style)


def run_export(
    options: RunOptions,
    *,
    executor: ExportExecutor | None = None,
    emit: Callable[[str], None] = print,
) -> RunSummary:
    """Run one full export and report to *emit*.

    Any :class:`contracts.errors.ExportViewsError` propagates; lines already
    emitted and files already written stay as they are.
    """
    clear_run_context()
    set_run_context(root_dir=str(options.root_dir), engine=f"{ENGINE_NAME}/{ENGINE_VERSION}")
    try:
        plan = plan_export(options)

        executor = executor or make_executor(options)
        executor.prepare()

        for document in plan.skipped:
            emit(skip_message(document))
        for entry in plan.entries:
            executor.apply(entry)

        summary = RunSummary(copied=plan.copied_count, skipped=plan.skipped_count)
        emit(summary.summary_line())
        logger.info(
            "export_finished",
            executor=executor.executor_name(),
            copied=summary.copied,
            skipped=summary.skipped,
        )
        return summary
    finally:
        clear_run_context()
