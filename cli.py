"""
exportviews CLI (flat-layout friendly).

Usage
-----
exportviews build --root /srv/paperless/export
exportviews build --root /srv/paperless/export --link-style relative
exportviews build --dry-run
exportviews plan --root /srv/paperless/export --format json

The export root holds ``manifest.json`` and the stored files it names.
``build`` wipes and rebuilds ``files/``, ``by_tag/``, ``by_year/`` and
``by_correspondent/`` below it; ``plan`` only reads the manifest.
"""

from __future__ import annotations

import argparse
import json
from typing import List, Optional

from contracts.errors import ExportViewsError
from infra.config import get_settings
from infra.logging_config import setup_logging
from pipeline.classification import skip_message
from pipeline.executor import LINK_STYLES
from runner import RunOptions, RunSummary, plan_export, run_export
from version import ENGINE_NAME, ENGINE_VERSION


def _options(args: argparse.Namespace) -> RunOptions:
    return RunOptions.from_settings(
        get_settings(),
        root_dir=args.root,
        link_style=getattr(args, "link_style", None),
        dry_run=True if getattr(args, "dry_run", False) else None,
    )


def cmd_build(args: argparse.Namespace) -> None:
    options = _options(args)
    try:
        run_export(options)
    except ExportViewsError as exc:
        raise SystemExit(f"error: {exc}") from exc


def cmd_plan(args: argparse.Namespace) -> None:
    options = _options(args)
    try:
        plan = plan_export(options)
    except ExportViewsError as exc:
        raise SystemExit(f"error: {exc}") from exc

    if args.format == "json":
        print(json.dumps(plan.to_dict(), indent=2, ensure_ascii=False))
        return

    for document in plan.skipped:
        print(skip_message(document))
    for entry in plan.entries:
        print(f"copy {entry.source} -> {entry.canonical}")
        for link in entry.links:
            print(f"link {link} -> {entry.canonical}")
    print(RunSummary(copied=plan.copied_count, skipped=plan.skipped_count).summary_line())


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="exportviews", description="Browsable views over a document export")
    p.add_argument("--version", action="version", version=f"{ENGINE_NAME} {ENGINE_VERSION}")
    p.add_argument("--log-level", default=None, help="DEBUG|INFO|WARNING|ERROR (or EXPORTVIEWS_LOG_LEVEL).")
    p.add_argument("--json-logs", action="store_true", default=None, help="Emit JSON logs on stderr.")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_root(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--root", default=None, help="Export root (or EXPORT_ROOT env var). Default: .")

    sp = sub.add_parser("build", help="Wipe and rebuild files/ and the by_* views.")
    add_root(sp)
    sp.add_argument("--dry-run", action="store_true", help="Plan and report without touching the filesystem.")
    sp.add_argument(
        "--link-style",
        default=None,
        choices=LINK_STYLES,
        help="Symlink text style (or EXPORT__LINK_STYLE). Default: absolute",
    )
    sp.set_defaults(func=cmd_build)

    sp = sub.add_parser("plan", help="Print the planned copies and links.")
    add_root(sp)
    sp.add_argument("--format", default="text", choices=("text", "json"), help="Output format.")
    sp.set_defaults(func=cmd_plan)

    return p


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, json_logs=args.json_logs)
    args.func(args)


if __name__ == "__main__":
    main()
