"""CLI entry point for ``aspectindex targets`` and ``aspectindex scan``."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from aspectindex import __version__
from aspectindex.aspect.batch import (
    DecodeReport,
    find_aspect_files,
    load_aspect_files,
)
from aspectindex.config import Settings
from aspectindex.index.model import CodeLocationIdentifier
from aspectindex.index.scanner import scan_jar
from aspectindex.logging_config import setup_logging
from aspectindex.resilience.errors import ArchiveScanError


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"aspectindex {__version__}")
        return 0

    settings = Settings()
    setup_logging(
        settings.log_level,
        debug=settings.debug_mode or getattr(args, "verbose", False),
    )

    if args.command == "targets":
        return _run_targets(args, settings)
    if args.command == "scan":
        return _run_scan(args, settings)
    parser.print_help()
    return 0


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="aspectindex",
        description=(
            "Decode Bazel aspect output and index the classes "
            "inside built jars."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    targets = sub.add_parser(
        "targets",
        help="Decode aspect output files",
    )
    targets.add_argument(
        "paths",
        nargs="+",
        help="Aspect files, or directories searched for them",
    )
    targets.add_argument(
        "--kind",
        "-k",
        action="append",
        default=None,
        help="Only show targets of this rule kind (repeatable)",
    )
    targets.add_argument(
        "--json",
        action="store_true",
        help="Emit decoded targets as JSON instead of text",
    )
    targets.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    scan = sub.add_parser(
        "scan",
        help="List the classes contained in a jar",
    )
    scan.add_argument("jar", type=str, help="Path to the jar")
    scan.add_argument(
        "--id",
        dest="location_id",
        default=None,
        help="Code location id (default: the jar path)",
    )
    scan.add_argument(
        "--label",
        default=None,
        help="Bazel label that produced the jar",
    )
    scan.add_argument(
        "--inner",
        action="store_true",
        help="Include inner classes",
    )
    scan.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    return parser


def _run_targets(args: argparse.Namespace, settings: Settings) -> int:
    """Execute the targets command."""
    files: list[Path] = []
    for raw in args.paths:
        path = Path(raw)
        if not path.exists():
            print(f"Error: {path} does not exist", file=sys.stderr)
            return 1
        files.extend(find_aspect_files(path, settings.aspect_file_suffix))

    report = load_aspect_files(files, jvm_kinds=settings.jvm_kind_set)
    _print_report(report, args.kind, as_json=args.json)
    return 0 if report.ok else 1


def _print_report(
    report: DecodeReport,
    kinds: list[str] | None,
    *,
    as_json: bool,
) -> None:
    selected = (
        report.targets.lookup_by_kind(*kinds)
        if kinds
        else list(report.targets)
    )
    if as_json:
        payload = {
            "targets": [t.model_dump(mode="json") for t in selected],
            "failures": [
                {
                    "source": f.source,
                    "label": f.label,
                    "error": f.error,
                    "error_class": f.error_class.value,
                }
                for f in report.failures
            ],
        }
        print(json.dumps(payload, indent=2))
    else:
        for target in selected:
            print(target.render())

    for failure in report.failures:
        print(
            f"Error: {failure.source}: {failure.error}",
            file=sys.stderr,
        )


def _run_scan(args: argparse.Namespace, settings: Settings) -> int:
    """Execute the scan command."""
    jar = Path(args.jar)
    location_id = CodeLocationIdentifier(args.location_id or args.jar)
    try:
        entry = scan_jar(
            jar,
            location_id,
            args.label,
            include_inner_classes=(
                args.inner or settings.include_inner_classes
            ),
        )
    except ArchiveScanError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for class_id in entry.contained_classes or ():
        print(class_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
