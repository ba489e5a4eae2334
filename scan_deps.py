#!/usr/bin/env python3
"""Standalone gem scanner.

Usage:
    python scan_deps.py /path/to/app            # scan a deployed app or vendor/bundle
    python scan_deps.py .                       # scan current directory
    python scan_deps.py /path/to/app --json

Exit status: 0 on success, 1 if any manifest failed to analyze, 2 if the
target is not a directory.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from gemtrace.core.config import Settings
from gemtrace.core.logging import setup_logging
from gemtrace.engines.dependency_scanner.models import Dependency, ScanResult
from gemtrace.engines.dependency_scanner.scanner import scan
from gemtrace.exceptions import ConfigError


def _dep_row(d: Dependency) -> dict:
    return {
        "name": d.name,
        "version": d.version,
        "license": d.license,
        "file": d.actual_file_path,
        "package_path": d.package_path,
        "detection_method": d.detection_method,
        "related_files": [r.actual_file_path for r in d.related_dependencies],
        "evidence": [
            {"type": e.type, "source": e.source, "name": e.name, "value": e.value}
            for e in d.evidence
        ],
    }


def _print_result(result: ScanResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps([_dep_row(d) for d in result.dependencies], indent=2))
    elif not result.dependencies:
        print("No dependencies found.")
    else:
        print(
            f"Found {len(result.dependencies)} dependencies "
            f"({result.merged_count} duplicate manifest(s) merged)\n"
        )
        for d in sorted(result.dependencies, key=lambda d: (d.name or "", d.version or "")):
            label = f"{d.name or '?'} {d.version or ''}".rstrip()
            print(f"  {label}  ({d.detection_method})")
            print(f"    file: {d.actual_file_path}")
            if d.package_path:
                print(f"    installed: {d.package_path}")
            for related in d.related_dependencies:
                print(f"    also: {related.actual_file_path}")
        print()

    for failure in result.errors:
        print(f"Error: {failure.message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Scan a directory for installed Ruby gems")
    parser.add_argument("target", help="Directory to scan")
    parser.add_argument("--json", action="store_true", dest="as_json", help="Output as JSON")
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    setup_logging(settings)

    root = Path(args.target).resolve()
    if not root.is_dir():
        print(f"Error: {root} is not a directory", file=sys.stderr)
        return 2

    result = scan(root, settings)
    if result.skipped:
        print("Gemspec analysis is disabled; nothing scanned.", file=sys.stderr)
        return 0
    _print_result(result, args.as_json)
    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
