"""Merge dependency records that describe the same installed package.

A deployed gem is usually seen twice: once through the stub in
``specifications/`` and once through the source gemspec inside
``gems/<name>-<version>/``. Both records carry the same package path, so
they are collapsed into one, keeping the stub as the main record.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from gemtrace.engines.dependency_scanner.analyzers.ruby_bundler import SPECIFICATIONS
from gemtrace.engines.dependency_scanner.analyzers.ruby_gemspec import is_gemspec
from gemtrace.engines.dependency_scanner.models import Dependency

log = structlog.get_logger("gemtrace.engine.bundling")


def is_same_ruby_gem(a: Dependency, b: Dependency) -> bool:
    if not (is_gemspec(a.actual_file) and is_gemspec(b.actual_file)):
        return False
    if a.package_path is None or b.package_path is None:
        return False
    return a.package_path.casefold() == b.package_path.casefold()


def main_gemspec_dependency(a: Dependency, b: Dependency) -> Dependency | None:
    """Pick the record to keep: the one whose gemspec is a Bundler stub."""
    if not is_same_ruby_gem(a, b):
        return None
    if Path(a.actual_file_path).parent.name.lower() == SPECIFICATIONS:
        return a
    return b


def merge_dependencies(main: Dependency, related: Dependency) -> None:
    """Fold *related* into *main* (evidence, metadata, related records)."""
    seen = set(main.evidence)
    for evidence in related.evidence:
        if evidence not in seen:
            main.evidence.append(evidence)
            seen.add(evidence)

    main.name = main.name or related.name
    main.version = main.version or related.version
    main.license = main.license or related.license

    main.related_dependencies.append(related)
    main.related_dependencies.extend(related.related_dependencies)
    related.related_dependencies = []


def bundle_dependencies(dependencies: list[Dependency]) -> tuple[list[Dependency], int]:
    """Collapse records sharing a package path.

    Returns ``(kept, merged_count)``; *kept* preserves the input order of
    the surviving records.
    """
    kept = list(dependencies)
    merged = 0
    i = 0
    while i < len(kept):
        current = kept[i]
        j = i + 1
        while j < len(kept):
            other = kept[j]
            main = main_gemspec_dependency(current, other)
            if main is None:
                j += 1
                continue

            if main is current:
                merge_dependencies(current, other)
                del kept[j]
            else:
                merge_dependencies(other, current)
                # The survivor takes the earlier slot so order stays stable
                kept[i] = other
                del kept[j]
                current = other
            merged += 1
            log.debug(
                "bundling.merged",
                package_path=current.package_path,
                main=current.actual_file_path,
            )
        i += 1
    return kept, merged
