"""Crawl a directory tree, analyze every accepted file, merge duplicates."""

from __future__ import annotations

from pathlib import Path

import structlog

# Ensure analyzers are registered before any scan runs.
import gemtrace.engines.dependency_scanner.analyzers  # noqa: F401
from gemtrace.core.config import Settings
from gemtrace.engines.dependency_scanner.bundling import bundle_dependencies
from gemtrace.engines.dependency_scanner.models import (
    AnalysisFailure,
    Dependency,
    ScanResult,
)
from gemtrace.engines.dependency_scanner.registry import (
    AnalysisContext,
    discover_files,
    enabled_analyzers,
    select_analyzer,
)
from gemtrace.exceptions import AnalysisError

log = structlog.get_logger("gemtrace.engine")


def scan(root: Path, settings: Settings | None = None) -> ScanResult:
    """Scan *root* for manifests and return the merged dependency records.

    Each accepted file is handed to the first enabled analyzer that
    accepts it. An ``AnalysisError`` fails only that file; it is recorded
    on the result and the scan continues.
    """
    settings = settings or Settings.from_env()
    root = root.resolve()

    analyzers = enabled_analyzers(settings)
    if not analyzers:
        log.info("scanner.skipped", root=str(root), reason="all analyzers disabled")
        return ScanResult(dependencies=[], skipped=True)

    context = AnalysisContext(settings=settings, root=root)
    dependencies: list[Dependency] = []
    errors: list[AnalysisFailure] = []

    for path in discover_files(root):
        analyzer = select_analyzer(path, analyzers)
        if analyzer is None:
            continue

        dependency = Dependency(
            actual_file_path=str(path),
            detection_method=analyzer.detection_method,
        )
        try:
            analyzer.analyze(dependency, context)
        except AnalysisError as exc:
            log.warning(
                "scanner.analysis_failed",
                file=str(path),
                analyzer=analyzer.name,
                error=exc.reason,
            )
            errors.append(AnalysisFailure(file_path=str(path), message=str(exc)))
            continue
        dependencies.append(dependency)

    kept, merged_count = bundle_dependencies(dependencies)
    log.info(
        "scanner.done",
        root=str(root),
        dependencies=len(kept),
        merged=merged_count,
        failed=len(errors),
    )
    return ScanResult(dependencies=kept, errors=errors, merged_count=merged_count)
