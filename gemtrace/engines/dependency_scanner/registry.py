"""Analyzer registry — discover candidate files and match them to analyzers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from gemtrace.core.config import Settings
from gemtrace.engines.dependency_scanner.models import Dependency

EXCLUDES = {".git", "node_modules", ".venv"}


@dataclass(frozen=True)
class AnalysisContext:
    """Per-run state handed to every ``analyze`` call."""

    settings: Settings
    root: Path


@runtime_checkable
class FileTypeAnalyzer(Protocol):
    """Interface that every file analyzer must satisfy."""

    name: str
    detection_method: str
    settings_key: str

    def accept(self, path: Path) -> bool: ...

    def analyze(self, dependency: Dependency, context: AnalysisContext) -> None: ...


# Registration order is selection order: more specific analyzers first.
ANALYZER_REGISTRY: dict[str, FileTypeAnalyzer] = {}


def register_analyzer(analyzer: FileTypeAnalyzer) -> None:
    """Register an analyzer instance by its detection_method."""
    ANALYZER_REGISTRY[analyzer.detection_method] = analyzer


def enabled_analyzers(settings: Settings) -> list[FileTypeAnalyzer]:
    return [a for a in ANALYZER_REGISTRY.values() if settings.is_enabled(a.settings_key)]


def select_analyzer(
    path: Path, analyzers: list[FileTypeAnalyzer]
) -> FileTypeAnalyzer | None:
    """Return the first analyzer that accepts *path*, or None."""
    for analyzer in analyzers:
        if analyzer.accept(path):
            return analyzer
    return None


def discover_files(root: Path) -> Iterator[Path]:
    """Walk *root* in sorted order, yielding regular files outside vendor dirs."""
    try:
        entries = sorted(root.iterdir())
    except OSError:
        return
    for entry in entries:
        if entry.is_dir():
            if entry.name in EXCLUDES or entry.is_symlink():
                continue
            yield from discover_files(entry)
        elif entry.is_file():
            yield entry
