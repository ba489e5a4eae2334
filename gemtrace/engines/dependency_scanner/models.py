"""Data models for the dependency scanner engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

EVIDENCE_TYPES = ("vendor", "product", "version")


@dataclass(frozen=True)
class Evidence:
    """A single name/version/vendor string extracted from a manifest."""

    type: str
    source: str
    name: str
    value: str


@dataclass
class Dependency:
    """One discovered software component.

    ``package_path`` is the directory the package is installed in, when it
    could be resolved. Records with equal package paths describe the same
    installed package and are collapsed by the merge stage.
    """

    actual_file_path: str
    detection_method: str
    package_path: str | None = None
    name: str | None = None
    version: str | None = None
    license: str | None = None
    evidence: list[Evidence] = field(default_factory=list)
    related_dependencies: list[Dependency] = field(default_factory=list)

    @property
    def actual_file(self) -> Path:
        return Path(self.actual_file_path)

    @property
    def file_name(self) -> str:
        return self.actual_file.name

    def add_evidence(self, type: str, source: str, name: str, value: str) -> None:
        if type not in EVIDENCE_TYPES:
            raise ValueError(f"unknown evidence type {type!r}")
        self.evidence.append(Evidence(type=type, source=source, name=name, value=value))

    def evidence_of(self, type: str) -> list[Evidence]:
        return [e for e in self.evidence if e.type == type]


@dataclass
class AnalysisFailure:
    """A file whose analysis raised, recorded instead of aborting the scan."""

    file_path: str
    message: str


@dataclass
class ScanResult:
    """Result of a full crawl + analyze + merge run."""

    dependencies: list[Dependency]
    errors: list[AnalysisFailure] = field(default_factory=list)
    merged_count: int = 0
    skipped: bool = False
