"""Analyzer for Ruby .gemspec files.

Reads the ``Gem::Specification.new do |spec| ... end`` block and turns the
plain string assignments into evidence::

    spec.name     = "rack"            → product name, vendor name_project
    spec.version  = "2.2.8"           → version
    spec.authors  = ["A", "B"]        → vendor author ("A B")
    spec.homepage = 'https://...'     → vendor homepage

Assignments whose value is a Ruby expression (``Rack::VERSION``,
``File.read(...)``) cannot be resolved statically and are skipped. A
source gemspec often has such values; the stubs Bundler writes into
``specifications/`` are always fully resolved.
"""

from __future__ import annotations

import re
from pathlib import Path

import structlog

from gemtrace.core.config import RUBY_GEMSPEC_ENABLED
from gemtrace.engines.dependency_scanner.models import Dependency
from gemtrace.engines.dependency_scanner.registry import AnalysisContext
from gemtrace.exceptions import AnalysisError

log = structlog.get_logger("gemtrace.engine.ruby_gemspec")

GEMSPEC_SUFFIX = ".gemspec"
VERSION_FILE_NAME = "VERSION"
SOURCE = "gemspec"

_BLOCK_INIT_RE = re.compile(r"Gem::Specification\.new\s+?do\s+?\|(.+?)\|")

_QUOTED_RE = re.compile(r"""(["'])(.*?)\1""")


def is_gemspec(path: Path) -> bool:
    """File-type predicate: ``*.gemspec``, case-sensitive."""
    name = path.name
    return name.endswith(GEMSPEC_SUFFIX) and len(name) > len(GEMSPEC_SUFFIX)


def _literal_value(rest: str) -> str | None:
    """Unquote the value starting at *rest*; None if it is not a literal.

    Array literals may span several lines and are joined with spaces.
    """
    if rest.startswith("["):
        end = rest.find("]")
        body = rest[1:end] if end != -1 else rest[1:]
        members = [m.group(2) for m in _QUOTED_RE.finditer(body)]
        return " ".join(m for m in members if m) or None

    m = _QUOTED_RE.match(rest.split("\n", 1)[0])
    if m is None:
        return None
    return m.group(2) or None


def _field_value(contents: str, block_var: str, field: str) -> str | None:
    """Return the literal assigned to ``<block_var>.<field>``, if any.

    *field* is a regex fragment so ``authors?`` covers both spellings.
    """
    pattern = re.compile(
        rf"^[ \t]*{re.escape(block_var)}\.(?:{field})[ \t]*=[ \t]*",
        re.MULTILINE | re.IGNORECASE,
    )
    for m in pattern.finditer(contents):
        value = _literal_value(contents[m.end():])
        if value:
            return value
    return None


def _read_version_file(gemspec: Path) -> str | None:
    version_file = gemspec.parent / VERSION_FILE_NAME
    try:
        lines = version_file.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return None
    for line in lines:
        if line.strip():
            return line.strip()
    return None


class GemspecEvidenceExtractor:
    """Populate vendor/product/version evidence from a gemspec's contents."""

    def extract(self, dependency: Dependency, context: AnalysisContext | None = None) -> None:
        path = dependency.actual_file
        try:
            contents = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise AnalysisError(str(path), f"cannot read gemspec: {exc}") from exc

        m = _BLOCK_INIT_RE.search(contents)
        if m is None:
            raise AnalysisError(str(path), "no Gem::Specification block found")
        block_var = m.group(1).strip()
        contents = contents[m.end():]

        name = _field_value(contents, block_var, "name")
        if name:
            dependency.add_evidence("product", SOURCE, "name", name)
            dependency.add_evidence("vendor", SOURCE, "name_project", f"{name}_project")
            dependency.name = name

        summary = _field_value(contents, block_var, "summary")
        if summary:
            dependency.add_evidence("product", SOURCE, "summary", summary)

        for key, field in (
            ("author", "authors?"),
            ("email", "emails?"),
            ("homepage", "homepage"),
        ):
            value = _field_value(contents, block_var, field)
            if value:
                dependency.add_evidence("vendor", SOURCE, key, value)

        license_ = _field_value(contents, block_var, "licen[cs]es?")
        if license_:
            dependency.add_evidence("vendor", SOURCE, "license", license_)
            dependency.license = license_

        version = _field_value(contents, block_var, "version")
        if version:
            dependency.add_evidence("version", SOURCE, "version", version)
        else:
            version = _read_version_file(path)
            if version:
                dependency.add_evidence("version", VERSION_FILE_NAME, "version", version)
        if version:
            dependency.version = version

        log.debug(
            "gemspec.evidence_extracted",
            file=str(path),
            name=name,
            version=version,
            evidence_count=len(dependency.evidence),
        )


class RubyGemspecAnalyzer:
    """Stand-alone analyzer for any gemspec, source or generated.

    A source gemspec sits at the root of its gem, so its parent directory
    is recorded as the package path.
    """

    name = "Ruby Gemspec Analyzer"
    detection_method = "ruby-gemspec"
    settings_key = RUBY_GEMSPEC_ENABLED

    def __init__(self, extractor: GemspecEvidenceExtractor | None = None) -> None:
        self._extractor = extractor or GemspecEvidenceExtractor()

    def accept(self, path: Path) -> bool:
        return is_gemspec(path)

    def analyze(self, dependency: Dependency, context: AnalysisContext) -> None:
        self._extractor.extract(dependency, context)
        dependency.package_path = str(dependency.actual_file.parent.absolute())
