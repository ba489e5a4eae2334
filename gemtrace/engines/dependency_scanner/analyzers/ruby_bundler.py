"""Analyzer for the gemspec stubs written by ``bundle install --deployment``.

Bundler lays a deployment out as::

    <root>/specifications/rack-2.2.8.gemspec   fully resolved stub
    <root>/gems/rack-2.2.8/                    the installed gem

Only stubs under ``specifications/`` are accepted: unlike the gemspec in a
gem's source tree they never contain unresolved Ruby expressions, so they
give better evidence. After extracting evidence the analyzer resolves the
sibling ``gems/<stub name>`` entry and records it as the package path,
which lets the merge stage collapse the stub with the source gemspec
found inside the installed gem.

Shares the ``GEMTRACE_ANALYZER_RUBY_GEMSPEC_ENABLED`` toggle with the
gemspec analyzer.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from gemtrace.core.config import RUBY_GEMSPEC_ENABLED
from gemtrace.engines.dependency_scanner.analyzers.ruby_gemspec import (
    GEMSPEC_SUFFIX,
    GemspecEvidenceExtractor,
    is_gemspec,
)
from gemtrace.engines.dependency_scanner.models import Dependency
from gemtrace.engines.dependency_scanner.registry import AnalysisContext

log = structlog.get_logger("gemtrace.engine.ruby_bundler")

# Folder holding the .gemspec stubs created by "bundle install"
SPECIFICATIONS = "specifications"

# Folder holding the gems installed by "bundle install"
GEMS = "gems"


def _is_specifications_dir(directory: Path) -> bool:
    try:
        return directory.name == SPECIFICATIONS and directory.is_dir()
    except OSError:
        return False


def gem_name_for(gemspec: Path) -> str:
    """``rack-2.2.8.gemspec`` → ``rack-2.2.8``."""
    return gemspec.name[: -len(GEMSPEC_SUFFIX)]


def locate_gem_path(gemspec: Path) -> Path | None:
    """Find the installed gem entry for a stub in ``specifications/``.

    Returns the absolute path of the entry in the sibling ``gems/``
    directory whose name equals the stub name without its suffix, or None
    when the layout does not match. Names are compared exactly, so
    ``Rack-2.2.8`` never matches ``rack-2.2.8``.

    If a case-insensitive file system lists more than one match, the first
    entry in listing order wins. That order is platform-defined.
    """
    specifications_dir = gemspec.parent
    if not _is_specifications_dir(specifications_dir):
        return None

    gems_dir = specifications_dir.parent / GEMS
    gem_name = gem_name_for(gemspec)
    try:
        if not gems_dir.is_dir():
            return None
        matches = [entry for entry in gems_dir.iterdir() if entry.name == gem_name]
    except OSError:
        log.debug("bundler.gems_dir_unreadable", gems_dir=str(gems_dir), exc_info=True)
        return None

    if not matches:
        return None
    if len(matches) > 1:
        log.warning(
            "bundler.ambiguous_gem_path",
            gem_name=gem_name,
            candidates=[str(m) for m in matches],
        )
    return matches[0].absolute()


class RubyBundlerAnalyzer:
    """Accepts Bundler stubs and resolves where the gem was installed."""

    name = "Ruby Bundler Analyzer"
    detection_method = "ruby-bundler"
    settings_key = RUBY_GEMSPEC_ENABLED

    def __init__(self, extractor: GemspecEvidenceExtractor | None = None) -> None:
        self._extractor = extractor or GemspecEvidenceExtractor()

    def accept(self, path: Path) -> bool:
        """Only accept *.gemspec files sitting in a ``specifications`` folder."""
        if not is_gemspec(path):
            return False
        return _is_specifications_dir(path.parent)

    def resolve_package_path(self, dependency: Dependency) -> None:
        """Attach the installed gem directory to *dependency*, if found."""
        gem_path = locate_gem_path(dependency.actual_file)
        if gem_path is None:
            log.debug("bundler.gem_path_unresolved", file=dependency.actual_file_path)
            return
        dependency.package_path = str(gem_path)
        log.debug(
            "bundler.gem_path_resolved",
            file=dependency.actual_file_path,
            package_path=dependency.package_path,
        )

    def analyze(self, dependency: Dependency, context: AnalysisContext) -> None:
        # Extraction errors propagate; a record without evidence is not resolved.
        self._extractor.extract(dependency, context)
        self.resolve_package_path(dependency)
