"""Tests for the gemspec evidence extractor and analyzer."""

from __future__ import annotations

from pathlib import Path

import pytest

from gemtrace.core.config import Settings
from gemtrace.engines.dependency_scanner.analyzers.ruby_gemspec import (
    GemspecEvidenceExtractor,
    RubyGemspecAnalyzer,
    is_gemspec,
)
from gemtrace.engines.dependency_scanner.models import Dependency, Evidence
from gemtrace.engines.dependency_scanner.registry import AnalysisContext
from gemtrace.exceptions import AnalysisError

SOURCE_GEMSPEC = """\
# frozen_string_literal: true

require_relative "lib/widget/version"

Gem::Specification.new do |spec|
  spec.name          = "widget"
  spec.version       = Widget::VERSION
  spec.authors       = [
    "Alice Example",
    "Bob Example",
  ]
  spec.email         = ['alice@example.com']
  spec.summary       = 'Makes widgets'
  spec.homepage      = "https://github.com/example/widget"
  spec.license       = "Apache-2.0"

  spec.files = Dir["lib/**/*.rb"]
  spec.add_dependency "rack", ">= 2.0"
end
"""


def _extract(path: Path) -> Dependency:
    dep = Dependency(actual_file_path=str(path), detection_method="ruby-gemspec")
    GemspecEvidenceExtractor().extract(dep)
    return dep


def _values(dep: Dependency, type: str) -> dict[str, str]:
    return {e.name: e.value for e in dep.evidence_of(type)}


# ── file-type predicate ──────────────────────────────────────────────────


class TestIsGemspec:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("rack.gemspec", True),
            ("rack-2.2.8.gemspec", True),
            ("rack.GEMSPEC", False),
            ("rack.gemspec.orig", False),
            ("Gemfile", False),
            (".gemspec", False),
        ],
    )
    def test_predicate(self, name, expected):
        assert is_gemspec(Path("/tmp") / name) is expected


# ── GemspecEvidenceExtractor ─────────────────────────────────────────────


class TestGemspecEvidenceExtractor:
    def test_bundler_stub(self, tmp_path, stub_gemspec):
        f = tmp_path / "rack-2.2.8.gemspec"
        f.write_text(stub_gemspec("rack", "2.2.8"))
        dep = _extract(f)

        assert dep.name == "rack"
        assert dep.version == "2.2.8"
        assert dep.license == "MIT"
        assert _values(dep, "product") == {"name": "rack", "summary": "The rack library"}
        assert _values(dep, "version") == {"version": "2.2.8"}
        vendor = _values(dep, "vendor")
        assert vendor["name_project"] == "rack_project"
        assert vendor["author"] == "Jane Doe John Roe"
        assert vendor["email"] == "maintainers@example.org"
        assert vendor["homepage"] == "https://example.org/rack"
        assert vendor["license"] == "MIT"
        assert all(e.source == "gemspec" for e in dep.evidence)

    def test_source_gemspec_skips_expressions(self, tmp_path):
        f = tmp_path / "widget.gemspec"
        f.write_text(SOURCE_GEMSPEC)
        dep = _extract(f)

        assert dep.name == "widget"
        assert dep.version is None
        assert dep.evidence_of("version") == []
        vendor = _values(dep, "vendor")
        assert vendor["author"] == "Alice Example Bob Example"
        assert vendor["email"] == "alice@example.com"
        assert vendor["license"] == "Apache-2.0"
        assert _values(dep, "product")["summary"] == "Makes widgets"

    def test_version_file_fallback(self, tmp_path):
        f = tmp_path / "widget.gemspec"
        f.write_text(SOURCE_GEMSPEC)
        (tmp_path / "VERSION").write_text("\n3.1.4\n")
        dep = _extract(f)

        assert dep.version == "3.1.4"
        assert Evidence("version", "VERSION", "version", "3.1.4") in dep.evidence

    def test_gemspec_version_wins_over_version_file(self, tmp_path, stub_gemspec):
        f = tmp_path / "rack-2.2.8.gemspec"
        f.write_text(stub_gemspec("rack", "2.2.8"))
        (tmp_path / "VERSION").write_text("9.9.9\n")
        dep = _extract(f)
        assert dep.version == "2.2.8"

    def test_no_specification_block(self, tmp_path):
        f = tmp_path / "broken.gemspec"
        f.write_text("puts 'hello'\n")
        with pytest.raises(AnalysisError, match="no Gem::Specification block"):
            _extract(f)

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(AnalysisError, match="cannot read gemspec"):
            _extract(tmp_path / "missing.gemspec")

    def test_assignments_before_block_ignored(self, tmp_path):
        f = tmp_path / "odd.gemspec"
        f.write_text(
            's.name = "outside"\n'
            "Gem::Specification.new do |s|\n"
            '  s.name = "inside"\n'
            "end\n"
        )
        dep = _extract(f)
        assert dep.name == "inside"

    def test_does_not_touch_package_path(self, tmp_path, stub_gemspec):
        f = tmp_path / "rack-2.2.8.gemspec"
        f.write_text(stub_gemspec("rack", "2.2.8"))
        assert _extract(f).package_path is None


# ── RubyGemspecAnalyzer ──────────────────────────────────────────────────


class TestRubyGemspecAnalyzer:
    def test_package_path_is_parent_dir(self, tmp_path):
        gem_dir = tmp_path / "widget-1.0"
        gem_dir.mkdir()
        f = gem_dir / "widget.gemspec"
        f.write_text(SOURCE_GEMSPEC)
        dep = Dependency(actual_file_path=str(f), detection_method="ruby-gemspec")

        analyzer = RubyGemspecAnalyzer()
        assert analyzer.accept(f) is True
        analyzer.analyze(dep, AnalysisContext(settings=Settings(), root=tmp_path))
        assert dep.package_path == str(gem_dir.absolute())

    def test_failure_leaves_package_path_unset(self, tmp_path):
        f = tmp_path / "broken.gemspec"
        f.write_text("")
        dep = Dependency(actual_file_path=str(f), detection_method="ruby-gemspec")
        with pytest.raises(AnalysisError):
            RubyGemspecAnalyzer().analyze(dep, AnalysisContext(settings=Settings(), root=tmp_path))
        assert dep.package_path is None
