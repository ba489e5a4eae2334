"""File analyzers — registered on import, most specific first."""

from gemtrace.engines.dependency_scanner.analyzers.ruby_bundler import RubyBundlerAnalyzer
from gemtrace.engines.dependency_scanner.analyzers.ruby_gemspec import RubyGemspecAnalyzer
from gemtrace.engines.dependency_scanner.registry import register_analyzer

register_analyzer(RubyBundlerAnalyzer())
register_analyzer(RubyGemspecAnalyzer())

__all__ = ["RubyBundlerAnalyzer", "RubyGemspecAnalyzer"]
