"""Runtime settings read from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from gemtrace.exceptions import ConfigError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Shared by the gemspec and Bundler analyzers
RUBY_GEMSPEC_ENABLED = "GEMTRACE_ANALYZER_RUBY_GEMSPEC_ENABLED"


def _env_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{key} must be a boolean (true/false), got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Analyzer toggles and logging options."""

    ruby_gemspec_enabled: bool = True
    log_level: str = "INFO"
    log_format: str = "console"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from *env* (defaults to ``os.environ``).

        Reads:
            GEMTRACE_ANALYZER_RUBY_GEMSPEC_ENABLED — gemspec + bundler analyzers (default: true)
            GEMTRACE_LOG_LEVEL  — log level (default: INFO)
            GEMTRACE_LOG_FORMAT — console | json (default: console)
        """
        env = os.environ if env is None else env
        log_format = env.get("GEMTRACE_LOG_FORMAT", "console").lower()
        if log_format not in ("console", "json"):
            raise ConfigError(f"GEMTRACE_LOG_FORMAT must be console or json, got {log_format!r}")
        log_level = env.get("GEMTRACE_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigError(
                f"GEMTRACE_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}"
            )
        return cls(
            ruby_gemspec_enabled=_env_bool(env, RUBY_GEMSPEC_ENABLED, True),
            log_level=log_level,
            log_format=log_format,
        )

    def is_enabled(self, settings_key: str) -> bool:
        """Return whether the analyzer toggle named *settings_key* is on.

        Unknown keys are treated as enabled.
        """
        if settings_key == RUBY_GEMSPEC_ENABLED:
            return self.ruby_gemspec_enabled
        return True
