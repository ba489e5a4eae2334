"""Custom exceptions for gemtrace."""


class GemtraceError(Exception):
    """Base exception for all gemtrace errors."""


class AnalysisError(GemtraceError):
    """Raised when evidence cannot be extracted from a manifest file."""

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"failed to analyze {file_path}: {reason}")


class ConfigError(GemtraceError):
    """Raised when an environment setting has an unusable value."""
