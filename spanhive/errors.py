"""spanhive error hierarchy and exceptions."""

from __future__ import annotations


class SpanhiveError(Exception):
    """Base exception for all spanhive errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(SpanhiveError):
    """Raised when configuration is invalid or conflicting."""
    pass


class ValidationError(SpanhiveError):
    """Raised when a value handed to the tracing core is invalid."""
    pass


class InitializationError(SpanhiveError):
    """Raised when SDK initialization fails."""
    pass


class ExportError(SpanhiveError):
    """Raised when an exporter fails to hand spans to its backend."""
    pass
