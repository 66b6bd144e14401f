"""Exceptions raised by contrib-inspector."""

from typing import Optional


class ContribInspectorError(Exception):
    """Base exception for all contrib-inspector errors."""

    def __init__(self, message: str, details: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class RepositoryError(ContribInspectorError):
    """The repository cannot be opened or its HEAD/identity resolved."""


class AttributionError(ContribInspectorError):
    """A single path or commit could not be attributed."""


class ConfigError(ContribInspectorError):
    """Invalid or conflicting options."""
