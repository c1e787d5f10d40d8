"""Error taxonomy for the flyer-to-meal-plan pipeline."""

from __future__ import annotations

_LOG_TEXT_LIMIT = 200


class SavyrError(Exception):
    """Base class for pipeline errors."""


class TransportError(SavyrError):
    """Network or HTTP failure talking to a completion service."""


class BackendNotConfigured(TransportError):
    """The completion service cannot be reached because no API key is set."""


class ParseFailure(SavyrError):
    """Response Repair could not produce a JSON object."""

    def __init__(self, detail: str, text: str = "") -> None:
        self.detail = detail
        self.text = text[:_LOG_TEXT_LIMIT]
        super().__init__(f"{detail} (text: {self.text!r})")


class SchemaViolation(SavyrError):
    """Valid JSON that is missing required keys or has the wrong types."""


class ValidationFailure(SavyrError):
    """A well-formed candidate menu that breaks the menu rules."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(self.violations))


class InvalidPreferences(SavyrError, ValueError):
    """Caller-supplied preferences are unusable."""
