from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConfigurationError(DomainError):
    """Raised when schedule configuration is missing or incomplete.

    Always surfaced to an administrator; the engine never substitutes a default.
    """


class NoScheduleAssignedError(ConfigurationError):
    """Raised when no resolution tier yields a schedule for an employee."""


class InvalidSequenceError(DomainError):
    """Raised when an event is not a legal next step for the employee-day."""


class OutsideWindowError(DomainError):
    """Raised when a check-in/check-out falls outside every candidate window."""

    def __init__(self, message: str, *, event_type=None, candidates: Sequence = ()):
        super().__init__(message)
        self.event_type = event_type
        self.candidates = tuple(candidates)


class DuplicateEventError(DomainError):
    """Raised by the record store when the day already holds this event type.

    Benign race: callers should re-read today's state instead of retrying.
    """


class AttendanceDisabledError(DomainError):
    """Raised when attendance is not yet enabled at the requested moment."""


class JustificationError(ValidationError):
    """Raised when a justification cannot be attached or reviewed."""
