"""
Custom exceptions for reconciliation operations.

Separates user-facing validation failures from caller contract violations.
"""


class ReconciliationError(Exception):
    """Base exception for reconciler operations."""

    user_facing: bool = False

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class EventValidationError(ReconciliationError):
    """
    Edited event failed form validation.

    Causes:
    - Title empty after trimming
    - End not after start for a timed event

    Shown to the user; the collection is left untouched.
    """

    user_facing = True


class UnresolvableOccurrenceError(ReconciliationError):
    """
    Occurrence anchor could not be resolved.

    Causes:
    - Boundary carries neither a date nor a dateTime
    - Boundary variant differs from the series start

    Indicates an upstream contract violation, not a user mistake.
    """

    user_facing = False
