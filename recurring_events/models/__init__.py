"""
Data models for recurring events.

Exports the event, boundary and recurrence description types.
"""

from recurring_events.models.events import Event, EventBoundary, format_instant
from recurring_events.models.recurrence import (
    WEEKDAY_LABELS,
    WEEKDAY_TOKENS,
    Frequency,
    RecurrenceDescription,
)

__all__ = [
    # Event models
    "Event",
    "EventBoundary",
    "format_instant",
    # Recurrence models
    "Frequency",
    "RecurrenceDescription",
    "WEEKDAY_TOKENS",
    "WEEKDAY_LABELS",
]
