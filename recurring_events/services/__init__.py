"""
Service layer for recurring events.

Provides:
- Recurrence rule encoding, decoding and expansion
- Occurrence reconciliation for edits, drags and deletions
- A serialized event store holding one collection
"""

from recurring_events.services.recurrence import (
    RecurrenceInstance,
    encode_recurrence,
    decode_recurrence,
    describe_recurrence,
    format_recurrence_id,
    build_rrule,
    expand_occurrences,
)

from recurring_events.services.reconciler import (
    toggle_day_of_week,
    validate_event,
    commit_edit,
    detach_occurrence,
    create_from_drag,
    delete_event,
)

from recurring_events.services.event_store import (
    EventStore,
    get_event_store,
    reset_event_store,
)

__all__ = [
    # Recurrence
    "RecurrenceInstance",
    "encode_recurrence",
    "decode_recurrence",
    "describe_recurrence",
    "format_recurrence_id",
    "build_rrule",
    "expand_occurrences",
    # Reconciliation
    "toggle_day_of_week",
    "validate_event",
    "commit_edit",
    "detach_occurrence",
    "create_from_drag",
    "delete_event",
    # Event store
    "EventStore",
    "get_event_store",
    "reset_event_store",
]
