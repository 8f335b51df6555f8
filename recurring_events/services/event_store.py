"""
Event store - serialized access to one event collection.

Holds the current snapshot of a collection and applies reconciler
operations one at a time, swapping the snapshot only after an operation
succeeds. Loading and dumping use the camelCase wire format that the
calendar rendering layer consumes.
"""

import logging
import threading
from typing import Iterable, Optional, TYPE_CHECKING

from pydantic import ValidationError

from recurring_events.config import get_settings
from recurring_events.models.events import Event, EventBoundary
from recurring_events.models.recurrence import RecurrenceDescription
from recurring_events.services import reconciler

# Avoid circular imports for type hints
if TYPE_CHECKING:
    from recurring_events.forms import EventEditForm

logger = logging.getLogger(__name__)

# Singleton instance
_event_store: Optional["EventStore"] = None


class EventStore:
    """
    Serialized holder of an event collection.

    Each mutating method runs one reconciler operation under a lock and
    returns the new snapshot. Failed operations leave the snapshot as it was.
    """

    def __init__(self, events: Optional[Iterable[Event]] = None):
        """Initialize the store with an optional starting collection."""
        self._events: list[Event] = list(events or [])
        self._lock = threading.Lock()

    @property
    def events(self) -> list[Event]:
        """Copy of the current snapshot."""
        with self._lock:
            return list(self._events)

    def get(self, event_id: str) -> Optional[Event]:
        """
        Get a single event by ID.

        Args:
            event_id: Event ID

        Returns:
            Event or None if not found
        """
        with self._lock:
            for event in self._events:
                if event.id == event_id:
                    return event
        return None

    def load(self, items: Iterable[dict]) -> list[Event]:
        """
        Replace the collection with events in wire format.

        Args:
            items: Event dicts (camelCase keys)

        Returns:
            The loaded events

        Raises:
            ValueError: If an item is not a valid event (nothing is replaced)
        """
        try:
            events = [Event.model_validate(item) for item in items]
        except ValidationError as e:
            logger.error(f"Failed to load events: {e}")
            raise ValueError(f"Invalid event data: {e}") from e

        with self._lock:
            self._events = events

        logger.info(f"Loaded {len(events)} events")
        return list(events)

    def dump(self) -> list[dict]:
        """Current collection in wire format."""
        return [event.to_wire() for event in self.events]

    def commit_edit(self, edited_event: Event, recurrence: RecurrenceDescription) -> list[Event]:
        """Save an edited event. See reconciler.commit_edit."""
        return self._apply(reconciler.commit_edit, edited_event, recurrence)

    def save_form(self, form: "EventEditForm") -> list[Event]:
        """
        Save a submitted editing form.

        Wall-clock times in the form are resolved in the configured timezone.

        Args:
            form: Submitted form

        Returns:
            New snapshot
        """
        edited = form.to_event(get_settings().timezone)
        return self.commit_edit(edited, form.recurrence)

    def detach_occurrence(
        self,
        series_parent: Optional[Event],
        occurrence_boundary: EventBoundary,
        override_fields: Event,
    ) -> list[Event]:
        """Apply a change to one occurrence. See reconciler.detach_occurrence."""
        return self._apply(
            reconciler.detach_occurrence,
            series_parent,
            occurrence_boundary,
            override_fields,
        )

    def create_from_drag(self, draft_event: Event) -> list[Event]:
        """Add an event from drag-to-create. See reconciler.create_from_drag."""
        return self._apply(reconciler.create_from_drag, draft_event)

    def delete_event(self, event_id: str) -> list[Event]:
        """Delete an event. See reconciler.delete_event."""
        return self._apply(reconciler.delete_event, event_id)

    def _apply(self, operation, *args) -> list[Event]:
        """Run a reconciler operation against the snapshot and swap it in."""
        with self._lock:
            updated = operation(self._events, *args)
            self._events = updated
            return list(updated)


def get_event_store() -> EventStore:
    """
    Get the event store singleton.

    Returns:
        Shared EventStore instance
    """
    global _event_store

    if _event_store is None:
        _event_store = EventStore()
        logger.info("Event store initialized")

    return _event_store


def reset_event_store():
    """Reset the event store singleton (useful for testing)."""
    global _event_store
    _event_store = None
