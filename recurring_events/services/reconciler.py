"""
Occurrence reconciliation service.

Turns completed user actions from the editing and drag surfaces into the
next event collection:
- commit_edit: upsert an edited event, regenerating its recurrence rule
- detach_occurrence: exclude one occurrence from its series and add an
  override event in its place
- create_from_drag: append a new event from a drag-to-create gesture
- delete_event: remove an event (and a series' overrides)

All functions are pure: they never mutate the given collection or events
and return a new list. Callers serialize concurrent calls themselves.
"""

import logging
import random
from typing import Optional, Sequence

from recurring_events.config import get_settings
from recurring_events.exceptions import EventValidationError, UnresolvableOccurrenceError
from recurring_events.models.events import Event, EventBoundary
from recurring_events.models.recurrence import RecurrenceDescription
from recurring_events.services.recurrence import (
    canonical_boundary_value,
    encode_recurrence,
    format_recurrence_id,
    normalize_boundary_values,
)

logger = logging.getLogger(__name__)


def toggle_day_of_week(description: RecurrenceDescription, day: int) -> RecurrenceDescription:
    """
    Add or remove a weekday from a weekly recurrence.

    Args:
        description: Current recurrence
        day: Weekday index (0 = Sunday)

    Returns:
        New description with the day toggled and days sorted ascending.
        Days only exist on weekly descriptions, so any other frequency is
        returned unchanged; EventEditForm keeps the selected days across
        frequency changes.
    """
    days = set(description.days_of_week)
    if day in days:
        days.remove(day)
    else:
        days.add(day)

    return RecurrenceDescription(
        frequency=description.frequency,
        interval=description.interval,
        days_of_week=tuple(sorted(days)),
    )


def validate_event(event: Event) -> None:
    """
    Validate an edited event before committing it.

    Raises:
        EventValidationError: If the title is blank or a timed event does
            not end after it starts
    """
    if not event.title.strip():
        raise EventValidationError("Please enter a title for the event")

    if not event.is_all_day:
        start = event.start.date_time
        end = event.end.date_time
        if start is not None and end is not None and start >= end:
            raise EventValidationError("End date must be after start date")


def commit_edit(
    collection: Sequence[Event],
    edited_event: Event,
    recurrence: RecurrenceDescription,
) -> list[Event]:
    """
    Save an event from the editing surface.

    The recurrence rule is regenerated from the description, replacing any
    rule the event carried. An existing id is replaced in place; a new id is
    appended.

    Args:
        collection: Current events
        edited_event: Event built from the submitted form
        recurrence: Recurrence chosen in the form

    Returns:
        New event collection

    Raises:
        EventValidationError: If the edited event is invalid (collection untouched)
    """
    validate_event(edited_event)

    rule = encode_recurrence(recurrence)
    updates = {
        "title": edited_event.title.strip(),
        "recurrence_rule": rule,
    }
    if edited_event.description is not None:
        updates["description"] = edited_event.description.strip()
    if rule is None:
        updates["excluded_dates"] = None

    saved = edited_event.model_copy(update=updates)

    result = _upsert(collection, saved)
    logger.info(f"Committed event {saved.id} (recurrence={rule or 'none'})")
    return result


def detach_occurrence(
    collection: Sequence[Event],
    series_parent: Optional[Event],
    occurrence_boundary: EventBoundary,
    override_fields: Event,
) -> list[Event]:
    """
    Apply an edit or drag made on a single occurrence.

    For an occurrence of a series:
    1. The occurrence boundary is added once to the parent's excluded dates
    2. The parent is replaced by id in the collection
    3. A standalone override built from override_fields is appended, linked
       to the parent through originating_series_id

    An override already detached for the same occurrence is replaced rather
    than duplicated. Without a series parent the event is simply replaced by
    id, with no exclusion bookkeeping.

    Args:
        collection: Current events
        series_parent: Series the occurrence was generated from, if any
        occurrence_boundary: Start of the occurrence before the user's change
        override_fields: Event data after the user's change

    Returns:
        New event collection

    Raises:
        UnresolvableOccurrenceError: If the occurrence boundary has no
            date or dateTime, or its variant differs from the series start
    """
    if series_parent is None:
        result = _upsert(collection, override_fields)
        logger.info(f"Moved standalone event {override_fields.id}")
        return result

    if not occurrence_boundary.is_resolved:
        logger.error(
            f"Cannot detach occurrence of series {series_parent.id}: "
            f"boundary has neither date nor dateTime"
        )
        raise UnresolvableOccurrenceError(
            f"Occurrence of series {series_parent.id} has no date or dateTime"
        )

    if occurrence_boundary.kind != series_parent.start.kind:
        logger.error(
            f"Cannot detach occurrence of series {series_parent.id}: "
            f"boundary is a {occurrence_boundary.kind}, series start is a {series_parent.start.kind}"
        )
        raise UnresolvableOccurrenceError(
            f"Occurrence boundary variant does not match series {series_parent.id}"
        )

    occurrence_value = occurrence_boundary.value()

    # The collection holds the live parent; fall back to the caller's copy
    parent = _find(collection, series_parent.id) or series_parent
    excluded = list(parent.excluded_dates or [])
    if occurrence_value not in normalize_boundary_values(excluded):
        excluded.append(occurrence_value)
    updated_parent = parent.model_copy(update={"excluded_dates": excluded})

    override = override_fields.model_copy(update={
        "id": f"{parent.id}_{format_recurrence_id(occurrence_boundary)}",
        "recurrence_rule": None,
        "excluded_dates": None,
        "originating_series_id": parent.id,
        "recurrence_id": occurrence_value,
    })

    result = _upsert(collection, updated_parent)

    existing = _find_override(result, parent.id, occurrence_value) or _find(result, override.id)
    if existing is not None:
        logger.debug(f"Replacing existing override {existing.id} of series {parent.id}")
        result = [override if e is existing else e for e in result]
    else:
        result.append(override)

    logger.info(f"Detached occurrence {occurrence_value} of series {parent.id} as {override.id}")
    return result


def create_from_drag(collection: Sequence[Event], draft_event: Event) -> list[Event]:
    """
    Append an event created by a drag-to-create gesture.

    The new event gets an id based on the collection length and no
    recurrence. Title, colour and resource are filled in when the draft
    has none: "Event N", the configured colour, and DEFAULT_RESOURCE_ID.

    Args:
        collection: Current events
        draft_event: Event with the dragged start and end

    Returns:
        New event collection

    Raises:
        ValueError: If a colour has to be picked and the colour settings
            are invalid
    """
    settings = get_settings()

    ordinal = len(collection) + 1
    existing_ids = {e.id for e in collection}
    while f"{settings.event_id_prefix}{ordinal}" in existing_ids:
        ordinal += 1

    color = draft_event.color or _pick_color()

    created = draft_event.model_copy(update={
        "id": f"{settings.event_id_prefix}{ordinal}",
        "title": draft_event.title.strip() or f"Event {ordinal}",
        "color": color,
        "resource_id": draft_event.resource_id or settings.default_resource_id,
        "recurrence_rule": None,
        "excluded_dates": None,
        "originating_series_id": None,
        "recurrence_id": None,
    })

    logger.info(f"Created event {created.id} from drag")
    return [*collection, created]


def delete_event(collection: Sequence[Event], event_id: str) -> list[Event]:
    """
    Remove an event from the collection.

    Deleting a series parent also removes the overrides detached from it.

    Args:
        collection: Current events
        event_id: Event to delete

    Returns:
        New event collection (an unchanged copy if the id is unknown)
    """
    if _find(collection, event_id) is None:
        logger.warning(f"Delete requested for unknown event {event_id}")
        return list(collection)

    result = [
        e for e in collection
        if e.id != event_id and e.originating_series_id != event_id
    ]
    logger.info(f"Deleted event {event_id} ({len(collection) - len(result) - 1} overrides removed)")
    return result


def _pick_color() -> str:
    """Choose a colour for a new event according to settings."""
    settings = get_settings()
    settings.validate_color_config()

    if settings.uses_random_colors and settings.event_color_palette:
        return random.choice(settings.event_color_palette)
    return settings.default_event_color


def _find(collection: Sequence[Event], event_id: str) -> Optional[Event]:
    """Find an event by id."""
    for event in collection:
        if event.id == event_id:
            return event
    return None


def _find_override(collection: Sequence[Event], series_id: str, occurrence_value: str) -> Optional[Event]:
    """Find the override already detached for a series occurrence."""
    for event in collection:
        if (
            event.originating_series_id == series_id
            and canonical_boundary_value(event.recurrence_id) == occurrence_value
        ):
            return event
    return None


def _upsert(collection: Sequence[Event], event: Event) -> list[Event]:
    """Replace the event with the same id in place, or append it."""
    result = list(collection)
    for index, existing in enumerate(result):
        if existing.id == event.id:
            result[index] = event
            return result
    result.append(event)
    return result
