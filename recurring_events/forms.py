"""
Editing form state for a single event.

Mirrors what the event editing surface holds while a user composes an
event: separate date and time components picked one at a time, an all-day
flag, and the recurrence being composed. The form turns itself into an
Event for recurring_events.services.reconciler.commit_edit.
"""

import uuid
from datetime import date as CalendarDate, datetime, time, timezone
from typing import Literal, Optional, Union

from dateutil.tz import gettz
from pydantic import BaseModel, ConfigDict, Field

from recurring_events.models.events import Event, EventBoundary
from recurring_events.models.recurrence import Frequency, RecurrenceDescription
from recurring_events.services.reconciler import toggle_day_of_week
from recurring_events.services.recurrence import decode_recurrence


PickerTarget = Literal["start_date", "start_time", "end_date", "end_time"]


class EventEditForm(BaseModel):
    """
    Editing surface state.

    Each change returns a new form; a picker cancellation (None) returns
    the form unchanged.
    """

    model_config = ConfigDict(frozen=True)

    event: Optional[Event] = Field(None, description="Event being edited, None for a new event")
    title: str = Field("", description="Title as typed")
    description: str = Field("", description="Description as typed")
    all_day: bool = Field(False, description="All-day toggle")
    start_date: CalendarDate
    start_time: time = time(0, 0)
    end_date: CalendarDate
    end_time: time = time(0, 0)
    recurrence: RecurrenceDescription = Field(default_factory=RecurrenceDescription)
    selected_days: tuple[int, ...] = Field((), description="Weekdays picked, kept across frequency changes")

    @classmethod
    def from_event(cls, event: Event, tz: str) -> "EventEditForm":
        """
        Pre-fill a form from an existing event.

        Args:
            event: Event to edit
            tz: IANA zone the wall-clock components are shown in

        Returns:
            Populated form

        Raises:
            ValueError: If the event start or end is unresolved, or tz is unknown
        """
        zone = _get_zone(tz)
        start_date, start_time = _split_boundary(event.start, zone)
        end_date, end_time = _split_boundary(event.end, zone)

        recurrence = decode_recurrence(event.recurrence_rule)

        return cls(
            event=event,
            title=event.title,
            description=event.description or "",
            all_day=event.is_all_day,
            start_date=start_date,
            start_time=start_time,
            end_date=end_date,
            end_time=end_time,
            recurrence=recurrence,
            selected_days=recurrence.days_of_week,
        )

    def with_picked(
        self,
        target: PickerTarget,
        value: Optional[Union[CalendarDate, time, datetime]],
    ) -> "EventEditForm":
        """
        Apply a value confirmed in the date/time picker.

        Args:
            target: Which component the picker was opened for
            value: Confirmed value, or None when the picker was cancelled

        Returns:
            Updated form
        """
        if value is None:
            return self

        if target in ("start_date", "end_date"):
            picked = value.date() if isinstance(value, datetime) else value
            updates = {target: picked}
            # All-day events keep a single-day span when the start moves
            if target == "start_date" and self.all_day:
                updates["end_date"] = picked
            return self.model_copy(update=updates)

        if target in ("start_time", "end_time"):
            picked = value.time() if isinstance(value, datetime) else value
            return self.model_copy(update={target: time(picked.hour, picked.minute)})

        raise ValueError(f"Unknown picker target: {target}")

    def with_all_day(self, all_day: bool) -> "EventEditForm":
        """Toggle the all-day flag."""
        return self.model_copy(update={"all_day": all_day})

    def with_frequency(self, frequency: Frequency) -> "EventEditForm":
        """Choose how the event repeats; weekly restores the selected days."""
        recurrence = RecurrenceDescription(
            frequency=frequency,
            interval=self.recurrence.interval,
            days_of_week=self.selected_days,
        )
        return self.model_copy(update={"recurrence": recurrence})

    def with_interval(self, interval: int) -> "EventEditForm":
        """Set the repeat interval; values below 1 are ignored."""
        if interval < 1:
            return self
        recurrence = RecurrenceDescription(
            frequency=self.recurrence.frequency,
            interval=interval,
            days_of_week=self.selected_days,
        )
        return self.model_copy(update={"recurrence": recurrence})

    def with_day_toggled(self, day: int) -> "EventEditForm":
        """Toggle a weekday; it only applies to the rule while the form is weekly."""
        selected = RecurrenceDescription(Frequency.WEEKLY, 1, self.selected_days)
        days = toggle_day_of_week(selected, day).days_of_week
        recurrence = RecurrenceDescription(
            frequency=self.recurrence.frequency,
            interval=self.recurrence.interval,
            days_of_week=days,
        )
        return self.model_copy(update={"recurrence": recurrence, "selected_days": days})

    def to_event(self, tz: str) -> Event:
        """
        Build the edited event.

        Timed boundaries combine the date and time components in the given
        zone and are stored as UTC instants. The recurrence rule is left as
        is; commit_edit regenerates it from the form's recurrence.

        Args:
            tz: IANA zone of the wall-clock components

        Returns:
            Event carrying the form's fields over the edited event's other data
        """
        zone = _get_zone(tz)

        if self.all_day:
            start = EventBoundary(date=self.start_date)
            end = EventBoundary(date=self.end_date)
        else:
            start = EventBoundary(date_time=_combine(self.start_date, self.start_time, zone))
            end = EventBoundary(date_time=_combine(self.end_date, self.end_time, zone))

        fields = {
            "title": self.title,
            "description": self.description,
            "start": start,
            "end": end,
        }

        if self.event is None:
            return Event(id=f"event_{uuid.uuid4().hex[:12]}", **fields)

        return self.event.model_copy(update=fields)


def _get_zone(tz: str):
    """Resolve an IANA zone name."""
    zone = gettz(tz)
    if zone is None:
        raise ValueError(f"Unknown timezone: {tz}")
    return zone


def _split_boundary(boundary: EventBoundary, zone) -> tuple[CalendarDate, time]:
    """Split a boundary into wall-clock date and time in the given zone."""
    if boundary.date is not None:
        return boundary.date, time(0, 0)

    if boundary.date_time is not None:
        local = boundary.date_time.astimezone(zone)
        return local.date(), time(local.hour, local.minute)

    raise ValueError("Event boundary has neither date nor dateTime")


def _combine(day: CalendarDate, clock: time, zone) -> datetime:
    """Combine wall-clock components into a UTC instant."""
    return datetime.combine(day, clock, tzinfo=zone).astimezone(timezone.utc)
