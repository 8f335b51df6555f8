"""
Event and EventBoundary models.

Entities:
- EventBoundary: Start or end of an event, either an all-day date or an instant
- Event: A calendar event, possibly the parent of a recurring series or a
  detached override of one occurrence

Field aliases follow the calendar event item wire format (camelCase).
"""

from datetime import date as CalendarDate, datetime, timedelta, timezone
from typing import Optional

from dateutil.parser import isoparse
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


class EventBoundary(BaseModel):
    """
    Start or end of an event.

    Exactly one of `date` (all-day) or `date_time` (zoned instant) is set on a
    resolved boundary. A boundary with neither is accepted so that callers can
    pass incomplete payloads through; it is rejected where an anchor is needed.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date: Optional[CalendarDate] = Field(None, description="All-day date (YYYY-MM-DD)")
    date_time: Optional[datetime] = Field(
        None,
        alias="dateTime",
        description="Zoned instant (ISO 8601); naive values are read as UTC",
    )

    @field_validator("date_time")
    @classmethod
    def ensure_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def check_single_variant(self) -> "EventBoundary":
        if self.date is not None and self.date_time is not None:
            raise ValueError("Boundary cannot carry both date and dateTime")
        return self

    @field_serializer("date_time")
    def serialize_date_time(self, v: Optional[datetime]) -> Optional[str]:
        return format_instant(v) if v is not None else None

    @classmethod
    def from_value(cls, value: str) -> "EventBoundary":
        """
        Build a boundary from its string value.

        Args:
            value: 'YYYY-MM-DD' or an ISO 8601 timestamp

        Returns:
            EventBoundary of the matching variant

        Raises:
            ValueError: If the value cannot be parsed
        """
        value = value.strip()
        if len(value) == 10:
            return cls(date=CalendarDate.fromisoformat(value))
        return cls(date_time=isoparse(value))

    @property
    def is_all_day(self) -> bool:
        """Check if this is a date boundary."""
        return self.date is not None

    @property
    def is_resolved(self) -> bool:
        """Check if either variant is set."""
        return self.date is not None or self.date_time is not None

    @property
    def kind(self) -> Optional[str]:
        """Variant name ('date' or 'dateTime'), or None when unresolved."""
        if self.date is not None:
            return "date"
        if self.date_time is not None:
            return "dateTime"
        return None

    def value(self) -> Optional[str]:
        """
        Canonical string value, as stored in excluded dates.

        Instants are expressed in UTC so that equal instants written with
        different offsets give the same value.
        """
        if self.date is not None:
            return self.date.isoformat()
        if self.date_time is not None:
            return format_instant(self.date_time.astimezone(timezone.utc))
        return None

    def as_datetime(self) -> Optional[datetime]:
        """Boundary as a datetime (naive midnight for all-day dates)."""
        if self.date is not None:
            return datetime(self.date.year, self.date.month, self.date.day)
        return self.date_time


class Event(BaseModel):
    """
    Represents a calendar event.

    Events can be:
    - One-time events
    - Series parents carrying a recurrence rule and excluded dates
    - Detached overrides of one occurrence, linked to the parent through
      originating_series_id

    Unknown wire fields are kept so that events round-trip unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., description="Unique event identifier")
    title: str = Field("", description="Event title")
    description: Optional[str] = Field(None, description="Event description")
    start: EventBoundary = Field(..., description="Event start")
    end: EventBoundary = Field(..., description="Event end")

    # Recurrence
    recurrence_rule: Optional[str] = Field(
        None,
        alias="recurrence",
        description="Rule string (e.g., 'FREQ=WEEKLY;BYDAY=MO,WE,FR'), series parent only",
    )
    excluded_dates: Optional[list[str]] = Field(
        None,
        alias="excludeDates",
        description="Boundary values of suppressed occurrences",
    )
    originating_series_id: Optional[str] = Field(
        None,
        alias="originatingSeriesId",
        description="Parent event ID for detached overrides",
    )
    recurrence_id: Optional[str] = Field(
        None,
        alias="recurrenceId",
        description="Boundary value of the occurrence an override replaces",
    )

    # Display
    color: Optional[str] = Field(None, description="Display colour (#RRGGBB)")
    resource_id: Optional[str] = Field(None, alias="resourceId", description="Resource column")

    @model_validator(mode="after")
    def check_boundary_variants(self) -> "Event":
        if self.start.is_resolved and self.end.is_resolved and self.start.kind != self.end.kind:
            raise ValueError("Event start and end must both be dates or both be dateTimes")
        return self

    @property
    def is_all_day(self) -> bool:
        """Check if this is an all-day event."""
        return self.start.is_all_day

    @property
    def is_recurring(self) -> bool:
        """Check if this event defines a series."""
        return bool(self.recurrence_rule)

    @property
    def is_override(self) -> bool:
        """Check if this event replaces one occurrence of a series."""
        return self.originating_series_id is not None

    def to_wire(self) -> dict:
        """Serialize to the camelCase wire format, omitting absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def format_instant(dt: datetime) -> str:
    """
    Format an instant as an ISO 8601 string.

    UTC instants use millisecond precision and a 'Z' suffix
    (e.g., '2024-09-16T05:00:00.000Z'); other offsets are kept.

    Args:
        dt: Datetime to format (naive values are treated as UTC)

    Returns:
        ISO 8601 string
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    if dt.utcoffset() == timedelta(0):
        return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"

    return dt.isoformat(timespec="milliseconds")
