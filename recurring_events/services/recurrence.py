"""
Recurrence rule service.

Implements the parent-series recurrence model:
- Encodes a RecurrenceDescription into a compact rule string (FREQ, INTERVAL, BYDAY)
- Decodes rule strings leniently back into a RecurrenceDescription
- Expands a series into occurrences for a window, skipping excluded dates

Uses python-dateutil for occurrence expansion.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.rrule import DAILY, MONTHLY, WEEKLY, YEARLY, FR, MO, SA, SU, TH, TU, WE, rrule

from recurring_events.config import get_settings
from recurring_events.models.events import Event, EventBoundary, format_instant
from recurring_events.models.recurrence import (
    WEEKDAY_LABELS,
    WEEKDAY_TOKENS,
    Frequency,
    RecurrenceDescription,
)

logger = logging.getLogger(__name__)

TOKEN_TO_WEEKDAY = {token: index for index, token in enumerate(WEEKDAY_TOKENS)}

FREQUENCY_BY_NAME = {
    "DAILY": Frequency.DAILY,
    "WEEKLY": Frequency.WEEKLY,
    "MONTHLY": Frequency.MONTHLY,
    "YEARLY": Frequency.YEARLY,
}

# Frequency to dateutil rrule frequency constant
RRULE_FREQUENCIES = {
    Frequency.DAILY: DAILY,
    Frequency.WEEKLY: WEEKLY,
    Frequency.MONTHLY: MONTHLY,
    Frequency.YEARLY: YEARLY,
}

# Indexed like WEEKDAY_TOKENS (0 = Sunday)
RRULE_WEEKDAYS = (SU, MO, TU, WE, TH, FR, SA)

INTERVAL_UNITS = {
    Frequency.DAILY: "day",
    Frequency.WEEKLY: "week",
    Frequency.MONTHLY: "month",
    Frequency.YEARLY: "year",
}


@dataclass
class RecurrenceInstance:
    """Represents a single occurrence of an event."""

    series_id: str
    instance_start: datetime
    instance_end: datetime
    recurrence_id: str
    boundary: EventBoundary


def encode_recurrence(description: RecurrenceDescription) -> Optional[str]:
    """
    Encode a recurrence description as a rule string.

    Args:
        description: Structured recurrence (days_of_week kept sorted)

    Returns:
        Rule string (e.g., 'FREQ=WEEKLY;BYDAY=MO,WE') or None for a
        non-recurring description
    """
    if description.frequency == Frequency.NONE:
        return None

    tokens = [f"FREQ={description.frequency.name}"]

    # INTERVAL=1 is implied
    if description.interval > 1:
        tokens.append(f"INTERVAL={description.interval}")

    if description.frequency == Frequency.WEEKLY and description.days_of_week:
        days = ",".join(WEEKDAY_TOKENS[day] for day in description.days_of_week)
        tokens.append(f"BYDAY={days}")

    return ";".join(tokens)


def decode_recurrence(rule_string: Optional[str]) -> RecurrenceDescription:
    """
    Decode a rule string into a recurrence description.

    Parsing is lenient and never raises:
    - Missing or unknown FREQ gives a non-recurring description
    - Missing, non-numeric or non-positive INTERVAL gives 1
    - Unknown BYDAY tokens map to Sunday
    - Unrecognized keys are ignored

    Args:
        rule_string: Rule string, optionally prefixed with 'RRULE:'

    Returns:
        RecurrenceDescription with sorted, de-duplicated days
    """
    if not rule_string:
        return RecurrenceDescription()

    body = rule_string.strip()
    if body.upper().startswith("RRULE:"):
        body = body[6:]

    fields: dict[str, str] = {}
    for token in body.split(";"):
        key, sep, value = token.partition("=")
        if not sep:
            continue
        fields[key.strip().upper()] = value.strip().upper()

    frequency = FREQUENCY_BY_NAME.get(fields.get("FREQ", ""), Frequency.NONE)

    interval = 1
    raw_interval = fields.get("INTERVAL")
    if raw_interval is not None:
        try:
            interval = max(int(raw_interval), 1)
        except ValueError:
            logger.debug(f"Ignoring non-numeric INTERVAL {raw_interval!r}")

    days: tuple[int, ...] = ()
    if frequency == Frequency.WEEKLY and fields.get("BYDAY"):
        days = tuple(sorted({
            TOKEN_TO_WEEKDAY.get(day.strip(), 0)
            for day in fields["BYDAY"].split(",")
        }))

    return RecurrenceDescription(frequency=frequency, interval=interval, days_of_week=days)


def describe_recurrence(description: RecurrenceDescription) -> str:
    """
    Human readable summary of a recurrence.

    Args:
        description: Recurrence to describe

    Returns:
        Label such as 'Every week on Mon, Wed' or 'Every 2 month(s)'
    """
    if description.frequency == Frequency.NONE:
        return "Does not repeat"

    unit = INTERVAL_UNITS[description.frequency]
    if description.interval == 1:
        label = f"Every {unit}"
    else:
        label = f"Every {description.interval} {unit}(s)"

    if description.frequency == Frequency.WEEKLY and description.days_of_week:
        label += " on " + ", ".join(WEEKDAY_LABELS[day] for day in description.days_of_week)

    return label


def format_recurrence_id(boundary: EventBoundary) -> str:
    """
    Format an occurrence boundary as a recurrence ID.

    Args:
        boundary: Resolved occurrence boundary

    Returns:
        'YYYYMMDD' for dates, 'YYYYMMDDTHHMMSSZ' (UTC) for instants

    Raises:
        ValueError: If the boundary is unresolved
    """
    if boundary.date is not None:
        return boundary.date.strftime("%Y%m%d")
    if boundary.date_time is not None:
        return boundary.date_time.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    raise ValueError("Cannot format a recurrence ID for an unresolved boundary")


def build_rrule(description: RecurrenceDescription, dtstart: datetime) -> Optional[rrule]:
    """
    Build a dateutil rrule for a recurrence description.

    Args:
        description: Structured recurrence
        dtstart: Start datetime for the recurrence

    Returns:
        rrule object or None for a non-recurring description
    """
    if description.frequency == Frequency.NONE:
        return None

    byweekday = None
    if description.frequency == Frequency.WEEKLY and description.days_of_week:
        byweekday = [RRULE_WEEKDAYS[day] for day in description.days_of_week]

    return rrule(
        RRULE_FREQUENCIES[description.frequency],
        dtstart=dtstart,
        interval=description.interval,
        byweekday=byweekday,
    )


def normalize_boundary_values(values: Optional[list[str]]) -> set[str]:
    """
    Canonicalize boundary value strings for comparison.

    Unparseable values are skipped.
    """
    normalized = set()
    for value in values or []:
        canonical = canonical_boundary_value(value)
        if canonical is not None:
            normalized.add(canonical)
    return normalized


def canonical_boundary_value(value: Optional[str]) -> Optional[str]:
    """
    Canonicalize one boundary value string.

    Args:
        value: 'YYYY-MM-DD' or an ISO 8601 timestamp with any offset

    Returns:
        The date unchanged, the instant in UTC ('...Z'), or None when the
        value is missing or unparseable
    """
    if not value:
        return None
    try:
        return EventBoundary.from_value(value).value()
    except ValueError:
        logger.debug(f"Skipping unparseable boundary value {value!r}")
        return None


def expand_occurrences(
    event: Event,
    window_start: datetime,
    window_end: datetime,
    max_instances: Optional[int] = None,
) -> list[RecurrenceInstance]:
    """
    Expand an event into occurrences within a time window.

    Times are treated as plain wall-clock values of the event's start; no
    timezone-aware expansion is attempted.

    Args:
        event: Series parent or one-off event
        window_start: Start of query window
        window_end: End of query window
        max_instances: Maximum instances to generate (defaults to settings)

    Returns:
        List of RecurrenceInstance objects within the window, excluded
        occurrences removed
    """
    dtstart = event.start.as_datetime()
    dtend = event.end.as_datetime()
    if dtstart is None or dtend is None:
        return []

    if max_instances is None:
        max_instances = get_settings().max_expanded_instances

    duration = dtend - dtstart
    window_start = _align(window_start, dtstart)
    window_end = _align(window_end, dtstart)

    if not event.is_recurring:
        if dtstart <= window_end and dtend >= window_start:
            return [_make_instance(event, dtstart, duration)]
        return []

    rule = build_rrule(decode_recurrence(event.recurrence_rule), dtstart)
    if rule is None:
        logger.debug(f"Rule {event.recurrence_rule!r} on event {event.id} does not repeat")
        return [_make_instance(event, dtstart, duration)] if window_start <= dtstart <= window_end else []

    excluded = normalize_boundary_values(event.excluded_dates)

    # Walk the rule lazily so wide windows stop at max_instances
    instances = []
    try:
        for occurrence in rule.xafter(window_start, inc=True):
            if occurrence > window_end:
                break
            instance = _make_instance(event, occurrence, duration)
            if instance.boundary.value() in excluded:
                continue
            instances.append(instance)
            if len(instances) >= max_instances:
                break
    except (ValueError, OverflowError) as e:
        logger.warning(f"Could not expand event {event.id}: {e}")
        return []

    return instances


def _make_instance(event: Event, occurrence: datetime, duration: timedelta) -> RecurrenceInstance:
    """Create an instance for one occurrence start."""
    if event.is_all_day:
        boundary = EventBoundary(date=occurrence.date())
    else:
        boundary = EventBoundary(date_time=occurrence)

    return RecurrenceInstance(
        series_id=event.id,
        instance_start=occurrence,
        instance_end=occurrence + duration,
        recurrence_id=format_recurrence_id(boundary),
        boundary=boundary,
    )


def _align(dt: datetime, reference: datetime) -> datetime:
    """Match the awareness of dt to the reference datetime."""
    if reference.tzinfo is None and dt.tzinfo is not None:
        return dt.replace(tzinfo=None)
    if reference.tzinfo is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
