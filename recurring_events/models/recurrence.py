"""
Structured recurrence description.

The editing surface composes a RecurrenceDescription, and the codec in
recurring_events.services.recurrence converts it to and from rule strings.
"""

from dataclasses import dataclass
from enum import Enum


class Frequency(str, Enum):
    """Recurrence frequency; the upper-cased name is the FREQ token."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# Weekday index (0 = Sunday) to BYDAY token
WEEKDAY_TOKENS = ("SU", "MO", "TU", "WE", "TH", "FR", "SA")

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class RecurrenceDescription:
    """
    Represents how an event repeats.

    Fields:
    - frequency: Step unit, or NONE for a one-off event
    - interval: Number of frequency units between occurrences (>= 1)
    - days_of_week: Sorted weekday indices (0 = Sunday), WEEKLY only.
      Empty means the weekday of the event start.

    Values that a rule string cannot carry are normalized away on
    construction (days outside WEEKLY, interval of a non-recurring event),
    so every instance survives an encode/decode round trip.
    """

    frequency: Frequency = Frequency.NONE
    interval: int = 1
    days_of_week: tuple[int, ...] = ()

    def __post_init__(self):
        if self.interval < 1:
            raise ValueError(f"interval must be >= 1, got {self.interval}")

        bad_days = [d for d in self.days_of_week if not 0 <= d <= 6]
        if bad_days:
            raise ValueError(f"days_of_week must be within 0..6, got {bad_days}")

        # Frozen dataclass: normalize through object.__setattr__
        frequency = Frequency(self.frequency)
        days = tuple(sorted(set(self.days_of_week))) if frequency == Frequency.WEEKLY else ()
        interval = 1 if frequency == Frequency.NONE else self.interval

        object.__setattr__(self, "frequency", frequency)
        object.__setattr__(self, "days_of_week", days)
        object.__setattr__(self, "interval", interval)

    @property
    def is_recurring(self) -> bool:
        """Check if this description produces more than one occurrence."""
        return self.frequency != Frequency.NONE
