"""
Unit tests for the event editing form.

Tests pre-filling from events, picker results and building edited events.
"""

from datetime import date, datetime, time

import pytest

from recurring_events.forms import EventEditForm
from recurring_events.models.recurrence import Frequency, RecurrenceDescription


@pytest.fixture
def timed_form() -> EventEditForm:
    """Form for a new timed event on 2024-09-18 10:00-11:00."""
    return EventEditForm(
        title="Review",
        start_date=date(2024, 9, 18),
        start_time=time(10, 0),
        end_date=date(2024, 9, 18),
        end_time=time(11, 0),
    )


class TestFromEvent:
    """Test EventEditForm.from_event."""

    def test_prefill_timed_series(self, timed_series):
        """Timed events split into wall-clock components and decoded recurrence."""
        form = EventEditForm.from_event(timed_series, "UTC")

        assert form.title == "Event Recurring"
        assert form.description == ""
        assert form.all_day is False
        assert form.start_date == date(2024, 9, 16)
        assert form.start_time == time(5, 0)
        assert form.end_time == time(7, 0)
        assert form.recurrence == RecurrenceDescription(Frequency.WEEKLY, 1, (1, 3, 4, 5))

    def test_prefill_in_other_zone(self, timed_series):
        """Components are shown in the requested zone."""
        form = EventEditForm.from_event(timed_series, "America/New_York")

        assert form.start_date == date(2024, 9, 16)
        assert form.start_time == time(1, 0)

    def test_prefill_all_day(self, all_day_series):
        """All-day events keep their dates."""
        form = EventEditForm.from_event(all_day_series, "UTC")

        assert form.all_day is True
        assert form.start_date == date(2024, 9, 16)
        assert form.end_date == date(2024, 9, 17)

    def test_prefill_non_recurring(self, standalone_event):
        """Events without a rule get the default recurrence."""
        form = EventEditForm.from_event(standalone_event, "UTC")
        assert form.recurrence == RecurrenceDescription()

    def test_unknown_timezone(self, standalone_event):
        """Unknown zones are rejected."""
        with pytest.raises(ValueError):
            EventEditForm.from_event(standalone_event, "Not/AZone")


class TestPicker:
    """Test picker results."""

    def test_cancel_is_no_op(self, timed_form):
        """A cancelled picker leaves the form unchanged."""
        assert timed_form.with_picked("start_date", None) is timed_form

    def test_pick_time_drops_seconds(self, timed_form):
        """Times keep hours and minutes only."""
        form = timed_form.with_picked("end_time", time(12, 30, 45))
        assert form.end_time == time(12, 30)

    def test_pick_date_from_datetime(self, timed_form):
        """Datetime picker values are reduced to their date."""
        form = timed_form.with_picked("end_date", datetime(2024, 9, 19, 8, 0))
        assert form.end_date == date(2024, 9, 19)

    def test_all_day_start_moves_end(self, timed_form):
        """On all-day forms the end follows a new start date."""
        form = timed_form.with_all_day(True).with_picked("start_date", date(2024, 9, 25))

        assert form.start_date == date(2024, 9, 25)
        assert form.end_date == date(2024, 9, 25)

    def test_timed_start_keeps_end(self, timed_form):
        """On timed forms the end date is left alone."""
        form = timed_form.with_picked("start_date", date(2024, 9, 17))
        assert form.end_date == date(2024, 9, 18)

    def test_unknown_target(self, timed_form):
        """Unknown picker targets are rejected."""
        with pytest.raises(ValueError):
            timed_form.with_picked("duration", time(1, 0))


class TestRecurrenceControls:
    """Test recurrence composition on the form."""

    def test_weekly_days(self, timed_form):
        """Days toggle on a weekly recurrence."""
        form = timed_form.with_frequency(Frequency.WEEKLY).with_day_toggled(5).with_day_toggled(1)
        assert form.recurrence == RecurrenceDescription(Frequency.WEEKLY, 1, (1, 5))

    def test_days_kept_across_frequency_changes(self, timed_form):
        """Switching away from weekly and back restores the picked days."""
        form = timed_form.with_frequency(Frequency.WEEKLY).with_day_toggled(1).with_day_toggled(3)

        daily = form.with_frequency(Frequency.DAILY)
        weekly = daily.with_frequency(Frequency.WEEKLY)

        assert daily.recurrence.days_of_week == ()
        assert weekly.recurrence == RecurrenceDescription(Frequency.WEEKLY, 1, (1, 3))

    def test_days_picked_before_weekly(self, timed_form):
        """Days toggled on a non-weekly form apply once it becomes weekly."""
        form = timed_form.with_frequency(Frequency.DAILY).with_day_toggled(2)

        assert form.recurrence == RecurrenceDescription(Frequency.DAILY)
        assert form.with_frequency(Frequency.WEEKLY).recurrence.days_of_week == (2,)

    def test_prefilled_days_are_selected(self, timed_series):
        """Days decoded from the rule start out selected."""
        form = EventEditForm.from_event(timed_series, "UTC").with_frequency(Frequency.MONTHLY)

        assert form.with_frequency(Frequency.WEEKLY).recurrence.days_of_week == (1, 3, 4, 5)

    def test_interval_below_one_ignored(self, timed_form):
        """Non-positive intervals are ignored."""
        form = timed_form.with_frequency(Frequency.DAILY).with_interval(3).with_interval(0)
        assert form.recurrence.interval == 3


class TestToEvent:
    """Test EventEditForm.to_event."""

    def test_new_timed_event(self, timed_form):
        """New events get a generated id and UTC instants."""
        event = timed_form.to_event("Europe/Berlin")

        assert event.id.startswith("event_")
        assert event.title == "Review"
        assert event.start.value() == "2024-09-18T08:00:00.000Z"
        assert event.end.value() == "2024-09-18T09:00:00.000Z"

    def test_all_day_event(self, timed_form):
        """All-day forms produce date boundaries."""
        event = timed_form.with_all_day(True).to_event("UTC")

        assert event.is_all_day
        assert event.start.value() == "2024-09-18"

    def test_edit_keeps_other_fields(self, standalone_event):
        """Fields not on the form are carried from the edited event."""
        form = EventEditForm.from_event(standalone_event, "UTC").with_picked("end_time", time(10, 30))

        event = form.to_event("UTC")

        assert event.id == standalone_event.id
        assert event.color == standalone_event.color
        assert event.resource_id == "resource_3"
        assert event.end.value() == "2024-09-17T10:30:00.000Z"
