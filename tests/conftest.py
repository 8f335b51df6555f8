"""
Pytest configuration and fixtures for recurring events tests.

Provides sample series, standalone events and collections modelled on the
calendar demo data.
"""

from typing import Generator

import pytest

from recurring_events.config import get_settings
from recurring_events.models.events import Event, EventBoundary
from recurring_events.services.event_store import reset_event_store


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """
    Reload settings for every test.

    Tests that set environment variables get fresh settings, and the
    shared event store starts empty.
    """
    get_settings.cache_clear()
    reset_event_store()
    yield
    get_settings.cache_clear()
    reset_event_store()


@pytest.fixture
def all_day_series() -> Event:
    """
    Weekly all-day series on Mon, Wed, Thu, Fri.

    Returns:
        Event: Series parent starting Monday 2024-09-16
    """
    return Event(
        id="event_2xx3",
        title="All day Recurring",
        start=EventBoundary(date="2024-09-16"),
        end=EventBoundary(date="2024-09-17"),
        color="#BA3D9D",
        recurrence_rule="FREQ=WEEKLY;INTERVAL=1;BYDAY=MO,WE,TH,FR",
        excluded_dates=["2024-09-16", "2024-09-22"],
    )


@pytest.fixture
def timed_series() -> Event:
    """
    Weekly timed series on Mon, Wed, Thu, Fri from 05:00 to 07:00 UTC.

    Returns:
        Event: Series parent starting Monday 2024-09-16
    """
    return Event.model_validate({
        "id": "event_26",
        "title": "Event Recurring",
        "start": {"dateTime": "2024-09-16T05:00:00.000Z"},
        "end": {"dateTime": "2024-09-16T07:00:00.000Z"},
        "color": "#BA3D9D",
        "recurrence": "FREQ=WEEKLY;INTERVAL=1;BYDAY=MO,WE,TH,FR",
        "excludeDates": [
            "2024-09-16T05:00:00.000Z",
            "2024-09-22T05:00:00.000Z",
            "2024-10-11T05:00:00.000Z",
        ],
    })


@pytest.fixture
def standalone_event() -> Event:
    """
    One-off timed event.

    Returns:
        Event: Standalone event on 2024-09-17 09:00-10:00 UTC
    """
    return Event.model_validate({
        "id": "event_1",
        "title": "Event 1",
        "start": {"dateTime": "2024-09-17T09:00:00.000Z"},
        "end": {"dateTime": "2024-09-17T10:00:00.000Z"},
        "color": "#5428F2",
        "resourceId": "resource_3",
    })


@pytest.fixture
def sample_collection(standalone_event: Event, all_day_series: Event, timed_series: Event) -> list[Event]:
    """
    Collection holding a standalone event and two series.

    Returns:
        list[Event]: [standalone, all-day series, timed series]
    """
    return [standalone_event, all_day_series, timed_series]
