"""Tests for activity schedules."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from familyhub.db import ActivityRepository, ScheduleRepository
from familyhub.errors import StoreError, ValidationError
from familyhub.models import Activity
from familyhub.notifications import ToastKind
from familyhub.services import ActivitySchedules


@pytest.fixture
def activity(store):
    return asyncio.run(
        ActivityRepository(store).create(
            Activity(title="Canoeing", price=Decimal("20"), creator_id="U1")
        )
    )


def _fields(**overrides):
    fields = {
        "date": "2026-07-01",
        "start_time": "10:00",
        "end_time": "12:00",
        "available_spots": "8",
    }
    fields.update(overrides)
    return fields


class TestActivitySchedules:
    """Tests for ActivitySchedules."""

    def test_load_without_activity_is_noop(self, store):
        schedules = ActivitySchedules(None, ScheduleRepository(store))
        asyncio.run(schedules.load())

        assert schedules.schedules == []
        assert schedules.loading is False

    def test_booked_spots_always_zero(self, store, activity):
        """Test that a booked count in the form is ignored."""
        schedules = ActivitySchedules(activity.id, ScheduleRepository(store))

        created = asyncio.run(schedules.add_schedule(_fields(booked_spots="5")))

        assert created.booked_spots == 0
        row = asyncio.run(store.select_one("activity_schedules", {"id": created.id}))
        assert row["booked_spots"] == 0
        assert [s.id for s in schedules.schedules] == [created.id]

    def test_ordered_by_date_then_time(self, store, activity):
        schedules = ActivitySchedules(activity.id, ScheduleRepository(store))
        asyncio.run(schedules.add_schedule(_fields(date="2026-08-01")))
        asyncio.run(schedules.add_schedule(_fields(date="2026-07-01", start_time="15:00", end_time="16:00")))
        asyncio.run(schedules.add_schedule(_fields(date="2026-07-01")))

        assert [(s.date, s.start_time) for s in schedules.schedules] == [
            (date(2026, 7, 1), "10:00"),
            (date(2026, 7, 1), "15:00"),
            (date(2026, 8, 1), "10:00"),
        ]

    def test_price_override(self, store, activity):
        schedules = ActivitySchedules(activity.id, ScheduleRepository(store))
        created = asyncio.run(schedules.add_schedule(_fields(price_override="15")))

        assert created.effective_price(activity.price) == Decimal("15")

    def test_capacity_enforced_by_store(self, store, activity):
        """Test that the store's check is the only capacity rule."""
        schedules = ActivitySchedules(activity.id, ScheduleRepository(store))

        with pytest.raises(StoreError):
            asyncio.run(schedules.add_schedule(_fields(available_spots="-1")))

        assert schedules.notifier.last.kind == ToastKind.ERROR
        assert asyncio.run(store.select("activity_schedules")) == []

    def test_invalid_date(self, store, activity):
        schedules = ActivitySchedules(activity.id, ScheduleRepository(store))

        with pytest.raises(ValidationError):
            asyncio.run(schedules.add_schedule(_fields(date="next week")))
        assert asyncio.run(store.select("activity_schedules")) == []
