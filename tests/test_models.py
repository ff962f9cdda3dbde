"""Tests for data models and input helpers."""

from datetime import date
from decimal import Decimal

import pytest

from familyhub.models import (
    Activity,
    ActivityStatus,
    HostBalance,
    Profile,
    Schedule,
    WithdrawalStatus,
)
from familyhub.models.base import decimal_to_store, to_decimal
from familyhub.services.base import clean_text, missing_fields, parse_amount


class TestActivity:
    """Tests for Activity."""

    def test_to_dict_stores_money_as_float(self):
        activity = Activity(title="Zoo", price=Decimal("12.5"), creator_id="U1")
        data = activity.to_dict()

        assert data["price"] == 12.5
        assert data["status"] == "draft"
        assert "id" not in data

    def test_from_row_defaults(self):
        activity = Activity.from_row(
            {"id": "A1", "title": "Zoo", "price": 12.5, "creator_id": "U1", "status": None}
        )

        assert activity.price == Decimal("12.5")
        assert activity.status == ActivityStatus.DRAFT
        assert activity.category == "other"
        assert activity.age_range == "all"
        assert activity.is_premium is False

    def test_status_labels(self):
        assert ActivityStatus.PUBLISHED.label == "Published"
        assert ActivityStatus("pending").label == "Pending"


class TestSchedule:
    """Tests for Schedule."""

    def _schedule(self, **overrides):
        values = {
            "activity_id": "A1",
            "date": date(2026, 7, 1),
            "start_time": "10:00:00",
            "end_time": "12:30:00",
            "available_spots": 8,
        }
        values.update(overrides)
        return Schedule(**values)

    def test_remaining_spots(self):
        assert self._schedule(booked_spots=3).remaining_spots == 5
        assert self._schedule(booked_spots=8).remaining_spots == 0

    def test_effective_price(self):
        assert self._schedule().effective_price(Decimal("20")) == Decimal("20")
        assert self._schedule(price_override=Decimal("15")).effective_price(Decimal("20")) == Decimal("15")

    def test_time_range(self):
        assert self._schedule().time_range == "10:00 - 12:30"

    def test_from_row(self):
        schedule = Schedule.from_row(
            {
                "id": "S1",
                "activity_id": "A1",
                "date": "2026-07-01",
                "start_time": "10:00",
                "end_time": "11:00",
                "available_spots": 4,
                "booked_spots": None,
                "price_override": None,
            }
        )
        assert schedule.date == date(2026, 7, 1)
        assert schedule.booked_spots == 0
        assert schedule.price_override is None


class TestProfile:
    """Tests for Profile."""

    def test_display_name_falls_back_to_email(self):
        profile = Profile(id="U1", email="ana@example.com")
        assert profile.display_name == "ana@example.com"
        assert profile.initial == "A"

    def test_display_name(self):
        profile = Profile(id="U1", email="x@example.com", first_name="ben", last_name="Ode")
        assert profile.display_name == "ben Ode"
        assert profile.initial == "B"

    def test_flags_from_integer_columns(self):
        profile = Profile.from_row({"id": "U1", "email": "a@b.c", "is_admin": 1, "is_super_admin": 0})
        assert profile.is_admin is True
        assert profile.is_super_admin is False


class TestHostBalance:
    """Tests for HostBalance."""

    def test_empty(self):
        balance = HostBalance.empty("U1")
        assert balance.available_balance == Decimal("0")
        assert balance.last_withdrawal is None

    def test_last_withdrawal_from_row(self):
        balance = HostBalance.from_row(
            {
                "id": "B1",
                "user_id": "U1",
                "available_balance": 10.0,
                "pending_balance": 5.0,
                "total_earnings": 15.0,
                "last_withdrawal_amount": 5.0,
                "last_withdrawal_date": "2026-07-01T10:00:00+00:00",
                "last_withdrawal_status": "completed",
            }
        )
        assert balance.last_withdrawal.amount == Decimal("5")
        assert balance.last_withdrawal.status == WithdrawalStatus.COMPLETED
        assert balance.last_withdrawal.date.year == 2026


class TestInputHelpers:
    """Tests for parse_amount, clean_text and missing_fields."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("12.50", Decimal("12.50")),
            ("12,5", Decimal("12.5")),
            (" 7 ", Decimal("7")),
            (3, Decimal("3")),
            ("abc", None),
            ("", None),
            (None, None),
            ("Infinity", None),
            ("NaN", None),
            ("1.005", Decimal("1.01")),
            ("33.333333333333333333", Decimal("33.33")),
            ("1e40", None),
        ],
    )
    def test_parse_amount(self, raw, expected):
        assert parse_amount(raw) == expected

    def test_clean_text(self):
        assert clean_text("  hi ") == "hi"
        assert clean_text("   ") is None
        assert clean_text(None) is None

    def test_missing_fields(self):
        fields = {"title": "Zoo", "price": " ", "location": None}
        assert missing_fields(fields, ("title", "price", "location", "category")) == [
            "price",
            "location",
            "category",
        ]

    def test_money_round_trip_in_cents(self):
        stored = decimal_to_store(Decimal("66.666"))
        assert stored == 66.67
        assert to_decimal(stored) == Decimal("66.67")
        assert to_decimal(100.0 - 33.33) == Decimal("66.67")
