"""Tests for the tabular store."""

import asyncio
import uuid

import pytest

from familyhub.db import init_db
from familyhub.errors import StoreError


def _activity(title="Pottery", creator_id="U1", **extra):
    return {"title": title, "price": 10.0, "creator_id": creator_id, **extra}


class TestInsert:
    """Tests for insert."""

    def test_assigns_id_and_timestamps(self, store):
        """Test that ids and timestamps come from the store."""
        rows = asyncio.run(store.insert("activities", _activity()))

        assert len(rows) == 1
        row = rows[0]
        uuid.UUID(row["id"])
        assert row["created_at"]
        assert row["updated_at"] == row["created_at"]

    def test_column_defaults_apply(self, store):
        """Test that omitted and None values fall back to column defaults."""
        row = asyncio.run(store.insert("activities", _activity(category=None)))[0]

        assert row["status"] == "draft"
        assert row["category"] == "other"
        assert row["is_premium"] is False
        assert row["review_count"] == 0

    def test_unknown_column_rejected(self, store):
        """Test that unknown columns never reach SQL."""
        with pytest.raises(ValueError):
            asyncio.run(store.insert("activities", _activity(colour="red")))

    def test_unknown_table_rejected(self, store):
        with pytest.raises(ValueError):
            asyncio.run(store.insert("bookings", {"id": "x"}))

    def test_check_constraint_raises_store_error(self, store):
        """Test that constraint violations surface as StoreError."""
        with pytest.raises(StoreError):
            asyncio.run(store.insert("activities", _activity(status="archived")))


class TestSelect:
    """Tests for select and select_one."""

    def test_filters_and_window(self, store):
        """Test equality filters combined with offset/limit."""
        for i in range(5):
            asyncio.run(store.insert("activities", _activity(title=f"A{i}")))
        asyncio.run(store.insert("activities", _activity(title="Other", creator_id="U2")))

        rows = asyncio.run(
            store.select(
                "activities",
                {"creator_id": "U1"},
                order_by="created_at",
                ascending=False,
                offset=1,
                limit=2,
            )
        )
        assert [r["title"] for r in rows] == ["A3", "A2"]

    def test_window_past_end_is_empty(self, store):
        asyncio.run(store.insert("activities", _activity()))
        rows = asyncio.run(store.select("activities", offset=10, limit=10))
        assert rows == []

    def test_none_filter_matches_null(self, store):
        asyncio.run(store.insert("activities", _activity(title="No image")))
        asyncio.run(store.insert("activities", _activity(title="Image", image_url="/x.png")))

        rows = asyncio.run(store.select("activities", {"image_url": None}))
        assert [r["title"] for r in rows] == ["No image"]

    def test_select_one_missing(self, store):
        assert asyncio.run(store.select_one("activities", {"id": "missing"})) is None


class TestUpdateDelete:
    """Tests for update and delete."""

    def test_update_returns_fresh_rows(self, store):
        """Test that update returns the row as stored after the change."""
        row = asyncio.run(store.insert("activities", _activity()))[0]

        updated = asyncio.run(
            store.update("activities", {"title": "Clay"}, {"id": row["id"]})
        )

        assert len(updated) == 1
        assert updated[0]["title"] == "Clay"
        assert updated[0]["price"] == row["price"]
        assert updated[0]["updated_at"] >= row["updated_at"]

    def test_update_without_match(self, store):
        assert asyncio.run(store.update("activities", {"title": "X"}, {"id": "nope"})) == []

    def test_update_requires_filter(self, store):
        with pytest.raises(ValueError):
            asyncio.run(store.update("activities", {"title": "X"}, {}))

    def test_delete_counts_rows(self, store):
        row = asyncio.run(store.insert("activities", _activity()))[0]

        assert asyncio.run(store.delete("activities", {"id": row["id"]})) == 1
        assert asyncio.run(store.delete("activities", {"id": row["id"]})) == 0


class TestTransaction:
    """Tests for transaction()."""

    def test_rolls_back_on_error(self, store):
        """Test that nothing from a failed block is kept."""

        async def failing():
            async with store.transaction() as tx:
                await tx.insert("activities", _activity(title="Kept?"))
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            asyncio.run(failing())

        assert asyncio.run(store.select("activities")) == []

    def test_commits_on_success(self, store):
        async def succeeding():
            async with store.transaction() as tx:
                await tx.insert("activities", _activity(title="One"))
                await tx.insert("activities", _activity(title="Two"))

        asyncio.run(succeeding())
        assert len(asyncio.run(store.select("activities"))) == 2


class TestInitDb:
    """Tests for schema initialization."""

    def test_init_is_idempotent(self, store, temp_db_path):
        asyncio.run(store.insert("activities", _activity()))
        asyncio.run(init_db(temp_db_path))

        assert len(asyncio.run(store.select("activities"))) == 1
