"""Tabular store: the relational backend every controller talks to.

Five logical operations per table: ``select`` (equality filters, ordering,
offset/limit window), ``select_one``, ``insert`` (returns rows with their
assigned ids and timestamps), ``update`` (partial, by filter, returns the
updated rows) and ``delete``. ``transaction()`` groups several of them into
one atomic unit.

Ids are UUID strings and ``created_at``/``updated_at`` are ISO-8601 UTC
strings, both assigned here rather than by callers.
"""

import sqlite3
import uuid
from collections.abc import Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from ..errors import StoreError
from ..logging_config import get_logger
from .engine import get_db_path

logger = get_logger(__name__)

TABLES: dict[str, frozenset[str]] = {
    "auth_users": frozenset({"id", "email", "password_hash", "created_at", "updated_at"}),
    "auth_sessions": frozenset(
        {"id", "user_id", "expires_at", "revoked_at", "created_at", "updated_at"}
    ),
    "profiles": frozenset({
        "id", "email", "first_name", "last_name", "avatar_url", "phone",
        "bank_account", "is_admin", "is_super_admin", "created_at", "updated_at",
    }),
    "activities": frozenset({
        "id", "title", "description", "location", "category", "price",
        "image_url", "age_range", "is_premium", "status", "creator_id",
        "creator_name", "rating", "review_count", "created_at", "updated_at",
    }),
    "activity_schedules": frozenset({
        "id", "activity_id", "date", "start_time", "end_time",
        "available_spots", "booked_spots", "price_override", "created_at",
        "updated_at",
    }),
    "forum_categories": frozenset({"id", "name", "description", "created_at", "updated_at"}),
    "forum_posts": frozenset({
        "id", "title", "content", "author_id", "author_name", "category_id",
        "is_locked", "is_pinned", "reply_count", "created_at", "updated_at",
    }),
    "forum_replies": frozenset(
        {"id", "post_id", "content", "author_id", "author_name", "created_at", "updated_at"}
    ),
    "host_balances": frozenset({
        "id", "user_id", "available_balance", "pending_balance",
        "total_earnings", "last_withdrawal_amount", "last_withdrawal_date",
        "last_withdrawal_status", "created_at", "updated_at",
    }),
    "withdrawal_requests": frozenset(
        {"id", "user_id", "amount", "status", "bank_account", "created_at", "updated_at"}
    ),
}

# SQLite has no boolean type; these columns are stored as 0/1
BOOLEAN_COLUMNS: dict[str, frozenset[str]] = {
    "profiles": frozenset({"is_admin", "is_super_admin"}),
    "activities": frozenset({"is_premium"}),
    "forum_posts": frozenset({"is_locked", "is_pinned"}),
}


def utc_now() -> str:
    """Current time as stored in timestamp columns."""
    return datetime.now(timezone.utc).isoformat()


def _check_table(table: str) -> frozenset[str]:
    try:
        return TABLES[table]
    except KeyError:
        raise ValueError(f"Unknown table: {table}") from None


def _check_columns(table: str, columns) -> None:
    known = _check_table(table)
    unknown = [c for c in columns if c not in known]
    if unknown:
        raise ValueError(f"Unknown column(s) for {table}: {', '.join(sorted(unknown))}")


def _to_db(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    return value


def _row_to_dict(table: str, row: aiosqlite.Row) -> dict:
    data = dict(row)
    for col in BOOLEAN_COLUMNS.get(table, ()):
        if col in data and data[col] is not None:
            data[col] = bool(data[col])
    return data


def _where(filters: dict[str, Any] | None) -> tuple[str, list]:
    if not filters:
        return "", []
    clauses = []
    params = []
    for column, value in filters.items():
        if value is None:
            clauses.append(f"{column} IS NULL")
        else:
            clauses.append(f"{column} = ?")
            params.append(_to_db(value))
    return " WHERE " + " AND ".join(clauses), params


class _Operations:
    """Table operations bound to a single open connection."""

    def __init__(self, db: aiosqlite.Connection):
        self._db = db

    async def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | Sequence[str] | None = None,
        ascending: bool = True,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        """Select rows matching all equality filters."""
        _check_columns(table, (filters or {}).keys())
        if isinstance(order_by, str):
            order_by = [order_by]
        _check_columns(table, order_by or [])

        where, params = _where(filters)
        sql = f"SELECT * FROM {table}{where}"

        direction = "ASC" if ascending else "DESC"
        order_terms = [f"{col} {direction}" for col in (order_by or [])]
        # rowid keeps windows stable when ordering columns tie
        order_terms.append(f"rowid {direction}")
        sql += " ORDER BY " + ", ".join(order_terms)

        if limit is not None or offset is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([limit if limit is not None else -1, offset or 0])

        cursor = await self._db.execute(sql, params)
        rows = await cursor.fetchall()
        return [_row_to_dict(table, row) for row in rows]

    async def select_one(self, table: str, filters: dict[str, Any]) -> dict | None:
        """Select at most one row; None when nothing matches."""
        rows = await self.select(table, filters, limit=1)
        return rows[0] if rows else None

    async def insert(self, table: str, rows: dict | list[dict]) -> list[dict]:
        """Insert one or more rows and return them as stored."""
        if isinstance(rows, dict):
            rows = [rows]

        inserted_ids = []
        for row in rows:
            _check_columns(table, row.keys())
            now = utc_now()
            values = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now}
            # None means "use the column default"
            values.update({k: v for k, v in row.items() if v is not None})
            columns = list(values.keys())
            placeholders = ", ".join("?" for _ in columns)
            await self._db.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                [_to_db(values[c]) for c in columns],
            )
            inserted_ids.append(values["id"])

        stored = []
        for row_id in inserted_ids:
            row = await self.select_one(table, {"id": row_id})
            if row is not None:
                stored.append(row)
        return stored

    async def update(
        self, table: str, values: dict[str, Any], filters: dict[str, Any]
    ) -> list[dict]:
        """Update matching rows and return them after the change."""
        if not filters:
            raise ValueError("update requires at least one filter")
        if not values:
            raise ValueError("update requires at least one value")
        _check_columns(table, values.keys())
        _check_columns(table, filters.keys())

        matched = await self.select(table, filters)
        if not matched:
            return []

        values = {**values}
        values.setdefault("updated_at", utc_now())
        assignments = ", ".join(f"{col} = ?" for col in values)
        where, params = _where(filters)
        await self._db.execute(
            f"UPDATE {table} SET {assignments}{where}",
            [_to_db(v) for v in values.values()] + params,
        )

        updated = []
        for row in matched:
            fresh = await self.select_one(table, {"id": row["id"]})
            if fresh is not None:
                updated.append(fresh)
        return updated

    async def delete(self, table: str, filters: dict[str, Any]) -> int:
        """Delete matching rows. Returns the number of rows removed."""
        if not filters:
            raise ValueError("delete requires at least one filter")
        _check_columns(table, filters.keys())
        where, params = _where(filters)
        cursor = await self._db.execute(f"DELETE FROM {table}{where}", params)
        return cursor.rowcount


class Transaction(_Operations):
    """Operations that commit or roll back together."""


class TableStore:
    """Entry point to the tabular store.

    Each call opens its own connection and commits on success, so every
    request is independently atomic. Use ``transaction()`` when several
    operations must be.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with aiosqlite.connect(self.db_path) as db:
                db.row_factory = aiosqlite.Row
                await db.execute("PRAGMA foreign_keys = ON")
                yield db
        except sqlite3.Error as e:
            logger.warning(f"Store request failed: {e}")
            raise StoreError(str(e)) from e

    async def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | Sequence[str] | None = None,
        ascending: bool = True,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        async with self._connect() as db:
            return await _Operations(db).select(
                table, filters, order_by, ascending, offset, limit
            )

    async def select_one(self, table: str, filters: dict[str, Any]) -> dict | None:
        async with self._connect() as db:
            return await _Operations(db).select_one(table, filters)

    async def insert(self, table: str, rows: dict | list[dict]) -> list[dict]:
        async with self._connect() as db:
            stored = await _Operations(db).insert(table, rows)
            await db.commit()
            return stored

    async def update(
        self, table: str, values: dict[str, Any], filters: dict[str, Any]
    ) -> list[dict]:
        async with self._connect() as db:
            updated = await _Operations(db).update(table, values, filters)
            await db.commit()
            return updated

    async def delete(self, table: str, filters: dict[str, Any]) -> int:
        async with self._connect() as db:
            count = await _Operations(db).delete(table, filters)
            await db.commit()
            return count

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """Run several operations atomically.

        The write lock is taken up front so a read followed by a write
        inside the block cannot interleave with another writer.
        """
        async with self._connect() as db:
            await db.execute("BEGIN IMMEDIATE")
            try:
                yield Transaction(db)
            except BaseException:
                await db.rollback()
                raise
            await db.commit()
