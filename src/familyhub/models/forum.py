"""Forum models."""

from dataclasses import dataclass
from datetime import datetime

from .base import parse_datetime


@dataclass
class ForumCategory:
    name: str
    description: str | None = None
    id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict) -> "ForumCategory":
        return cls(
            id=row["id"],
            name=row["name"],
            description=row.get("description"),
            created_at=parse_datetime(row.get("created_at")),
        )


@dataclass
class ForumPost:
    """A forum thread opener.

    ``reply_count`` is denormalized and maintained by the store when a
    reply is added.
    """

    title: str
    content: str
    author_id: str
    author_name: str
    category_id: str | None = None
    is_locked: bool = False
    is_pinned: bool = False
    reply_count: int = 0
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "content": self.content,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "category_id": self.category_id,
            "is_locked": self.is_locked,
            "is_pinned": self.is_pinned,
        }

    @classmethod
    def from_row(cls, row: dict) -> "ForumPost":
        return cls(
            id=row["id"],
            title=row["title"],
            content=row.get("content") or "",
            author_id=row["author_id"],
            author_name=row.get("author_name") or "",
            category_id=row.get("category_id"),
            is_locked=bool(row.get("is_locked")),
            is_pinned=bool(row.get("is_pinned")),
            reply_count=int(row.get("reply_count") or 0),
            created_at=parse_datetime(row.get("created_at")),
            updated_at=parse_datetime(row.get("updated_at")),
        )


@dataclass
class ForumReply:
    post_id: str
    content: str
    author_id: str
    author_name: str
    id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict) -> "ForumReply":
        return cls(
            id=row["id"],
            post_id=row["post_id"],
            content=row.get("content") or "",
            author_id=row["author_id"],
            author_name=row.get("author_name") or "",
            created_at=parse_datetime(row.get("created_at")),
        )
