"""Activity (experience) and schedule models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from .base import decimal_to_store, parse_datetime, to_decimal


class ActivityStatus(str, Enum):
    """Publication status of an activity."""

    DRAFT = "draft"
    PENDING = "pending"  # Waiting for review
    PUBLISHED = "published"

    @property
    def label(self) -> str:
        return {
            ActivityStatus.DRAFT: "Draft",
            ActivityStatus.PENDING: "Pending",
            ActivityStatus.PUBLISHED: "Published",
        }[self]


@dataclass
class Activity:
    """A bookable family activity offered by a host."""

    title: str
    price: Decimal
    creator_id: str
    description: str = ""
    location: str = ""
    category: str = "other"
    age_range: str = "all"  # Free text, e.g. "3-6 years"
    image_url: str | None = None
    is_premium: bool = False
    status: ActivityStatus = ActivityStatus.DRAFT
    creator_name: str | None = None
    rating: float = 0.0
    review_count: int = 0
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to a row payload for the store."""
        return {
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "category": self.category,
            "price": decimal_to_store(self.price),
            "image_url": self.image_url,
            "age_range": self.age_range,
            "is_premium": self.is_premium,
            "status": self.status.value,
            "creator_id": self.creator_id,
            "creator_name": self.creator_name,
        }

    @classmethod
    def from_row(cls, row: dict) -> "Activity":
        """Create from a store row."""
        return cls(
            id=row["id"],
            title=row["title"],
            description=row.get("description") or "",
            location=row.get("location") or "",
            category=row.get("category") or "other",
            price=to_decimal(row.get("price")),
            image_url=row.get("image_url"),
            age_range=row.get("age_range") or "all",
            is_premium=bool(row.get("is_premium")),
            status=ActivityStatus(row.get("status") or ActivityStatus.DRAFT.value),
            creator_id=row["creator_id"],
            creator_name=row.get("creator_name"),
            rating=float(row.get("rating") or 0),
            review_count=int(row.get("review_count") or 0),
            created_at=parse_datetime(row.get("created_at")),
            updated_at=parse_datetime(row.get("updated_at")),
        )


@dataclass
class Schedule:
    """A dated session of an activity with a fixed capacity.

    ``booked_spots`` never exceeds ``available_spots``; the store enforces it.
    """

    activity_id: str
    date: date
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    available_spots: int
    booked_spots: int = 0
    price_override: Decimal | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def remaining_spots(self) -> int:
        return max(self.available_spots - self.booked_spots, 0)

    def effective_price(self, base_price: Decimal) -> Decimal:
        """Price for this session, falling back to the activity base price."""
        if self.price_override is not None:
            return self.price_override
        return base_price

    @property
    def time_range(self) -> str:
        return f"{self.start_time[:5]} - {self.end_time[:5]}"

    def to_dict(self) -> dict:
        return {
            "activity_id": self.activity_id,
            "date": self.date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "available_spots": self.available_spots,
            "booked_spots": self.booked_spots,
            "price_override": decimal_to_store(self.price_override),
        }

    @classmethod
    def from_row(cls, row: dict) -> "Schedule":
        return cls(
            id=row["id"],
            activity_id=row["activity_id"],
            date=date.fromisoformat(row["date"]),
            start_time=row["start_time"],
            end_time=row["end_time"],
            available_spots=int(row["available_spots"]),
            booked_spots=int(row.get("booked_spots") or 0),
            price_override=to_decimal(row.get("price_override"), default=None),
            created_at=parse_datetime(row.get("created_at")),
            updated_at=parse_datetime(row.get("updated_at")),
        )
