"""User profile model."""

from dataclasses import dataclass
from datetime import datetime

from .base import parse_datetime


@dataclass
class Profile:
    """Public profile of an authenticated user.

    The id is the auth user id. Role flags are only changed through the
    privileged "make admin" operation.
    """

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    phone: str | None = None
    bank_account: str | None = None
    is_admin: bool = False
    is_super_admin: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def display_name(self) -> str:
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or self.email

    @property
    def initial(self) -> str:
        """Single letter used for the avatar fallback."""
        source = self.first_name or self.email or "?"
        return source[:1].upper()

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "avatar_url": self.avatar_url,
            "phone": self.phone,
            "bank_account": self.bank_account,
        }

    @classmethod
    def from_row(cls, row: dict) -> "Profile":
        return cls(
            id=row["id"],
            email=row.get("email") or "",
            first_name=row.get("first_name"),
            last_name=row.get("last_name"),
            avatar_url=row.get("avatar_url"),
            phone=row.get("phone"),
            bank_account=row.get("bank_account"),
            is_admin=bool(row.get("is_admin")),
            is_super_admin=bool(row.get("is_super_admin")),
            created_at=parse_datetime(row.get("created_at")),
            updated_at=parse_datetime(row.get("updated_at")),
        )
