"""Host balance and withdrawal models."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from .base import parse_datetime, to_decimal


class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class LastWithdrawal:
    amount: Decimal
    date: datetime | None
    status: WithdrawalStatus


@dataclass
class HostBalance:
    """Earnings summary for a host. Computed by the store, read-only here."""

    user_id: str
    available_balance: Decimal = Decimal("0")
    pending_balance: Decimal = Decimal("0")
    total_earnings: Decimal = Decimal("0")
    last_withdrawal: LastWithdrawal | None = None
    id: str | None = None

    @classmethod
    def empty(cls, user_id: str) -> "HostBalance":
        return cls(user_id=user_id)

    @classmethod
    def from_row(cls, row: dict) -> "HostBalance":
        last = None
        if row.get("last_withdrawal_amount") is not None:
            last = LastWithdrawal(
                amount=to_decimal(row["last_withdrawal_amount"]),
                date=parse_datetime(row.get("last_withdrawal_date")),
                status=WithdrawalStatus(row.get("last_withdrawal_status") or "pending"),
            )
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            available_balance=to_decimal(row.get("available_balance")),
            pending_balance=to_decimal(row.get("pending_balance")),
            total_earnings=to_decimal(row.get("total_earnings")),
            last_withdrawal=last,
        )


@dataclass
class WithdrawalRequest:
    user_id: str
    amount: Decimal
    bank_account: str | None
    status: WithdrawalStatus = WithdrawalStatus.PENDING
    id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict) -> "WithdrawalRequest":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            amount=to_decimal(row["amount"]),
            bank_account=row.get("bank_account"),
            status=WithdrawalStatus(row["status"]),
            created_at=parse_datetime(row.get("created_at")),
        )
