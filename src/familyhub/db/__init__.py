"""Database layer for familyhub."""

from .engine import get_db_path, init_db
from .repositories import (
    ActivityRepository,
    BalanceRepository,
    ForumRepository,
    ProfileRepository,
    ScheduleRepository,
)
from .store import TableStore, Transaction

__all__ = [
    "ActivityRepository",
    "BalanceRepository",
    "ForumRepository",
    "get_db_path",
    "init_db",
    "ProfileRepository",
    "ScheduleRepository",
    "TableStore",
    "Transaction",
]
