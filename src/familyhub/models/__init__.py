"""Data models for familyhub."""

from .activity import Activity, ActivityStatus, Schedule
from .balance import HostBalance, LastWithdrawal, WithdrawalRequest, WithdrawalStatus
from .forum import ForumCategory, ForumPost, ForumReply
from .profile import Profile

__all__ = [
    "Activity",
    "ActivityStatus",
    "ForumCategory",
    "ForumPost",
    "ForumReply",
    "HostBalance",
    "LastWithdrawal",
    "Profile",
    "Schedule",
    "WithdrawalRequest",
    "WithdrawalStatus",
]
