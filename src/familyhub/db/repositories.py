"""Data access layer for familyhub."""

from decimal import Decimal

from ..errors import InsufficientBalanceError, NotFoundError, ValidationError
from ..models.activity import Activity, ActivityStatus, Schedule
from ..models.balance import HostBalance, WithdrawalRequest, WithdrawalStatus
from ..models.base import decimal_to_store, to_decimal
from ..models.forum import ForumCategory, ForumPost, ForumReply
from ..models.profile import Profile
from .store import TableStore, utc_now


class ActivityRepository:
    """Repository for activities."""

    table = "activities"

    def __init__(self, store: TableStore | None = None):
        self.store = store or TableStore()

    async def list_by_creator(
        self, creator_id: str, page: int = 1, page_size: int = 10
    ) -> list[Activity]:
        """One window of a host's activities, newest first."""
        rows = await self.store.select(
            self.table,
            {"creator_id": creator_id},
            order_by="created_at",
            ascending=False,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return [Activity.from_row(row) for row in rows]

    async def list_published(self, page: int = 1, page_size: int = 10) -> list[Activity]:
        """One window of the public catalog, newest first."""
        rows = await self.store.select(
            self.table,
            {"status": ActivityStatus.PUBLISHED.value},
            order_by="created_at",
            ascending=False,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return [Activity.from_row(row) for row in rows]

    async def get(self, activity_id: str) -> Activity | None:
        """Get an activity by ID."""
        row = await self.store.select_one(self.table, {"id": activity_id})
        if row is None:
            return None
        return Activity.from_row(row)

    async def get_owned(self, activity_id: str, creator_id: str) -> Activity | None:
        """Get an activity only if it belongs to ``creator_id``."""
        row = await self.store.select_one(
            self.table, {"id": activity_id, "creator_id": creator_id}
        )
        if row is None:
            return None
        return Activity.from_row(row)

    async def create(self, activity: Activity) -> Activity:
        """Insert an activity and return it with its assigned id."""
        rows = await self.store.insert(self.table, activity.to_dict())
        return Activity.from_row(rows[0])

    async def update_owned(self, activity_id: str, creator_id: str, values: dict) -> Activity:
        """Update an activity scoped to its creator."""
        rows = await self.store.update(
            self.table, values, {"id": activity_id, "creator_id": creator_id}
        )
        if not rows:
            raise NotFoundError(f"Activity {activity_id} not found")
        return Activity.from_row(rows[0])


class ScheduleRepository:
    """Repository for activity schedules."""

    table = "activity_schedules"

    def __init__(self, store: TableStore | None = None):
        self.store = store or TableStore()

    async def list_for_activity(self, activity_id: str) -> list[Schedule]:
        """All schedules of an activity, earliest first."""
        rows = await self.store.select(
            self.table,
            {"activity_id": activity_id},
            order_by=["date", "start_time"],
            ascending=True,
        )
        return [Schedule.from_row(row) for row in rows]

    async def create(self, schedule: Schedule) -> Schedule:
        rows = await self.store.insert(self.table, schedule.to_dict())
        return Schedule.from_row(rows[0])


class ProfileRepository:
    """Repository for user profiles."""

    table = "profiles"

    def __init__(self, store: TableStore | None = None):
        self.store = store or TableStore()

    async def get(self, user_id: str) -> Profile | None:
        row = await self.store.select_one(self.table, {"id": user_id})
        if row is None:
            return None
        return Profile.from_row(row)

    async def get_by_email(self, email: str) -> Profile | None:
        row = await self.store.select_one(self.table, {"email": email.strip().lower()})
        if row is None:
            return None
        return Profile.from_row(row)

    async def create(self, user_id: str, email: str) -> Profile:
        rows = await self.store.insert(
            self.table, {"id": user_id, "email": email.strip().lower()}
        )
        return Profile.from_row(rows[0])

    async def update(self, user_id: str, values: dict) -> Profile:
        """Partial update of a profile."""
        rows = await self.store.update(self.table, values, {"id": user_id})
        if not rows:
            raise NotFoundError(f"Profile {user_id} not found")
        return Profile.from_row(rows[0])

    async def set_roles(
        self, user_id: str, is_admin: bool | None = None, is_super_admin: bool | None = None
    ) -> Profile:
        """Set role flags. Only the flags passed are changed."""
        values = {}
        if is_admin is not None:
            values["is_admin"] = is_admin
        if is_super_admin is not None:
            values["is_super_admin"] = is_super_admin
        if not values:
            raise ValueError("No role flag given")
        return await self.update(user_id, values)


class ForumRepository:
    """Repository for forum categories, posts and replies."""

    def __init__(self, store: TableStore | None = None):
        self.store = store or TableStore()

    async def list_categories(self) -> list[ForumCategory]:
        rows = await self.store.select("forum_categories", order_by="created_at")
        return [ForumCategory.from_row(row) for row in rows]

    async def create_category(self, name: str, description: str | None = None) -> ForumCategory:
        rows = await self.store.insert(
            "forum_categories", {"name": name, "description": description}
        )
        return ForumCategory.from_row(rows[0])

    async def list_posts(self, category_id: str | None = None) -> list[ForumPost]:
        """All posts, newest first, optionally within one category."""
        filters = {"category_id": category_id} if category_id else None
        rows = await self.store.select(
            "forum_posts", filters, order_by="created_at", ascending=False
        )
        return [ForumPost.from_row(row) for row in rows]

    async def get_post(self, post_id: str) -> ForumPost | None:
        row = await self.store.select_one("forum_posts", {"id": post_id})
        if row is None:
            return None
        return ForumPost.from_row(row)

    async def create_post(self, post: ForumPost) -> ForumPost:
        rows = await self.store.insert("forum_posts", post.to_dict())
        return ForumPost.from_row(rows[0])

    async def set_flags(
        self, post_id: str, is_locked: bool | None = None, is_pinned: bool | None = None
    ) -> ForumPost:
        """Update moderation flags and return the stored post."""
        values = {}
        if is_locked is not None:
            values["is_locked"] = is_locked
        if is_pinned is not None:
            values["is_pinned"] = is_pinned
        if not values:
            raise ValueError("No flag given")
        rows = await self.store.update("forum_posts", values, {"id": post_id})
        if not rows:
            raise NotFoundError(f"Post {post_id} not found")
        return ForumPost.from_row(rows[0])

    async def delete_post(self, post_id: str) -> None:
        deleted = await self.store.delete("forum_posts", {"id": post_id})
        if deleted == 0:
            raise NotFoundError(f"Post {post_id} not found")

    async def list_replies(self, post_id: str) -> list[ForumReply]:
        """Replies of a post, oldest first."""
        rows = await self.store.select(
            "forum_replies", {"post_id": post_id}, order_by="created_at", ascending=True
        )
        return [ForumReply.from_row(row) for row in rows]

    async def add_reply(self, reply: ForumReply) -> ForumReply:
        """Add a reply and bump the post's reply count atomically.

        Locked posts refuse new replies.
        """
        async with self.store.transaction() as tx:
            post = await tx.select_one("forum_posts", {"id": reply.post_id})
            if post is None:
                raise NotFoundError(f"Post {reply.post_id} not found")
            if post["is_locked"]:
                raise ValidationError("This thread is locked")

            rows = await tx.insert(
                "forum_replies",
                {
                    "post_id": reply.post_id,
                    "content": reply.content,
                    "author_id": reply.author_id,
                    "author_name": reply.author_name,
                },
            )
            await tx.update(
                "forum_posts",
                {"reply_count": int(post["reply_count"]) + 1},
                {"id": reply.post_id},
            )
        return ForumReply.from_row(rows[0])


class BalanceRepository:
    """Repository for host balances and withdrawal requests."""

    def __init__(self, store: TableStore | None = None):
        self.store = store or TableStore()

    async def get(self, user_id: str) -> HostBalance | None:
        row = await self.store.select_one("host_balances", {"user_id": user_id})
        if row is None:
            return None
        return HostBalance.from_row(row)

    async def ensure(self, user_id: str) -> HostBalance:
        """Get the balance row, creating an empty one if missing."""
        existing = await self.get(user_id)
        if existing:
            return existing
        rows = await self.store.insert("host_balances", {"user_id": user_id})
        return HostBalance.from_row(rows[0])

    async def request_withdrawal(
        self, user_id: str, amount: Decimal, bank_account: str | None
    ) -> WithdrawalRequest:
        """Create a pending withdrawal request.

        The amount is checked against the stored balance inside the same
        transaction that reserves it, so a stale client-side balance cannot
        overdraw the account.
        """
        if amount <= 0:
            raise ValidationError("Please enter a valid amount")

        async with self.store.transaction() as tx:
            row = await tx.select_one("host_balances", {"user_id": user_id})
            if row is None:
                raise NotFoundError(f"No balance found for user {user_id}")

            available = to_decimal(row["available_balance"])
            if amount > available:
                raise InsufficientBalanceError("You do not have enough available balance")

            requests = await tx.insert(
                "withdrawal_requests",
                {
                    "user_id": user_id,
                    "amount": decimal_to_store(amount),
                    "status": WithdrawalStatus.PENDING.value,
                    "bank_account": bank_account,
                },
            )
            now = utc_now()
            await tx.update(
                "host_balances",
                {
                    "available_balance": decimal_to_store(available - amount),
                    "pending_balance": decimal_to_store(
                        to_decimal(row["pending_balance"]) + amount
                    ),
                    "last_withdrawal_amount": decimal_to_store(amount),
                    "last_withdrawal_date": now,
                    "last_withdrawal_status": WithdrawalStatus.PENDING.value,
                },
                {"user_id": user_id},
            )
        return WithdrawalRequest.from_row(requests[0])

    async def list_withdrawals(self, user_id: str) -> list[WithdrawalRequest]:
        rows = await self.store.select(
            "withdrawal_requests", {"user_id": user_id}, order_by="created_at", ascending=False
        )
        return [WithdrawalRequest.from_row(row) for row in rows]
