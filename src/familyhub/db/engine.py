"""Database engine setup and initialization."""

from pathlib import Path

import aiosqlite

from ..config import settings


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = settings.DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / settings.DATABASE_NAME


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        # Identity service tables
        await db.execute("""
            CREATE TABLE IF NOT EXISTS auth_users (
                id TEXT PRIMARY KEY,
                email TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS auth_sessions (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                expires_at TEXT NOT NULL,
                revoked_at TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY (user_id) REFERENCES auth_users(id) ON DELETE CASCADE
            )
        """)

        # Profiles (id = auth user id)
        await db.execute("""
            CREATE TABLE IF NOT EXISTS profiles (
                id TEXT PRIMARY KEY,
                email TEXT UNIQUE NOT NULL,
                first_name TEXT,
                last_name TEXT,
                avatar_url TEXT,
                phone TEXT,
                bank_account TEXT,
                is_admin INTEGER NOT NULL DEFAULT 0,
                is_super_admin INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        # Activities offered by hosts
        await db.execute("""
            CREATE TABLE IF NOT EXISTS activities (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                location TEXT NOT NULL DEFAULT '',
                category TEXT NOT NULL DEFAULT 'other',
                price REAL NOT NULL DEFAULT 0,
                image_url TEXT,
                age_range TEXT NOT NULL DEFAULT 'all',
                is_premium INTEGER NOT NULL DEFAULT 0,
                status TEXT NOT NULL DEFAULT 'draft',
                creator_id TEXT NOT NULL,
                creator_name TEXT,
                rating REAL NOT NULL DEFAULT 0,
                review_count INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                CHECK (status IN ('draft', 'pending', 'published'))
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS activity_schedules (
                id TEXT PRIMARY KEY,
                activity_id TEXT NOT NULL,
                date TEXT NOT NULL,
                start_time TEXT NOT NULL,
                end_time TEXT NOT NULL,
                available_spots INTEGER NOT NULL,
                booked_spots INTEGER NOT NULL DEFAULT 0,
                price_override REAL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY (activity_id) REFERENCES activities(id) ON DELETE CASCADE,
                CHECK (booked_spots >= 0 AND booked_spots <= available_spots)
            )
        """)

        # Forum
        await db.execute("""
            CREATE TABLE IF NOT EXISTS forum_categories (
                id TEXT PRIMARY KEY,
                name TEXT UNIQUE NOT NULL,
                description TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS forum_posts (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                author_id TEXT NOT NULL,
                author_name TEXT NOT NULL,
                category_id TEXT,
                is_locked INTEGER NOT NULL DEFAULT 0,
                is_pinned INTEGER NOT NULL DEFAULT 0,
                reply_count INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY (category_id) REFERENCES forum_categories(id) ON DELETE SET NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS forum_replies (
                id TEXT PRIMARY KEY,
                post_id TEXT NOT NULL,
                content TEXT NOT NULL,
                author_id TEXT NOT NULL,
                author_name TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY (post_id) REFERENCES forum_posts(id) ON DELETE CASCADE
            )
        """)

        # Host wallet
        await db.execute("""
            CREATE TABLE IF NOT EXISTS host_balances (
                id TEXT PRIMARY KEY,
                user_id TEXT UNIQUE NOT NULL,
                available_balance REAL NOT NULL DEFAULT 0,
                pending_balance REAL NOT NULL DEFAULT 0,
                total_earnings REAL NOT NULL DEFAULT 0,
                last_withdrawal_amount REAL,
                last_withdrawal_date TEXT,
                last_withdrawal_status TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                CHECK (available_balance >= 0)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS withdrawal_requests (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                amount REAL NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                bank_account TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                CHECK (amount > 0),
                CHECK (status IN ('pending', 'completed', 'failed'))
            )
        """)

        # Create indexes for common queries
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_activities_creator
            ON activities(creator_id, created_at)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_activities_status
            ON activities(status)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_schedules_activity
            ON activity_schedules(activity_id, date)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_forum_posts_category
            ON forum_posts(category_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_forum_replies_post
            ON forum_replies(post_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_withdrawals_user
            ON withdrawal_requests(user_id)
        """)

        await db.commit()
