from __future__ import annotations

from sqlalchemy import text as sql_text

from backend.db import get_engine


ACCOUNTS_TABLE = "accounts"
SESSIONS_TABLE = "auth_sessions"
ENTRIES_TABLE = "journal_entries"


async def init_db():
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {ACCOUNTS_TABLE} (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    confirmation_token TEXT,
                    confirmed_at TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {SESSIONS_TABLE} (
                    token TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    expires_at TEXT NOT NULL
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {ENTRIES_TABLE} (
                    user_id TEXT NOT NULL,
                    entry_date TEXT NOT NULL,
                    reflection TEXT NOT NULL DEFAULT '',
                    plan_tomorrow TEXT NOT NULL DEFAULT '',
                    outfit TEXT NOT NULL DEFAULT '',
                    updated_at TEXT,
                    PRIMARY KEY (user_id, entry_date)
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"CREATE INDEX IF NOT EXISTS idx_{SESSIONS_TABLE}_user "
                f"ON {SESSIONS_TABLE} (user_id)"
            )
        )
