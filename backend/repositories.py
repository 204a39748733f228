from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from sqlalchemy import text as sql_text
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from backend.db import get_sessionmaker
from backend.db_init import ACCOUNTS_TABLE, SESSIONS_TABLE, ENTRIES_TABLE

ENTRY_FIELDS = ["reflection", "plan_tomorrow", "outfit"]

ENTRY_SELECT_COLUMNS = [
    "entry_date",
    *ENTRY_FIELDS,
    "updated_at",
]


class DuplicateAccountError(Exception):
    pass


def _new_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _normalize_entry_row(row) -> dict:
    if not row:
        return {}
    payload = dict(row)
    for key in ENTRY_FIELDS:
        payload[key] = payload.get(key) or ""
    value = payload.get("updated_at")
    if value is not None and hasattr(value, "isoformat"):
        payload["updated_at"] = value.isoformat()
    return payload


def normalize_email(email: str) -> str:
    return str(email or "").strip().lower()


async def create_account(email: str, password: str, require_confirmation: bool = True) -> dict:
    clean_email = normalize_email(email)
    now_iso = _utcnow().isoformat()
    account = {
        "id": _new_id(),
        "email": clean_email,
        "password_hash": generate_password_hash(password),
        "confirmation_token": secrets.token_urlsafe(24) if require_confirmation else None,
        "confirmed_at": None if require_confirmation else now_iso,
        "created_at": now_iso,
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        try:
            await session.execute(
                sql_text(
                    f"""
                    INSERT INTO {ACCOUNTS_TABLE}
                        (id, email, password_hash, confirmation_token, confirmed_at, created_at)
                    VALUES
                        (:id, :email, :password_hash, :confirmation_token, :confirmed_at, :created_at)
                    """
                ),
                account,
            )
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            raise DuplicateAccountError(clean_email) from exc
    return account


async def get_account_by_email(email: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT id, email, password_hash, confirmation_token, confirmed_at, created_at "
                f"FROM {ACCOUNTS_TABLE} WHERE email = :email"
            ),
            {"email": normalize_email(email)},
        )).mappings().fetchone()
    return dict(row) if row else {}


async def confirm_account(token: str) -> bool:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(
                f"""
                UPDATE {ACCOUNTS_TABLE}
                SET confirmed_at = :confirmed_at, confirmation_token = NULL
                WHERE confirmation_token = :token
                """
            ),
            {"token": token, "confirmed_at": _utcnow().isoformat()},
        )
        updated = result.rowcount
        await session.commit()
    return bool(updated)


def verify_password(account: dict, password: str) -> bool:
    if not account or not account.get("password_hash"):
        return False
    return check_password_hash(account["password_hash"], password)


async def create_session(user_id: str, ttl_hours: int) -> dict:
    now = _utcnow()
    payload = {
        "token": secrets.token_urlsafe(32),
        "user_id": user_id,
        "created_at": now.isoformat(),
        "expires_at": (now + timedelta(hours=ttl_hours)).isoformat(),
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {SESSIONS_TABLE} (token, user_id, created_at, expires_at)
                VALUES (:token, :user_id, :created_at, :expires_at)
                """
            ),
            payload,
        )
        await session.commit()
    return payload


async def get_session_user(token: str) -> dict:
    """Resolve a bearer token to ``{"user_id", "email"}``; expired tokens resolve to ``{}``."""
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"""
                SELECT s.user_id AS user_id, s.expires_at AS expires_at, a.email AS email
                FROM {SESSIONS_TABLE} s
                JOIN {ACCOUNTS_TABLE} a ON a.id = s.user_id
                WHERE s.token = :token
                """
            ),
            {"token": token},
        )).mappings().fetchone()
    if not row:
        return {}
    expires_at = _parse_timestamp(row["expires_at"])
    if expires_at is None or expires_at <= _utcnow():
        await delete_session(token)
        return {}
    return {"user_id": row["user_id"], "email": row["email"]}


async def delete_session(token: str) -> None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(f"DELETE FROM {SESSIONS_TABLE} WHERE token = :token"),
            {"token": token},
        )
        await session.commit()


async def get_entry(user_id: str, day_iso: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT {', '.join(ENTRY_SELECT_COLUMNS)} FROM {ENTRIES_TABLE} "
                "WHERE user_id = :user_id AND entry_date = :entry_date"
            ),
            {"user_id": user_id, "entry_date": day_iso},
        )).mappings().fetchone()
    return _normalize_entry_row(row)


async def list_entries(user_id: str, start_iso: str | None = None, end_iso: str | None = None) -> list[dict]:
    clauses = ["user_id = :user_id"]
    params = {"user_id": user_id}
    if start_iso:
        clauses.append("entry_date >= :start_date")
        params["start_date"] = start_iso
    if end_iso:
        clauses.append("entry_date <= :end_date")
        params["end_date"] = end_iso
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT {', '.join(ENTRY_SELECT_COLUMNS)}
                FROM {ENTRIES_TABLE}
                WHERE {' AND '.join(clauses)}
                ORDER BY entry_date
                """
            ),
            params,
        )).mappings().all()
    return [_normalize_entry_row(row) for row in rows]


async def upsert_entry(user_id: str, day_iso: str, fields: dict, updated_at: str | None = None) -> dict:
    payload = {key: str(fields.get(key) or "") for key in ENTRY_FIELDS}
    payload["updated_at"] = updated_at or _utcnow().isoformat()
    columns = ["user_id", "entry_date"] + list(payload.keys())
    placeholders = ", ".join([f":{col}" for col in columns])
    updates = ", ".join([f"{col}=EXCLUDED.{col}" for col in payload.keys()])
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {ENTRIES_TABLE} ({', '.join(columns)})
                VALUES ({placeholders})
                ON CONFLICT(user_id, entry_date) DO UPDATE SET {updates}
                """
            ),
            {"user_id": user_id, "entry_date": day_iso, **payload},
        )
        await session.commit()
    return {"entry_date": day_iso, **payload}

