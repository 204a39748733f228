from __future__ import annotations

from typing import Optional, List

from pydantic import BaseModel


class Credentials(BaseModel):
    email: str
    password: str


class SignUpResponse(BaseModel):
    user_id: str
    email: str
    confirmation_required: bool


class ConfirmPayload(BaseModel):
    token: str


class SignInResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: str
    user_id: str
    email: str


class SessionResponse(BaseModel):
    user_id: str
    email: str


class EntryFields(BaseModel):
    reflection: str = ""
    plan_tomorrow: str = ""
    outfit: str = ""


class EntryUpsert(EntryFields):
    updated_at: Optional[str] = None


class EntryResponse(EntryFields):
    entry_date: str
    updated_at: Optional[str] = None


class EntriesResponse(BaseModel):
    items: List[EntryResponse]
