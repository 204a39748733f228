from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.auth import require_session_user, require_token
from backend import repositories
from backend.schemas import (
    ConfirmPayload,
    Credentials,
    SessionResponse,
    SignInResponse,
    SignUpResponse,
)
from backend.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _validate_credentials(payload: Credentials) -> str:
    settings = get_settings()
    email = repositories.normalize_email(payload.email)
    if not email or "@" not in email:
        raise HTTPException(status_code=400, detail="Please enter a valid email address.")
    if len(payload.password or "") < settings.password_min_length:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {settings.password_min_length} characters.",
        )
    if not settings.email_allowed(email):
        raise HTTPException(status_code=403, detail="User not allowed")
    return email


@router.post("/v1/auth/signup", response_model=SignUpResponse)
async def sign_up(payload: Credentials):
    settings = get_settings()
    email = _validate_credentials(payload)
    try:
        account = await repositories.create_account(
            email, payload.password, require_confirmation=settings.require_email_confirmation
        )
    except repositories.DuplicateAccountError:
        raise HTTPException(status_code=409, detail="User already registered")
    logger.info("Account created for %s", email)
    if account["confirmation_token"]:
        # Stands in for the confirmation mail; the code never leaves the server.
        logger.info("Confirmation code for %s: %s", email, account["confirmation_token"])
    return {
        "user_id": account["id"],
        "email": account["email"],
        "confirmation_required": account["confirmed_at"] is None,
    }


@router.post("/v1/auth/confirm")
async def confirm(payload: ConfirmPayload):
    if not await repositories.confirm_account(payload.token):
        raise HTTPException(status_code=400, detail="Invalid or already used confirmation token")
    return {"ok": True}


@router.post("/v1/auth/signin", response_model=SignInResponse)
async def sign_in(payload: Credentials):
    settings = get_settings()
    account = await repositories.get_account_by_email(payload.email)
    if not repositories.verify_password(account, payload.password):
        raise HTTPException(status_code=401, detail="Invalid login credentials")
    if not settings.email_allowed(account["email"]):
        raise HTTPException(status_code=403, detail="User not allowed")
    if not account.get("confirmed_at"):
        raise HTTPException(status_code=403, detail="Email not confirmed")
    session = await repositories.create_session(account["id"], settings.session_ttl_hours)
    return {
        "access_token": session["token"],
        "expires_at": session["expires_at"],
        "user_id": account["id"],
        "email": account["email"],
    }


@router.post("/v1/auth/signout")
async def sign_out(token: str = Depends(require_token)):
    await repositories.delete_session(token)
    return {"ok": True}


@router.get("/v1/auth/session", response_model=SessionResponse)
async def get_session(user: dict = Depends(require_session_user)):
    return user
