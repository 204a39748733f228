from __future__ import annotations

from fastapi import Header, HTTPException

from backend import repositories


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    return token.strip()


async def require_token(authorization: str | None = Header(default=None)) -> str:
    return _bearer_token(authorization)


async def require_session_user(authorization: str | None = Header(default=None)) -> dict:
    token = _bearer_token(authorization)
    user = await repositories.get_session_user(token)
    if not user:
        raise HTTPException(status_code=401, detail="Session expired or invalid")
    return user
