"""
Bearer-token guard for routes that need the signed-in user.

All header problems share one 401 so the response does not hint at what was
wrong with the token.
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, Header, HTTPException, status

from core import db

from . import service

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated.",
        headers=BEARER_CHALLENGE,
    )


def bearer_token(authorization: str | None) -> str:
    scheme, _, token = (authorization or "").strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise _unauthorized()
    return token


async def get_current_user(
    authorization: str | None = Header(default=None),
    pool: Any = Depends(db.get_pool),
) -> dict:
    return await service.get_user_from_access_token(bearer_token(authorization), pool=pool)
