"""
Auth business logic.

`authorize` is the credential check the login flow is built on. Every
ordinary rejection (bad shape, unknown email, wrong password) returns None so
callers cannot tell which factor failed; the reason only reaches the logs.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def _reject(reason: str) -> None:
    logger.debug("authorize_rejected reason=%s", reason)
    return None


def to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=str(user_row["id"]),
        name=str(user_row["name"]),
        email=str(user_row["email"]),
    )


async def authorize(credentials: Any, *, pool: Any) -> dict | None:
    try:
        parsed = schemas.Credentials.model_validate(credentials, from_attributes=True)
    except ValidationError:
        return _reject("invalid_credentials")

    user_row = await repository.get_user_by_email(pool, parsed.email)
    if user_row is None:
        return _reject("unknown_email")

    passwords_match = await asyncio.to_thread(
        security.verify_password,
        parsed.password,
        str(user_row.get("password") or ""),
    )
    if not passwords_match:
        return _reject("password_mismatch")

    return user_row


async def login(payload: schemas.LoginRequest, *, pool: Any) -> schemas.LoginResponse:
    user_row = await authorize(payload.model_dump(), pool=pool)
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    access_token = security.build_access_token(
        user_id=str(user_row["id"]),
        email=str(user_row["email"]),
    )
    return schemas.LoginResponse(user=to_user_response(user_row), access_token=access_token)


async def get_user_from_access_token(access_token: str, *, pool: Any) -> dict:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token subject.",
        )

    user_row = await repository.get_user_by_id(pool, subject)
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found.",
        )
    return user_row

