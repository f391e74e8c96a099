"""
Auth persistence helpers.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from core import db

logger = logging.getLogger(__name__)


class UserLookupError(RuntimeError):
    pass


async def get_user_by_email(conn: Any, email: str) -> dict | None:
    """
    Exact-match lookup. Infrastructure errors surface as UserLookupError so
    callers can tell them apart from "no such user".
    """
    try:
        return await db.fetch_one(
            conn,
            """
            SELECT *
            FROM users
            WHERE email = $1
            """,
            email,
        )
    except Exception as exc:
        logger.exception("user_lookup_failed")
        raise UserLookupError("Failed to fetch user.") from exc


async def get_user_by_id(conn: Any, user_id: str) -> dict | None:
    try:
        parsed = uuid.UUID(str(user_id))
    except ValueError:
        return None

    try:
        return await db.fetch_one(
            conn,
            """
            SELECT id, name, email
            FROM users
            WHERE id = $1
            """,
            parsed,
        )
    except Exception as exc:
        logger.exception("user_lookup_failed user_id=%s", user_id)
        raise UserLookupError("Failed to fetch user.") from exc
