"""
Auth API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from core import db

from . import dependencies, schemas, service

router = APIRouter()


@router.post("/login", response_model=schemas.LoginResponse)
async def login(
    request: schemas.LoginRequest,
    pool: Any = Depends(db.get_pool),
) -> schemas.LoginResponse:
    return await service.login(request, pool=pool)


@router.get("/me", response_model=schemas.UserResponse)
async def me(
    current_user: dict = Depends(dependencies.get_current_user),
) -> schemas.UserResponse:
    return service.to_user_response(current_user)
