"""
Seed API endpoint.

Development utility: errors are returned verbatim in the response body.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from core import db

from . import service

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/seed")
async def seed(pool: Any = Depends(db.get_pool)) -> Any:
    try:
        await service.seed_database(pool)
    except Exception as exc:
        logger.exception("seed_failed")
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return {"message": "Database seeded successfully"}
