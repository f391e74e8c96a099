import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auth import router as auth_router
from core import db
from seed import router as seed_router

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def log_level() -> int:
    raw = os.environ.get("LOG_LEVEL", "").strip().upper()
    if not raw:
        return logging.INFO
    # getLevelName maps known names to ints and anything else to a string.
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO


logging.getLogger().setLevel(log_level())


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [x.strip() for x in raw.split(",") if x.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process, handed to routes via `db.get_pool`.
    app.state.db_pool = await db.create_pool()
    try:
        yield
    finally:
        await db.close_pool(app.state.db_pool)
        app.state.db_pool = None


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(seed_router.router, tags=["seed"])
app.include_router(auth_router.router, tags=["auth"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
