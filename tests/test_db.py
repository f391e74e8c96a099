import asyncio

import pytest

from core import db


def test_sslmode_is_stripped_from_url():
    url = "postgres://u:p@host:5432/app?sslmode=require&application_name=seed"
    assert db._sanitize_database_url(url) == "postgres://u:p@host:5432/app?application_name=seed"


def test_url_without_query_is_untouched():
    assert db._sanitize_database_url("postgres://host/app") == "postgres://host/app"


def test_postgres_url_wins_over_database_url(monkeypatch):
    monkeypatch.setenv("POSTGRES_URL", "postgres://primary/app")
    monkeypatch.setenv("DATABASE_URL", "postgres://fallback/app")
    assert db.database_url() == "postgres://primary/app"


def test_database_url_fallback(monkeypatch):
    monkeypatch.delenv("POSTGRES_URL", raising=False)
    monkeypatch.setenv("DATABASE_URL", "postgres://fallback/app")
    assert db.database_url() == "postgres://fallback/app"


def test_missing_url_raises(monkeypatch):
    monkeypatch.delenv("POSTGRES_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(db.DatabaseConfigError):
        db.database_url()


def test_create_pool_requires_tls(monkeypatch):
    captured = {}

    async def fake_create_pool(**kwargs):
        captured.update(kwargs)
        return "pool"

    monkeypatch.setattr(db.asyncpg, "create_pool", fake_create_pool)
    monkeypatch.setenv("POSTGRES_URL", "postgres://u:p@host/app?sslmode=disable")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "9")

    assert asyncio.run(db.create_pool()) == "pool"
    assert captured["ssl"] == "require"
    assert captured["dsn"] == "postgres://u:p@host/app"
    assert captured["max_size"] == 9


def test_close_pool_tolerates_none():
    asyncio.run(db.close_pool(None))
