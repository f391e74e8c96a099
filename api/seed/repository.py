"""
Seed persistence: schema DDL and fixture inserts.

Every function takes the connection of the caller's transaction. Inserts are
batched with `executemany`; asyncpg pipelines the rows over that one
connection.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

import asyncpg

from core import db


async def ensure_uuid_extension(conn: asyncpg.Connection) -> None:
    await db.execute(conn, 'CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')


async def create_users_table(conn: asyncpg.Connection) -> None:
    await db.execute(
        conn,
        """
        CREATE TABLE IF NOT EXISTS users (
          id UUID DEFAULT uuid_generate_v4() PRIMARY KEY,
          name VARCHAR(255) NOT NULL,
          email TEXT NOT NULL UNIQUE,
          password TEXT NOT NULL
        )
        """,
    )


async def create_customers_table(conn: asyncpg.Connection) -> None:
    await db.execute(
        conn,
        """
        CREATE TABLE IF NOT EXISTS customers (
          id UUID DEFAULT uuid_generate_v4() PRIMARY KEY,
          name VARCHAR(255) NOT NULL,
          email VARCHAR(255) NOT NULL,
          image_url VARCHAR(255) NOT NULL
        )
        """,
    )


async def create_invoices_table(conn: asyncpg.Connection) -> None:
    await db.execute(
        conn,
        """
        CREATE TABLE IF NOT EXISTS invoices (
          id UUID DEFAULT uuid_generate_v4() PRIMARY KEY,
          customer_id UUID NOT NULL,
          amount INT NOT NULL,
          status VARCHAR(255) NOT NULL,
          date DATE NOT NULL
        )
        """,
    )


async def create_revenue_table(conn: asyncpg.Connection) -> None:
    await db.execute(
        conn,
        """
        CREATE TABLE IF NOT EXISTS revenue (
          month VARCHAR(4) NOT NULL UNIQUE,
          revenue INT NOT NULL
        )
        """,
    )


async def insert_users(
    conn: asyncpg.Connection,
    records: list[tuple[uuid.UUID, str, str, str]],
) -> int:
    """
    `records` is [(id, name, email, password_hash), ...]
    """
    if not records:
        return 0
    await conn.executemany(
        """
        INSERT INTO users (id, name, email, password)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT (id) DO NOTHING
        """,
        records,
    )
    return len(records)


async def insert_customers(
    conn: asyncpg.Connection,
    records: list[tuple[uuid.UUID, str, str, str]],
) -> int:
    if not records:
        return 0
    await conn.executemany(
        """
        INSERT INTO customers (id, name, email, image_url)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT (id) DO NOTHING
        """,
        records,
    )
    return len(records)


async def insert_invoices(
    conn: asyncpg.Connection,
    records: list[tuple[uuid.UUID, int, str, date]],
) -> int:
    """
    Invoice ids come from uuid_generate_v4(), so the conflict clause never
    fires and every call adds rows.
    """
    if not records:
        return 0
    await conn.executemany(
        """
        INSERT INTO invoices (customer_id, amount, status, date)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT (id) DO NOTHING
        """,
        records,
    )
    return len(records)


async def insert_revenue(conn: asyncpg.Connection, records: list[tuple[str, int]]) -> int:
    if not records:
        return 0
    await conn.executemany(
        """
        INSERT INTO revenue (month, revenue)
        VALUES ($1, $2)
        ON CONFLICT (month) DO NOTHING
        """,
        records,
    )
    return len(records)


async def count_rows(conn: Any, table: str) -> int:
    if table not in {"users", "customers", "invoices", "revenue"}:
        raise ValueError(f"Unknown seed table: {table}")
    row = await db.fetch_one(conn, f"SELECT count(*) AS n FROM {table}")
    return int((row or {}).get("n", 0))
