"""
Fixture seeding.

One call provisions the schema and loads the fixture set inside a single
transaction:

- users (passwords hashed with bcrypt before the insert)
- customers
- invoices
- revenue

Tables are seeded in that order. Rows that already exist are skipped for
users, customers (by id) and revenue (by month). Invoices have store
generated ids, so re-seeding adds another copy of every fixture invoice.
Any failure rolls back the whole run.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Any

import asyncpg

from auth import security
from core.concurrency import bounded_gather

from . import fixtures, repository

DEFAULT_HASH_CONCURRENCY = 4

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def hash_concurrency() -> int:
    value = _env_int("SEED_HASH_CONCURRENCY", DEFAULT_HASH_CONCURRENCY)
    return value if value > 0 else DEFAULT_HASH_CONCURRENCY


@dataclass
class SeedResult:
    # table -> rows sent / rows present after the run
    attempted: dict[str, int] = field(default_factory=dict)
    totals: dict[str, int] = field(default_factory=dict)


async def _hash_fixture_password(user: fixtures.FixtureUser) -> str:
    return await asyncio.to_thread(security.hash_password, user.password)


async def seed_users(conn: asyncpg.Connection) -> int:
    logger.info("seed_table_start table=users")
    await repository.ensure_uuid_extension(conn)
    await repository.create_users_table(conn)

    hashes = await bounded_gather(_hash_fixture_password, fixtures.USERS, limit=hash_concurrency())
    records = [
        (user.id, user.name, user.email, password_hash)
        for user, password_hash in zip(fixtures.USERS, hashes)
    ]
    return await repository.insert_users(conn, records)


async def seed_customers(conn: asyncpg.Connection) -> int:
    logger.info("seed_table_start table=customers")
    await repository.ensure_uuid_extension(conn)
    await repository.create_customers_table(conn)

    records = [(c.id, c.name, c.email, c.image_url) for c in fixtures.CUSTOMERS]
    return await repository.insert_customers(conn, records)


async def seed_invoices(conn: asyncpg.Connection) -> int:
    logger.info("seed_table_start table=invoices")
    await repository.ensure_uuid_extension(conn)
    await repository.create_invoices_table(conn)

    records = [(i.customer_id, i.amount, i.status, i.date) for i in fixtures.INVOICES]
    return await repository.insert_invoices(conn, records)


async def seed_revenue(conn: asyncpg.Connection) -> int:
    logger.info("seed_table_start table=revenue")
    await repository.create_revenue_table(conn)

    records = [(r.month, r.revenue) for r in fixtures.REVENUE]
    return await repository.insert_revenue(conn, records)


SEED_STEPS = (
    ("users", seed_users),
    ("customers", seed_customers),
    ("invoices", seed_invoices),
    ("revenue", seed_revenue),
)


async def seed_database(pool: Any) -> SeedResult:
    result = SeedResult()

    logger.info("seed_transaction_start")
    async with pool.acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction():
            for table, step in SEED_STEPS:
                result.attempted[table] = await step(conn)
                result.totals[table] = await repository.count_rows(conn, table)
                logger.info(
                    "seed_table_complete table=%s attempted=%s total=%s",
                    table,
                    result.attempted[table],
                    result.totals[table],
                )

    logger.info("seed_transaction_complete totals=%s", result.totals)
    return result
