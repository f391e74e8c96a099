"""
Shared fixtures.

`FakePool` stands in for an asyncpg pool. It understands exactly the SQL the
app sends (DDL, insert-or-skip inserts, the user lookups, row counts) and
keeps rows in memory. `transaction()` snapshots the tables and restores them
when the block raises.
"""

from __future__ import annotations

import copy
import re
import uuid
from contextlib import asynccontextmanager
from typing import Any

import pytest
from fastapi.testclient import TestClient

UNIQUE_COLUMNS = {
    "users": ("id", "email"),
    "customers": ("id",),
    "invoices": ("id",),
    "revenue": ("month",),
}
GENERATED_IDS = {"users", "customers", "invoices"}

_INSERT_RE = re.compile(r"^INSERT INTO (\w+) \(([^)]*)\) VALUES")
_CONFLICT_RE = re.compile(r"ON CONFLICT \((\w+)\) DO NOTHING")
_CREATE_RE = re.compile(r"^CREATE TABLE IF NOT EXISTS (\w+)")
_COUNT_RE = re.compile(r"^SELECT count\(\*\) AS n FROM (\w+)$")


def _normalize(sql: str) -> str:
    return " ".join(sql.split())


class FakeConnection:
    def __init__(self, pool: "FakePool") -> None:
        self._pool = pool

    @asynccontextmanager
    async def transaction(self):
        snapshot = copy.deepcopy(self._pool.tables)
        self._pool.transactions += 1
        try:
            yield
        except BaseException:
            self._pool.tables = snapshot
            self._pool.rollbacks += 1
            raise

    async def execute(self, sql: str, *args: Any) -> str:
        return self._pool._run(sql, args)

    async def executemany(self, sql: str, records: list[tuple]) -> None:
        for args in records:
            self._pool._run(sql, tuple(args))

    async def fetchrow(self, sql: str, *args: Any) -> dict | None:
        rows = self._pool._run(sql, args)
        return rows[0] if rows else None

    async def fetch(self, sql: str, *args: Any) -> list[dict]:
        return self._pool._run(sql, args)


class FakePool(FakeConnection):
    def __init__(self) -> None:
        super().__init__(self)
        self.tables: dict[str, list[dict]] = {}
        self.extensions: set[str] = set()
        self.statements: list[str] = []
        self.fail_on: str | None = None
        self.transactions = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def acquire(self):
        yield FakeConnection(self)

    def rows(self, table: str) -> list[dict]:
        return self.tables.get(table, [])

    def _run(self, sql: str, args: tuple) -> Any:
        sql = _normalize(sql)
        self.statements.append(sql)
        if self.fail_on and self.fail_on in sql:
            raise RuntimeError(f"injected failure: {self.fail_on}")

        if sql.startswith("CREATE EXTENSION"):
            self.extensions.add(sql.split()[-1].strip('"'))
            return "CREATE EXTENSION"

        match = _CREATE_RE.match(sql)
        if match:
            self.tables.setdefault(match.group(1), [])
            return "CREATE TABLE"

        match = _INSERT_RE.match(sql)
        if match:
            return self._insert(sql, match.group(1), match.group(2), args)

        match = _COUNT_RE.match(sql)
        if match:
            return [{"n": len(self._table(match.group(1)))}]

        if sql == "SELECT * FROM users WHERE email = $1":
            return [dict(r) for r in self._table("users") if r["email"] == args[0]]

        if sql == "SELECT id, name, email FROM users WHERE id = $1":
            return [
                {"id": r["id"], "name": r["name"], "email": r["email"]}
                for r in self._table("users")
                if r["id"] == args[0]
            ]

        raise AssertionError(f"FakePool does not understand: {sql}")

    def _table(self, name: str) -> list[dict]:
        if name not in self.tables:
            raise RuntimeError(f'relation "{name}" does not exist')
        return self.tables[name]

    def _insert(self, sql: str, table: str, columns: str, args: tuple) -> str:
        rows = self._table(table)
        row = dict(zip([c.strip() for c in columns.split(",")], args))
        if "id" not in row and table in GENERATED_IDS:
            row["id"] = uuid.uuid4()

        conflict = _CONFLICT_RE.search(sql)
        conflict_column = conflict.group(1) if conflict else None
        for column in UNIQUE_COLUMNS[table]:
            if any(existing.get(column) == row.get(column) for existing in rows):
                if column == conflict_column:
                    return "INSERT 0 0"
                raise RuntimeError(f'duplicate key value violates unique constraint "{table}_{column}_key"')

        rows.append(row)
        return "INSERT 0 1"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    # Minimum cost keeps the suite fast; production default is 10.
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def client(fake_pool):
    from core import db
    from main import app

    app.dependency_overrides[db.get_pool] = lambda: fake_pool
    try:
        # No context manager: the lifespan would try to reach a real database.
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
