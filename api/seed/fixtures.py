"""
Hard-coded sample rows loaded by `GET /seed`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Literal


@dataclass(frozen=True)
class FixtureUser:
    id: uuid.UUID
    name: str
    email: str
    password: str  # plaintext; hashed at seed time


@dataclass(frozen=True)
class FixtureCustomer:
    id: uuid.UUID
    name: str
    email: str
    image_url: str


@dataclass(frozen=True)
class FixtureInvoice:
    customer_id: uuid.UUID
    amount: int  # cents
    status: Literal["pending", "paid"]
    date: date


@dataclass(frozen=True)
class FixtureRevenue:
    month: str
    revenue: int


USERS: tuple[FixtureUser, ...] = (
    FixtureUser(
        id=uuid.UUID("410544b2-4001-4271-9855-fec4b6a6442a"),
        name="User",
        email="user@nextmail.com",
        password="123456",
    ),
)

CUSTOMERS: tuple[FixtureCustomer, ...] = (
    FixtureCustomer(
        id=uuid.UUID("d6e15727-9fe1-4961-8c5b-ea44a9bd81aa"),
        name="Evil Rabbit",
        email="evil@rabbit.com",
        image_url="/customers/evil-rabbit.png",
    ),
    FixtureCustomer(
        id=uuid.UUID("3958dc9e-712f-4377-85e9-fec4b6a6442a"),
        name="Delba de Oliveira",
        email="delba@oliveira.com",
        image_url="/customers/delba-de-oliveira.png",
    ),
    FixtureCustomer(
        id=uuid.UUID("3958dc9e-742f-4377-85e9-fec4b6a6442a"),
        name="Lee Robinson",
        email="lee@robinson.com",
        image_url="/customers/lee-robinson.png",
    ),
    FixtureCustomer(
        id=uuid.UUID("76d65c26-f784-44a2-ac19-586678f7c2f2"),
        name="Michael Novotny",
        email="michael@novotny.com",
        image_url="/customers/michael-novotny.png",
    ),
    FixtureCustomer(
        id=uuid.UUID("cc27c14a-0acf-4f4a-a6c9-d45682c144b9"),
        name="Amy Burns",
        email="amy@burns.com",
        image_url="/customers/amy-burns.png",
    ),
    FixtureCustomer(
        id=uuid.UUID("13d07535-c59e-4157-a011-f8d2ef4e0cbb"),
        name="Balazs Orban",
        email="balazs@orban.com",
        image_url="/customers/balazs-orban.png",
    ),
)


def _invoice(customer_index: int, amount: int, status: Literal["pending", "paid"], day: str) -> FixtureInvoice:
    return FixtureInvoice(
        customer_id=CUSTOMERS[customer_index].id,
        amount=amount,
        status=status,
        date=date.fromisoformat(day),
    )


INVOICES: tuple[FixtureInvoice, ...] = (
    _invoice(0, 15795, "pending", "2022-12-06"),
    _invoice(1, 20348, "pending", "2022-11-14"),
    _invoice(4, 3040, "paid", "2022-10-29"),
    _invoice(3, 44800, "paid", "2023-09-10"),
    _invoice(5, 34577, "pending", "2023-08-05"),
    _invoice(2, 54246, "pending", "2023-07-16"),
    _invoice(0, 666, "pending", "2023-06-27"),
    _invoice(3, 32545, "paid", "2023-06-09"),
    _invoice(4, 1250, "paid", "2023-06-17"),
    _invoice(5, 8546, "paid", "2023-06-07"),
    _invoice(1, 500, "paid", "2023-08-19"),
    _invoice(5, 8945, "paid", "2023-06-03"),
    _invoice(2, 1000, "paid", "2022-06-05"),
)

REVENUE: tuple[FixtureRevenue, ...] = (
    FixtureRevenue(month="Jan", revenue=2000),
    FixtureRevenue(month="Feb", revenue=1800),
    FixtureRevenue(month="Mar", revenue=2200),
    FixtureRevenue(month="Apr", revenue=2500),
    FixtureRevenue(month="May", revenue=2300),
    FixtureRevenue(month="Jun", revenue=3200),
    FixtureRevenue(month="Jul", revenue=3500),
    FixtureRevenue(month="Aug", revenue=3700),
    FixtureRevenue(month="Sep", revenue=2500),
    FixtureRevenue(month="Oct", revenue=2800),
    FixtureRevenue(month="Nov", revenue=3000),
    FixtureRevenue(month="Dec", revenue=4800),
)
