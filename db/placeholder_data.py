"""
Fixed demo dataset for the dashboard.

Rows reference each other by id only (invoices -> customers); the seeder does not
declare a foreign key, so keep customer ids here in sync by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    # Plaintext; only the bcrypt hash is ever written to the database.
    password: str


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    email: str
    image_url: str


@dataclass(frozen=True)
class Invoice:
    customer_id: str
    amount: int  # cents
    status: str  # pending | paid
    date: date


@dataclass(frozen=True)
class Revenue:
    month: str
    revenue: int


@dataclass(frozen=True)
class SeedData:
    users: list[User] = field(default_factory=list)
    customers: list[Customer] = field(default_factory=list)
    invoices: list[Invoice] = field(default_factory=list)
    revenue: list[Revenue] = field(default_factory=list)


USERS: list[User] = [
    User(
        id="410544b2-4001-4271-9855-fec4b6a6442a",
        name="User",
        email="user@nextmail.com",
        password="123456",
    ),
]

CUSTOMERS: list[Customer] = [
    Customer(
        id="d6e15727-9fe1-4961-8c5b-ea44a9bd81aa",
        name="Evil Rabbit",
        email="evil@rabbit.com",
        image_url="/customers/evil-rabbit.png",
    ),
    Customer(
        id="3958dc9e-712f-4377-85e9-fec4b6a6442a",
        name="Delba de Oliveira",
        email="delba@oliveira.com",
        image_url="/customers/delba-de-oliveira.png",
    ),
    Customer(
        id="3958dc9e-742f-4377-85e9-fec4b6a6442a",
        name="Lee Robinson",
        email="lee@robinson.com",
        image_url="/customers/lee-robinson.png",
    ),
    Customer(
        id="76d65c26-f784-44a2-ac19-586678f7c2f2",
        name="Michael Novotny",
        email="michael@novotny.com",
        image_url="/customers/michael-novotny.png",
    ),
    Customer(
        id="cc27c14a-0acf-4f4a-a6c9-d45682c144b9",
        name="Amy Burns",
        email="amy@burns.com",
        image_url="/customers/amy-burns.png",
    ),
    Customer(
        id="13d07535-c59e-4157-a011-f8d2ef4e0cbb",
        name="Balazs Orban",
        email="balazs@orban.com",
        image_url="/customers/balazs-orban.png",
    ),
]

_EVIL, _DELBA, _LEE, _MICHAEL, _AMY, _BALAZS = (c.id for c in CUSTOMERS)

INVOICES: list[Invoice] = [
    Invoice(customer_id=_EVIL, amount=15795, status="pending", date=date(2022, 12, 6)),
    Invoice(customer_id=_DELBA, amount=20348, status="pending", date=date(2022, 11, 14)),
    Invoice(customer_id=_AMY, amount=3040, status="paid", date=date(2022, 10, 29)),
    Invoice(customer_id=_MICHAEL, amount=44800, status="paid", date=date(2023, 9, 10)),
    Invoice(customer_id=_BALAZS, amount=34577, status="pending", date=date(2023, 8, 5)),
    Invoice(customer_id=_LEE, amount=54246, status="pending", date=date(2023, 7, 16)),
    Invoice(customer_id=_EVIL, amount=666, status="pending", date=date(2023, 6, 27)),
    Invoice(customer_id=_MICHAEL, amount=32545, status="paid", date=date(2023, 6, 9)),
    Invoice(customer_id=_AMY, amount=1250, status="paid", date=date(2023, 6, 17)),
    Invoice(customer_id=_BALAZS, amount=8546, status="paid", date=date(2023, 6, 7)),
    Invoice(customer_id=_DELBA, amount=500, status="paid", date=date(2023, 8, 19)),
    Invoice(customer_id=_BALAZS, amount=8945, status="paid", date=date(2023, 6, 3)),
    Invoice(customer_id=_LEE, amount=1000, status="paid", date=date(2022, 6, 5)),
]

REVENUE: list[Revenue] = [
    Revenue(month="Jan", revenue=2000),
    Revenue(month="Feb", revenue=1800),
    Revenue(month="Mar", revenue=2200),
    Revenue(month="Apr", revenue=2500),
    Revenue(month="May", revenue=2300),
    Revenue(month="Jun", revenue=3200),
    Revenue(month="Jul", revenue=3500),
    Revenue(month="Aug", revenue=3700),
    Revenue(month="Sep", revenue=2500),
    Revenue(month="Oct", revenue=2800),
    Revenue(month="Nov", revenue=3000),
    Revenue(month="Dec", revenue=4800),
]

PLACEHOLDER_DATA = SeedData(users=USERS, customers=CUSTOMERS, invoices=INVOICES, revenue=REVENUE)
