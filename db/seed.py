from __future__ import annotations

import argparse
import asyncio
import json
from collections.abc import Iterable
from dataclasses import asdict
from typing import Any, Protocol

import sqlalchemy as sa
import structlog
from sqlalchemy.dialects.postgresql import UUID, insert
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.schema import CreateTable, DropTable

from db.engine import create_engine
from db.passwords import PasswordHasher, hash_password, make_hasher
from db.placeholder_data import PLACEHOLDER_DATA, Customer, Invoice, Revenue, SeedData, User
from db.settings import SETTINGS, DbSettings

logger = structlog.get_logger()


class SqlExecutor(Protocol):
    """Anything that can run a statement: AsyncConnection, AsyncSession, or a nested-transaction connection."""

    async def execute(self, statement: Any, parameters: Any = None, /) -> Any: ...


meta = sa.MetaData()

_uuid_pk = dict(primary_key=True, server_default=sa.text("uuid_generate_v4()"))

users = sa.Table(
    "users",
    meta,
    sa.Column("id", UUID(as_uuid=False), **_uuid_pk),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("email", sa.Text(), nullable=False, unique=True),
    sa.Column("password", sa.Text(), nullable=False),
)
customers = sa.Table(
    "customers",
    meta,
    sa.Column("id", UUID(as_uuid=False), **_uuid_pk),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("email", sa.String(255), nullable=False),
    sa.Column("image_url", sa.String(255), nullable=False),
)
# customer_id is a reference by convention only; there is no declared foreign key.
invoices = sa.Table(
    "invoices",
    meta,
    sa.Column("id", UUID(as_uuid=False), **_uuid_pk),
    sa.Column("customer_id", UUID(as_uuid=False), nullable=False),
    sa.Column("amount", sa.Integer(), nullable=False),
    sa.Column("status", sa.String(255), nullable=False),
    sa.Column("date", sa.Date(), nullable=False),
)
revenue = sa.Table(
    "revenue",
    meta,
    sa.Column("month", sa.String(4), nullable=False, unique=True),
    sa.Column("revenue", sa.Integer(), nullable=False),
)

SEED_TABLES = (users, customers, invoices, revenue)


async def _ensure_uuid_extension(tx: SqlExecutor) -> None:
    await tx.execute(sa.text('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"'))


async def _recreate(tx: SqlExecutor, table: sa.Table) -> None:
    await tx.execute(DropTable(table, if_exists=True))
    await tx.execute(CreateTable(table, if_not_exists=True))


async def _insert_ignoring_conflicts(tx: SqlExecutor, table: sa.Table, key: str, rows: list[dict]) -> None:
    # An empty parameter list would run a single bare INSERT.
    if rows:
        stmt = insert(table).on_conflict_do_nothing(index_elements=[key])
        await tx.execute(stmt, rows)
    logger.info("seed_step_finished", table=table.name, rows=len(rows))


async def seed_users(tx: SqlExecutor, rows: Iterable[User], hasher: PasswordHasher = hash_password) -> None:
    await _ensure_uuid_extension(tx)
    await _recreate(tx, users)

    out: list[dict] = []
    for u in rows:
        # bcrypt is CPU-bound; keep it off the event loop.
        hashed = await asyncio.to_thread(hasher, u.password)
        out.append(dict(id=u.id, name=u.name, email=u.email, password=hashed))
    await _insert_ignoring_conflicts(tx, users, "id", out)


async def seed_customers(tx: SqlExecutor, rows: Iterable[Customer]) -> None:
    await _ensure_uuid_extension(tx)
    await _recreate(tx, customers)
    await _insert_ignoring_conflicts(tx, customers, "id", [asdict(c) for c in rows])


async def seed_invoices(tx: SqlExecutor, rows: Iterable[Invoice]) -> None:
    await _ensure_uuid_extension(tx)
    await _recreate(tx, invoices)
    # id is omitted so the database generates it; the conflict clause only guards a uuid collision.
    await _insert_ignoring_conflicts(tx, invoices, "id", [asdict(i) for i in rows])


async def seed_revenue(tx: SqlExecutor, rows: Iterable[Revenue]) -> None:
    await _recreate(tx, revenue)
    await _insert_ignoring_conflicts(tx, revenue, "month", [asdict(r) for r in rows])


async def table_counts(tx: SqlExecutor) -> dict[str, int]:
    counts = {}
    for table in SEED_TABLES:
        q = sa.select(sa.func.count()).select_from(table)
        counts[table.name] = (await tx.execute(q)).scalar_one()
    return counts


class Seeder:
    """
    Drops, recreates and fills users -> customers -> invoices -> revenue in one transaction.

    Any failure rolls back every step of the run; the exception propagates unchanged.
    """

    def __init__(self, engine: AsyncEngine, data: SeedData = PLACEHOLDER_DATA, hasher: PasswordHasher = hash_password):
        self._engine = engine
        self._data = data
        self._hasher = hasher

    async def seed(self) -> dict[str, int]:
        logger.info("seed_started")
        async with self._engine.begin() as conn:
            await seed_users(conn, self._data.users, self._hasher)
            await seed_customers(conn, self._data.customers)
            await seed_invoices(conn, self._data.invoices)
            await seed_revenue(conn, self._data.revenue)
            counts = await table_counts(conn)
        logger.info("seed_finished", counts=counts)
        return counts


async def _run(settings: DbSettings) -> dict[str, int]:
    engine = create_engine(settings)
    try:
        return await Seeder(engine, hasher=make_hasher(settings.bcrypt_rounds)).seed()
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Reset and reseed the dashboard demo tables.")
    parser.add_argument("--database-url", default=None, help="Defaults to DATABASE_URL / POSTGRES_URL.")
    parser.add_argument("--ssl", default=None, help="asyncpg ssl mode (disable, prefer, require, verify-full).")
    parser.add_argument("--rounds", type=int, default=None, help="bcrypt cost factor.")
    args = parser.parse_args(argv)

    overrides: dict[str, Any] = {}
    if args.database_url is not None:
        overrides["database_url"] = args.database_url
    if args.ssl is not None:
        overrides["database_ssl"] = args.ssl
    if args.rounds is not None:
        overrides["bcrypt_rounds"] = args.rounds
    settings = DbSettings(**overrides) if overrides else SETTINGS

    counts = asyncio.run(_run(settings))
    print(json.dumps({"counts": counts}, indent=2))


if __name__ == "__main__":
    main()
