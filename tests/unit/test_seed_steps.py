from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date
from typing import Any

import pytest
from sqlalchemy.dialects import postgresql


class _Result:
    def scalar_one(self) -> int:
        return 0


class RecordingExecutor:
    """Stands in for an AsyncConnection; keeps compiled SQL and bound rows in call order."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[tuple[str, Any]] = []
        self._fail_on = fail_on

    async def execute(self, statement: Any, parameters: Any = None) -> _Result:
        sql = " ".join(str(statement.compile(dialect=postgresql.dialect())).split())
        if self._fail_on and self._fail_on in sql:
            raise RuntimeError(f"boom: {self._fail_on}")
        self.calls.append((sql, parameters))
        return _Result()

    def statements(self) -> list[str]:
        return [sql for sql, _ in self.calls]


class FakeEngine:
    def __init__(self, executor: RecordingExecutor) -> None:
        self.executor = executor
        self.committed = False
        self.rolled_back = False

    @asynccontextmanager
    async def begin(self):
        try:
            yield self.executor
        except Exception:
            self.rolled_back = True
            raise
        self.committed = True


def _data():
    from db.placeholder_data import Customer, Invoice, Revenue, SeedData, User

    return SeedData(
        users=[User(id="00000000-0000-0000-0000-000000000001", name="Alice", email="a@x.com", password="secret")],
        customers=[Customer(id="00000000-0000-0000-0000-0000000000c1", name="C", email="c@x.com", image_url="/c.png")],
        invoices=[
            Invoice(
                customer_id="00000000-0000-0000-0000-0000000000c1", amount=100, status="paid", date=date(2023, 1, 1)
            )
        ],
        revenue=[Revenue(month="Jan", revenue=100)],
    )


@pytest.mark.asyncio
async def test_seed_users_creates_table_then_inserts_hashed_rows() -> None:
    from db.passwords import make_hasher, verify_password
    from db.seed import seed_users

    tx = RecordingExecutor()
    await seed_users(tx, _data().users, make_hasher(4))

    stmts = tx.statements()
    assert stmts[0] == 'CREATE EXTENSION IF NOT EXISTS "uuid-ossp"'
    assert stmts[1] == "DROP TABLE IF EXISTS users"
    assert stmts[2].startswith("CREATE TABLE IF NOT EXISTS users")
    assert "DEFAULT uuid_generate_v4()" in stmts[2]
    assert "UNIQUE (email)" in stmts[2]
    assert stmts[3].startswith("INSERT INTO users")
    assert stmts[3].endswith("ON CONFLICT (id) DO NOTHING")

    rows = tx.calls[3][1]
    assert len(rows) == 1
    assert rows[0]["password"] != "secret"
    assert verify_password("secret", rows[0]["password"])


@pytest.mark.asyncio
async def test_seed_invoices_lets_database_generate_ids() -> None:
    from db.seed import seed_invoices

    tx = RecordingExecutor()
    await seed_invoices(tx, _data().invoices)

    rows = tx.calls[-1][1]
    assert "id" not in rows[0]
    assert rows[0]["customer_id"] == "00000000-0000-0000-0000-0000000000c1"
    # Reference by convention only.
    assert "REFERENCES" not in tx.statements()[2]


@pytest.mark.asyncio
async def test_seed_revenue_skips_on_month_conflict_without_extension() -> None:
    from db.seed import seed_revenue

    tx = RecordingExecutor()
    await seed_revenue(tx, _data().revenue)

    stmts = tx.statements()
    assert stmts[0] == "DROP TABLE IF EXISTS revenue"
    assert "month VARCHAR(4) NOT NULL" in stmts[1]
    assert stmts[-1].endswith("ON CONFLICT (month) DO NOTHING")


@pytest.mark.asyncio
async def test_empty_collection_creates_table_without_insert() -> None:
    from db.seed import seed_customers

    tx = RecordingExecutor()
    await seed_customers(tx, [])
    assert not any(s.startswith("INSERT") for s in tx.statements())
    assert tx.statements()[-1].startswith("CREATE TABLE IF NOT EXISTS customers")


@pytest.mark.asyncio
async def test_seeder_runs_steps_in_order_in_one_transaction() -> None:
    from db.passwords import make_hasher
    from db.seed import Seeder

    engine = FakeEngine(RecordingExecutor())
    counts = await Seeder(engine, _data(), make_hasher(4)).seed()  # type: ignore[arg-type]

    assert engine.committed
    inserts = [s.split()[2] for s in engine.executor.statements() if s.startswith("INSERT")]
    assert inserts == ["users", "customers", "invoices", "revenue"]
    assert counts == {"users": 0, "customers": 0, "invoices": 0, "revenue": 0}


@pytest.mark.asyncio
async def test_seeder_failure_aborts_transaction_before_later_steps() -> None:
    from db.passwords import make_hasher
    from db.seed import Seeder

    engine = FakeEngine(RecordingExecutor(fail_on="INSERT INTO invoices"))
    with pytest.raises(RuntimeError, match="boom"):
        await Seeder(engine, _data(), make_hasher(4)).seed()  # type: ignore[arg-type]

    assert engine.rolled_back
    assert not engine.committed
    assert not any("revenue" in s for s in engine.executor.statements())


@pytest.mark.asyncio
async def test_hashing_error_aborts_before_user_insert() -> None:
    from db.seed import Seeder

    def broken_hasher(_: str) -> str:
        raise ValueError("hash failed")

    engine = FakeEngine(RecordingExecutor())
    with pytest.raises(ValueError, match="hash failed"):
        await Seeder(engine, _data(), broken_hasher).seed()  # type: ignore[arg-type]

    assert engine.rolled_back
    assert not any(s.startswith("INSERT") for s in engine.executor.statements())
