from __future__ import annotations

import os

import pytest


# Importing the service builds an app from env settings; keep tracing exporters out of test runs.
os.environ.setdefault("TRACING_ENABLED", "false")
os.environ.setdefault("DATABASE_SSL", "disable")


@pytest.fixture(scope="session")
def postgres_url() -> str:
    try:
        from testcontainers.postgres import PostgresContainer

        pg = PostgresContainer("postgres:16")
        pg.start()
    except Exception as e:  # noqa: BLE001
        pytest.skip(f"postgres container unavailable: {e}")
    try:
        yield pg.get_connection_url()
    finally:
        pg.stop()


@pytest.fixture(scope="session")
def database_url(postgres_url: str) -> str:
    from db.settings import normalize_database_url

    # testcontainers emits postgresql+psycopg2://; the app runs on asyncpg.
    url, _ = normalize_database_url(postgres_url)
    return url
