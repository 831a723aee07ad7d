from __future__ import annotations

import pytest


@pytest.fixture()
def seed_settings(database_url: str):
    from services.seed.app.settings import SeedServiceSettings

    return SeedServiceSettings(
        database_url=database_url,
        database_ssl="disable",
        tracing_enabled=False,
        bcrypt_rounds=4,
    )


@pytest.fixture()
def engine(seed_settings):
    from db.engine import create_engine

    # NullPool: safe to share across per-test event loops.
    return create_engine(seed_settings)
