from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from db.settings import DbSettings


def create_engine(settings: DbSettings) -> AsyncEngine:
    # NullPool: every seed run opens its own connection, nothing outlives the event loop.
    return create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
        poolclass=NullPool,
        connect_args={"ssl": settings.database_ssl},
    )
