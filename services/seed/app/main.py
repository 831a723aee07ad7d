from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import sqlalchemy as sa
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from db.engine import create_engine
from db.seed import Seeder
from services.seed.app import observability
from services.seed.app.db import get_engine, get_seeder
from services.seed.app.logging import configure_logging, logger
from services.seed.app.settings import SETTINGS, SeedServiceSettings


SEED_OK_MESSAGE = "Database seeded successfully"


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await app.state.engine.dispose()


def create_app(settings: SeedServiceSettings | None = None) -> FastAPI:
    settings = settings or SETTINGS
    configure_logging(settings.log_level)

    app = FastAPI(title="Dashboard Seed API", version="0.1.0", lifespan=_lifespan)
    # Created here (not on first request) so each app instance owns its engine.
    app.state.settings = settings
    app.state.engine = create_engine(settings)

    if settings.tracing_enabled:
        observability.setup_tracing(app, service_name="seed")
        observability.instrument_sqlalchemy(app.state.engine)
    observability.add_metrics_middleware(app, service_name="seed")

    @app.get("/healthz")
    async def healthz(engine: AsyncEngine = Depends(get_engine)) -> dict:
        async with engine.connect() as conn:
            await conn.execute(sa.text("SELECT 1"))
        return {"ok": True}

    @app.get("/seed")
    async def seed(seeder: Seeder = Depends(get_seeder)) -> JSONResponse:
        try:
            await seeder.seed()
        except Exception as e:
            # Every failure surfaces the same way: the driver's message, status 500.
            message = str(e) or e.__class__.__name__
            logger.exception("seed_failed", error=message)
            observability.SEED_RUNS_TOTAL.labels("failed").inc()
            return JSONResponse({"error": message}, status_code=500)

        observability.SEED_RUNS_TOTAL.labels("ok").inc()
        return JSONResponse({"message": SEED_OK_MESSAGE})

    return app


app = create_app()
