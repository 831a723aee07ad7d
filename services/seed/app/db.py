from __future__ import annotations

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from db.passwords import make_hasher
from db.seed import Seeder


def get_engine(request: Request) -> AsyncEngine:
    return request.app.state.engine


def get_seeder(request: Request) -> Seeder:
    return Seeder(get_engine(request), hasher=make_hasher(request.app.state.settings.bcrypt_rounds))
