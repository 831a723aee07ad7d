from __future__ import annotations

from db.settings import DbSettings


class SeedServiceSettings(DbSettings):
    log_level: str = "info"
    tracing_enabled: bool = True


SETTINGS = SeedServiceSettings()
