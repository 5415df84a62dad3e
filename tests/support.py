"""Shared test helpers: settings without .env and an in-memory SQLite gateway."""

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from sos_api.core.config import Settings
from sos_api.core.database import Database


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from any local .env; SQLite stands in for MySQL."""
    values: dict[str, Any] = {"DATABASE_URL": "sqlite://", "SEED_DEFAULT_ADMIN": False}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_database(settings: Settings | None = None) -> Database:
    """Connected gateway over a single shared in-memory connection."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database = Database(settings or make_settings(), engine=engine)
    database.connect()
    return database
