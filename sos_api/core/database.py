"""MySQL connection pool, schema bootstrap and session management."""

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import URL, create_engine, make_url
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from sos_api.core.config import Settings
from sos_api.core.errors import DatabaseConfigError, DatabaseNotInitializedError
from sos_api.models import Base

logger = logging.getLogger(__name__)


def build_database_url(settings: Settings) -> str | URL:
    """Return DATABASE_URL if set, else a mysql+pymysql URL from the MYSQL_* settings."""
    if settings.DATABASE_URL:
        return settings.DATABASE_URL
    missing = [
        name
        for name, value in (
            ("MYSQL_HOST", settings.MYSQL_HOST),
            ("MYSQL_USER", settings.MYSQL_USER),
            ("MYSQL_DB", settings.MYSQL_DB),
        )
        if not value
    ]
    if missing:
        raise DatabaseConfigError(f"MySQL env vars not set: {', '.join(missing)}")
    return URL.create(
        "mysql+pymysql",
        username=settings.MYSQL_USER,
        password=settings.MYSQL_PASSWORD.get_secret_value(),
        host=settings.MYSQL_HOST,
        port=settings.MYSQL_PORT,
        database=settings.MYSQL_DB,
        query={"charset": "utf8mb4"},
    )


class Database:
    """
    Gateway owning the connection pool. Built once at process start and handed
    to request handlers through app.state; tests inject an in-memory engine.

    The pool is bounded at DB_POOL_SIZE with no overflow, so callers past the
    limit wait up to DB_POOL_TIMEOUT_SEC for a connection instead of failing.
    """

    def __init__(self, settings: Settings, engine: Engine | None = None) -> None:
        self.settings = settings
        self._engine = engine
        self._sessionmaker: sessionmaker[Session] | None = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        """Create the pool (unless one was injected) and ensure the schema exists. Idempotent."""
        if self._connected:
            return
        if self._engine is None:
            self._engine = self._create_engine()
        self._sessionmaker = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        self._connected = True
        try:
            self.ensure_schema()
        except Exception:
            self._connected = False
            raise
        logger.info("Connected to database (%s)", self._engine.url.get_backend_name())

    def _create_engine(self) -> Engine:
        url = build_database_url(self.settings)
        kwargs: dict = {"pool_pre_ping": True, "echo": self.settings.DEBUG}
        if make_url(url).get_backend_name() != "sqlite":
            kwargs.update(
                pool_size=self.settings.DB_POOL_SIZE,
                max_overflow=0,
                pool_timeout=self.settings.DB_POOL_TIMEOUT_SEC,
                pool_recycle=3600,
            )
        return create_engine(url, **kwargs)

    @property
    def engine(self) -> Engine:
        """Return the live pool; raises if connect() has not completed."""
        if not self._connected or self._engine is None:
            raise DatabaseNotInitializedError("DB not initialized")
        return self._engine

    def get_pool(self) -> Engine:
        return self.engine

    def ensure_schema(self) -> None:
        """Create data_entries, users and login_attempts if they do not exist."""
        Base.metadata.create_all(bind=self.engine, checkfirst=True)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield an ORM session bound to the pool and close it when done."""
        if self._sessionmaker is None:
            raise DatabaseNotInitializedError("DB not initialized")
        db = self._sessionmaker()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        """Release pooled connections. The gateway can be connected again afterwards."""
        if self._engine is not None:
            self._engine.dispose()
        self._connected = False
        self._sessionmaker = None


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session from the app's gateway and closes it when done."""
    database: Database = request.app.state.database
    with database.session() as db:
        yield db
