"""Engine construction and startup probing of the backing store."""

from __future__ import annotations

import logging
import time

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from catalog_api.core.config import Settings
from catalog_api.db import models  # noqa: F401  (registers tables on Base.metadata)
from catalog_api.db.base import Base

logger = logging.getLogger(__name__)


class DatabaseUnavailableError(Exception):
    """The store could not be reached within the startup probe window."""


def _is_postgres(drivername: str) -> bool:
    return drivername.split("+", 1)[0] in ("postgresql", "postgres")


def build_database_url(settings: Settings) -> URL:
    """Assemble the connection URL from the DB_* settings.

    Missing values stay empty and are left for the store to reject.
    """
    try:
        port = int(settings.db_port) if settings.db_port else None
    except ValueError as e:
        raise DatabaseUnavailableError(f"Invalid DB_PORT {settings.db_port!r}") from e

    query = {}
    if _is_postgres(settings.db_driver) and settings.db_sslmode:
        query["sslmode"] = settings.db_sslmode

    return URL.create(
        drivername=settings.db_driver,
        username=settings.db_user or None,
        password=settings.db_password or None,
        host=settings.db_host or None,
        port=port,
        database=settings.db_name or None,
        query=query,
    )


def create_db_engine(url: URL, pool_size: int = 4, connect_timeout: int | None = None) -> Engine:
    """Create a small, bounded pool whose connections never expire.

    pool_size: open connections kept by the pool; max_overflow=0 makes it
    the hard limit too.
    pool_recycle=-1: connections have unlimited lifetime.
    """
    connect_args = {}
    if connect_timeout and _is_postgres(url.drivername):
        connect_args["connect_timeout"] = connect_timeout

    return create_engine(
        url,
        echo=False,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=0,
        pool_recycle=-1,
        connect_args=connect_args,
    )


def ping(engine: Engine) -> None:
    """Round-trip a trivial query; raises on any connection failure."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1")).fetchone()


def wait_for_database(engine: Engine, timeout: float = 5.0, interval: float = 1.0) -> None:
    """Probe the store with a constant wait until it answers or ``timeout`` elapses.

    Raises DatabaseUnavailableError chained from the last probe failure.
    """
    deadline = time.monotonic() + timeout
    attempt = 0
    while True:
        try:
            ping(engine)
            return
        except SQLAlchemyError as e:
            logger.warning(f"db: {e} retrying (attempt: {attempt})")
            time.sleep(interval)
            if time.monotonic() >= deadline:
                raise DatabaseUnavailableError(
                    f"Database did not answer within {timeout:g}s"
                ) from e
        attempt += 1


def open_engine(settings: Settings) -> Engine:
    """Return a ready-to-use, already-verified engine for the configured store."""
    try:
        url = build_database_url(settings)
        engine = create_db_engine(
            url,
            pool_size=settings.db_pool_size,
            connect_timeout=settings.db_connect_timeout,
        )
    except (SQLAlchemyError, ImportError, ValueError) as e:
        # DSN parsing or driver initialization error
        raise DatabaseUnavailableError(f"Cannot initialize database engine: {e}") from e

    try:
        wait_for_database(
            engine,
            timeout=settings.db_probe_timeout,
            interval=settings.db_retry_interval,
        )
    except DatabaseUnavailableError:
        engine.dispose()
        raise

    logger.info(f"Connected to database {url.render_as_string(hide_password=True)}")
    return engine


def create_schema(engine: Engine) -> None:
    """Create missing tables. Existing tables are left untouched."""
    Base.metadata.create_all(engine)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
