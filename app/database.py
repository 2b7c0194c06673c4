"""
Database engine and session factory. Supports Postgres (production) and
SQLite (tests, local dev) via Settings.database_url.

The engine is created once by the app lifespan and disposed on shutdown.
get_db is the single dependency for DB access; it checks a connection out of
the pool per request and always returns it.
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi import Request

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    # SQLite needs check_same_thread=False for FastAPI's threadpool; Postgres does not
    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory DB lives on a single connection
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(database_url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    # Keep attributes loaded after commit so deleted rows can still be returned
    return sessionmaker(bind=engine, expire_on_commit=False)


def log_server_version(engine: Engine) -> None:
    """Open one connection at startup and log what we are talking to."""
    with engine.connect() as conn:
        version = conn.dialect.server_version_info
    logger.info(
        "Connected to %s %s",
        engine.dialect.name,
        ".".join(str(part) for part in version or ()),
    )


def get_db(request: Request):
    """FastAPI dependency: yields a DB session and closes it after the request."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
