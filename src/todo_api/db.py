from __future__ import annotations

import logging
from typing import Any, Dict, Generator, Union

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from . import models  # noqa: F401  (registers the todos table on SQLModel.metadata)
from .settings import Settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def build_engine(url: Union[str, URL], echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for the given database URL.

    SQLite URLs get ``check_same_thread`` disabled because FastAPI runs sync
    handlers in a threadpool; in-memory SQLite additionally shares a single
    connection so every session sees the same database.
    """
    url = make_url(url)
    kwargs: Dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
            kwargs.pop("pool_pre_ping")
    return create_engine(url, **kwargs)


# PUBLIC_INTERFACE
def engine_from_settings(settings: Settings) -> Engine:
    """Build the engine described by the application settings."""
    return build_engine(settings.database_url, echo=settings.db_echo)


# PUBLIC_INTERFACE
def migrate(engine: Engine) -> None:
    """Create any missing tables for the registered models."""
    logger.info("Running schema migration on %s", engine.url.render_as_string(hide_password=True))
    SQLModel.metadata.create_all(engine)


# PUBLIC_INTERFACE
def ping(engine: Engine) -> None:
    """Execute a trivial statement; raises SQLAlchemyError when the database is unreachable."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


# PUBLIC_INTERFACE
def get_session(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding a Session bound to the application's engine.
    The session is closed once the response has been produced.
    """
    with Session(request.app.state.engine) as session:
        yield session
