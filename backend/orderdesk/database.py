"""SQLAlchemy plumbing shared by both storage backends.

* ``Base`` – declarative base for the ORM row classes.
* :func:`make_engine` / :func:`make_sessionmaker` – engine + session factory
  used by the ORM backend.
* :func:`apply_sqlite_pragmas` – per-connection SQLite settings applied by
  both the ORM engine and the raw-SQL pool.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Engine
from sqlalchemy import create_engine
from sqlalchemy import event
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Create Base class
Base = declarative_base()


def is_memory_url(db_url: str) -> bool:
    """Return True for SQLite URLs that point at a private in-memory database."""
    return ":memory:" in db_url or db_url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:")


def apply_sqlite_pragmas(dbapi_connection: Any, in_memory: bool = False) -> None:
    """Enable foreign keys and the WAL journal on a freshly opened connection.

    WAL is meaningless for ``:memory:`` databases so it is skipped there.
    """

    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
        if not in_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
    finally:
        cursor.close()


def make_engine(db_url: str, **kwargs) -> Engine:
    """Create a SQLAlchemy engine with the given URL and options.

    Args:
        db_url: Database connection URL
        **kwargs: Additional arguments for create_engine

    Returns:
        A SQLAlchemy Engine instance
    """
    connect_args = kwargs.pop("connect_args", {})
    sqlite = db_url.startswith("sqlite")
    in_memory = sqlite and is_memory_url(db_url)

    if sqlite:
        if "check_same_thread" not in connect_args:
            connect_args["check_same_thread"] = False
        connect_args.setdefault("timeout", 30)
        # One shared connection, otherwise every checkout sees an empty database
        if in_memory:
            kwargs.setdefault("poolclass", StaticPool)

    engine = create_engine(db_url, connect_args=connect_args, **kwargs)

    if sqlite:

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, _record):  # noqa: ANN001
            apply_sqlite_pragmas(dbapi_connection, in_memory=in_memory)

    return engine


def make_sessionmaker(engine: Engine) -> sessionmaker:
    """Create a sessionmaker bound to the given engine.

    Args:
        engine: SQLAlchemy Engine instance

    Returns:
        A sessionmaker class
    """
    # ``expire_on_commit=False`` keeps attributes readable after the session
    # that loaded them is closed; DAOs convert rows to entities after commit.
    return sessionmaker(
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def initialize_database(engine: Engine) -> None:
    """Create the mapped tables on *engine*; existing tables are left alone."""

    # Import all models to ensure they are registered with Base
    from orderdesk.models.records import CustomerRecord  # noqa: F401
    from orderdesk.models.records import OrderRecord  # noqa: F401
    from orderdesk.models.records import ShippingZoneRecord  # noqa: F401

    Base.metadata.create_all(bind=engine)


__all__ = [
    "Base",
    "apply_sqlite_pragmas",
    "initialize_database",
    "is_memory_url",
    "make_engine",
    "make_sessionmaker",
]
