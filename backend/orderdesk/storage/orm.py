"""ORM storage: an engine plus a session factory."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from contextlib import nullcontext
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from orderdesk.database import initialize_database
from orderdesk.database import is_memory_url
from orderdesk.database import make_engine
from orderdesk.database import make_sessionmaker
from orderdesk.errors import ConfigurationError
from orderdesk.errors import StorageConnectionError
from orderdesk.models.enums import BackendType
from orderdesk.storage.base import StorageConfig
from orderdesk.storage.properties import StorageProperties


class OrmStorageConfig(StorageConfig):
    """Session-per-unit-of-work storage backed by SQLAlchemy's ORM.

    Every session is bound to one explicitly checked-out connection so that a
    unit of work occupies exactly one pool slot, same as the raw-SQL backend.
    """

    backend = BackendType.ORM

    def __init__(self, properties: StorageProperties, create_schema: bool = True):
        super().__init__(properties)

        if properties.driver != "sqlite":
            raise ConfigurationError(
                f"the {self.backend.value} backend needs a sqlite:// URL, got '{properties.url}'"
            )

        in_memory = is_memory_url(properties.url)
        # One shared connection; units of work on it must not overlap
        self._guard = threading.RLock() if in_memory else nullcontext()

        engine_kwargs = {}
        if not in_memory:
            engine_kwargs.update(
                pool_size=self.max_pool_size,
                max_overflow=0,
                pool_timeout=properties.pool_timeout,
            )

        try:
            self._engine = make_engine(properties.url, **engine_kwargs)
        except SQLAlchemyError as exc:
            raise ConfigurationError(f"cannot build engine for '{properties.url}': {exc}") from exc
        self._session_factory = make_sessionmaker(self._engine)

        if create_schema:
            try:
                initialize_database(self._engine)
            except SQLAlchemyError as exc:
                self._engine.dispose()
                self._closed = True
                self.log.error("Schema creation failed", url=self.url, error=str(exc))
                raise StorageConnectionError(self.url, exc) from exc

        self.log.info("ORM storage ready", url=self.url, max_pool_size=self.max_pool_size)

    @property
    def engine(self):
        return self._engine

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        """Yield a fresh session; it is closed and its connection returned on exit."""
        with self._guard:
            connection = self._connect()
            session = self._session_factory(bind=connection)
            try:
                yield session
            finally:
                session.close()
                connection.close()

    def _connect(self):
        if self._closed:
            raise StorageConnectionError(self.url, RuntimeError("storage has been shut down"))
        try:
            return self._engine.connect()
        except SQLAlchemyError as exc:
            self.log.error("Connection checkout failed", url=self.url, error=str(exc))
            raise StorageConnectionError(self.url, exc) from exc

    def _release(self) -> None:
        self._engine.dispose()


__all__ = ["OrmStorageConfig"]
