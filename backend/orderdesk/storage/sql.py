"""Raw-SQL storage: a bounded pool of ``sqlite3`` connections.

Connections are created by the stdlib driver and pooled by SQLAlchemy's
:class:`~sqlalchemy.pool.QueuePool`.  They are handed out in autocommit mode
(``isolation_level=None``); multi-statement work goes through
:func:`orderdesk.transactions.execute_in_transaction`.
"""

from __future__ import annotations

import re
import sqlite3
import threading
from contextlib import contextmanager
from contextlib import nullcontext
from pathlib import Path
from typing import Iterator
from typing import List
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import Pool
from sqlalchemy.pool import PoolProxiedConnection
from sqlalchemy.pool import QueuePool
from sqlalchemy.pool import StaticPool

from orderdesk.database import apply_sqlite_pragmas
from orderdesk.errors import ConfigurationError
from orderdesk.errors import StorageConnectionError
from orderdesk.models.enums import BackendType
from orderdesk.storage.base import StorageConfig
from orderdesk.storage.properties import StorageProperties

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

_CREATE_TABLE = re.compile(r"^\s*CREATE\s+TABLE\s+(?!\s*IF\s+NOT\s+EXISTS\b)", re.IGNORECASE)


def split_statements(script: str) -> List[str]:
    """Split a DDL script on ``;`` dropping ``--`` comment lines and blanks."""

    lines = [line for line in script.splitlines() if not line.strip().startswith("--")]
    statements = []
    for chunk in "\n".join(lines).split(";"):
        chunk = chunk.strip()
        if chunk:
            statements.append(chunk)
    return statements


def make_idempotent(statement: str) -> str:
    """Rewrite ``CREATE TABLE x`` into ``CREATE TABLE IF NOT EXISTS x``."""
    return _CREATE_TABLE.sub("CREATE TABLE IF NOT EXISTS ", statement, count=1)


class SqlStorageConfig(StorageConfig):
    """Pooled ``sqlite3`` connections plus idempotent schema initialisation."""

    backend = BackendType.PRIMARY_SQL

    def __init__(self, properties: StorageProperties, schema_path: Optional[Path] = None):
        super().__init__(properties)

        url = make_url(properties.url)
        if url.get_backend_name() != "sqlite":
            raise ConfigurationError(
                f"the {self.backend.value} backend needs a sqlite:// URL, got '{properties.url}'"
            )

        self._database = url.database or ":memory:"
        self._in_memory = self._database == ":memory:"
        # One shared connection; units of work on it must not overlap
        self._guard = threading.RLock() if self._in_memory else nullcontext()
        self._schema_path = Path(schema_path) if schema_path else SCHEMA_PATH
        self._pool = self._build_pool()

        try:
            self._warm_up()
            self.initialize_schema()
        except Exception:
            self._pool.dispose()
            self._closed = True
            raise

        self.log.info(
            "SQL storage ready",
            url=self.url,
            max_pool_size=self.max_pool_size,
            min_pool_size=self.min_pool_size,
        )

    # Pool ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(
            self._database,
            timeout=self._properties.pool_timeout,
            check_same_thread=False,
            isolation_level=None,
        )
        connection.row_factory = sqlite3.Row
        apply_sqlite_pragmas(connection, in_memory=self._in_memory)
        return connection

    def _build_pool(self) -> Pool:
        if self._in_memory:
            # Every new connection would open a different empty database
            return StaticPool(self._connect)
        return QueuePool(
            self._connect,
            pool_size=self.max_pool_size,
            max_overflow=0,
            timeout=self._properties.pool_timeout,
        )

    def _warm_up(self) -> None:
        """Open ``min_pool_size`` connections so the pool starts populated."""
        borrowed = []
        try:
            for _ in range(max(self.min_pool_size, 1)):
                borrowed.append(self._checkout())
        finally:
            for connection in borrowed:
                connection.close()

    def _checkout(self) -> PoolProxiedConnection:
        if self._closed:
            raise StorageConnectionError(self.url, RuntimeError("storage has been shut down"))
        try:
            return self._pool.connect()
        except (sqlite3.Error, SQLAlchemyError) as exc:
            self.log.error("Connection checkout failed", url=self.url, error=str(exc))
            raise StorageConnectionError(self.url, exc) from exc

    @contextmanager
    def unit_of_work(self) -> Iterator[PoolProxiedConnection]:
        """Yield a pooled connection; it returns to the pool on exit."""
        with self._guard:
            connection = self._checkout()
            try:
                yield connection
            finally:
                connection.close()

    def _release(self) -> None:
        self._pool.dispose()

    # Schema ----------------------------------------------------------------

    def initialize_schema(self) -> None:
        """Run the DDL script; per-statement failures are logged, not raised.

        Reading the script is fatal (:class:`ConfigurationError`) and so is
        failing to obtain a connection (:class:`StorageConnectionError`).
        """

        try:
            script = self._schema_path.read_text(encoding="utf-8")
        except OSError as exc:
            self.log.error("Cannot read schema script", path=str(self._schema_path), error=str(exc))
            raise ConfigurationError(f"cannot read schema script {self._schema_path}: {exc}") from exc

        applied = 0
        with self.unit_of_work() as connection:
            cursor = connection.cursor()
            try:
                for statement in split_statements(script):
                    statement = make_idempotent(statement)
                    try:
                        cursor.execute(statement)
                        applied += 1
                    except sqlite3.Error as exc:
                        self.log.warning(
                            "Schema statement failed, continuing",
                            statement=statement.splitlines()[0],
                            error=str(exc),
                        )
            finally:
                cursor.close()

        self.log.info("Schema initialised", path=str(self._schema_path), statements=applied)


__all__ = ["SqlStorageConfig", "SCHEMA_PATH", "split_statements", "make_idempotent"]
