"""Statement helpers shared by the raw-SQL DAOs.

Helpers report what happened (rows, row count, generated key) and never
raise for "nothing matched"; the DAO methods turn that into typed errors.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any
from typing import Iterator
from typing import List
from typing import Optional
from typing import Sequence

from orderdesk.errors import PersistenceError
from orderdesk.transactions import STORE_ERRORS


@dataclass(frozen=True)
class WriteResult:
    rowcount: int
    lastrowid: Optional[int]


def run_query(connection: Any, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
    cursor = connection.cursor()
    try:
        cursor.execute(sql, tuple(params))
        return cursor.fetchall()
    finally:
        cursor.close()


def run_scalar(connection: Any, sql: str, params: Sequence[Any] = ()) -> Any:
    rows = run_query(connection, sql, params)
    return rows[0][0] if rows else None


def run_write(connection: Any, sql: str, params: Sequence[Any] = ()) -> WriteResult:
    cursor = connection.cursor()
    try:
        cursor.execute(sql, tuple(params))
        return WriteResult(rowcount=cursor.rowcount, lastrowid=cursor.lastrowid)
    finally:
        cursor.close()


def generated_key(result: WriteResult, entity: str) -> int:
    """Return the key produced by an INSERT or raise :class:`PersistenceError`."""

    if result.rowcount == 0:
        raise PersistenceError(f"Inserting {entity} affected no rows")
    if not result.lastrowid:
        raise PersistenceError(f"Inserting {entity} returned no generated key")
    return result.lastrowid


@contextmanager
def store_errors(action: str, log) -> Iterator[None]:
    """Translate driver errors raised in the block into :class:`PersistenceError`."""

    try:
        yield
    except STORE_ERRORS as exc:
        log.error("Statement failed", action=action, error=str(exc))
        raise PersistenceError(f"Failed to {action}", exc) from exc


__all__ = [
    "WriteResult",
    "run_query",
    "run_scalar",
    "run_write",
    "generated_key",
    "store_errors",
]
