"""Commit-or-rollback wrappers around a single unit of work.

Two flavours, one per backend:

* :func:`execute_in_transaction` takes a pooled DBAPI connection that is
  normally in autocommit mode, turns autocommit off for the duration of the
  operation and restores it afterwards.
* :class:`SessionTransactions` does the same for an ORM session.

Both guarantee exactly one commit or one rollback per call.  Store errors
(``sqlite3.Error`` / ``SQLAlchemyError``) are translated to
:class:`~orderdesk.errors.PersistenceError` after the rollback; our own error
types pass through untouched.
"""

from __future__ import annotations

import sqlite3
from typing import Any
from typing import Callable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from orderdesk.errors import OrderDeskError
from orderdesk.errors import PersistenceError
from orderdesk.utils.log import get_logger

T = TypeVar("T")

STORE_ERRORS = (sqlite3.Error, SQLAlchemyError, OverflowError)

log = get_logger(component="transactions")


def _translate(exc: BaseException, action: str) -> BaseException:
    if isinstance(exc, OrderDeskError):
        return exc
    if isinstance(exc, STORE_ERRORS):
        return PersistenceError(f"{action} failed", exc)
    return exc


def _driver(connection: Any) -> Any:
    # Pool proxies expose the raw DBAPI connection as ``driver_connection``
    return getattr(connection, "driver_connection", None) or connection


def _rollback_quietly(rollback: Callable[[], Any]) -> None:
    try:
        rollback()
    except STORE_ERRORS as exc:  # pragma: no cover - connection already broken
        log.error("Rollback failed", error=str(exc))


def execute_in_transaction(connection: Any, operation: Callable[[Any], T]) -> T:
    """Run ``operation(connection)`` atomically and return its result.

    The connection's previous isolation level (``None`` means autocommit) is
    restored whatever the outcome.
    """

    raw = _driver(connection)
    previous = raw.isolation_level
    raw.isolation_level = "DEFERRED"
    try:
        try:
            result = operation(connection)
        except Exception as exc:
            _rollback_quietly(connection.rollback)
            log.debug("Transaction rolled back", error=str(exc))
            translated = _translate(exc, "Transactional operation")
            if translated is exc:
                raise
            raise translated from exc

        try:
            connection.commit()
        except Exception as exc:
            _rollback_quietly(connection.rollback)
            log.error("Commit failed", error=str(exc))
            raise PersistenceError("Commit failed", exc) from exc

        return result
    finally:
        if getattr(raw, "in_transaction", False):
            _rollback_quietly(connection.rollback)
            log.warning("Transaction interrupted, rolled back")
        raw.isolation_level = previous


class SessionTransactions:
    """Transaction helpers for ORM sessions.

    Stateless; a single instance can be shared by every ORM DAO.
    """

    def execute_with_result(self, session: Session, operation: Callable[[Session], T]) -> T:
        """Run ``operation(session)`` inside a transaction and return its value.

        When the session already has a transaction open the work runs in a
        SAVEPOINT so the outer transaction is left as it was found.
        """

        transaction = session.begin_nested() if session.in_transaction() else session.begin()
        try:
            try:
                result = operation(session)
            except Exception as exc:
                _rollback_quietly(transaction.rollback)
                log.debug("Session transaction rolled back", error=str(exc))
                translated = _translate(exc, "Session operation")
                if translated is exc:
                    raise
                raise translated from exc

            try:
                transaction.commit()
            except Exception as exc:
                _rollback_quietly(transaction.rollback)
                log.error("Session commit failed", error=str(exc))
                raise PersistenceError("Commit failed", exc) from exc

            return result
        finally:
            if transaction.is_active:
                _rollback_quietly(transaction.rollback)

    def execute(self, session: Session, operation: Callable[[Session], Any]) -> None:
        """Like :meth:`execute_with_result` for operations without a value."""
        self.execute_with_result(session, operation)


__all__ = ["execute_in_transaction", "SessionTransactions", "STORE_ERRORS"]
