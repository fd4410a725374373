"""
Tests for the commit-or-rollback executors.

Real SQLite connections cover the happy path and rollbacks; mocks stand in
for failures the store cannot easily be made to produce (e.g. a failing
commit).
"""

import sqlite3
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import SQLAlchemyError

from orderdesk.database import initialize_database
from orderdesk.database import make_engine
from orderdesk.database import make_sessionmaker
from orderdesk.errors import NotFoundError
from orderdesk.errors import PersistenceError
from orderdesk.models.records import ShippingZoneRecord
from orderdesk.transactions import SessionTransactions
from orderdesk.transactions import execute_in_transaction


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:", isolation_level=None)
    conn.execute("CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    yield conn
    conn.close()


def _count(conn) -> int:
    return conn.execute("SELECT COUNT(*) FROM items").fetchone()[0]


class TestExecuteInTransaction:
    def test_commits_and_returns_result(self, connection):
        def op(conn):
            conn.execute("INSERT INTO items (name) VALUES ('a')")
            conn.execute("INSERT INTO items (name) VALUES ('b')")
            return "done"

        assert execute_in_transaction(connection, op) == "done"
        assert _count(connection) == 2
        assert connection.isolation_level is None

    def test_rolls_back_on_failure(self, connection):
        def op(conn):
            conn.execute("INSERT INTO items (name) VALUES ('a')")
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            execute_in_transaction(connection, op)

        assert _count(connection) == 0
        assert connection.isolation_level is None

    def test_interrupt_rolls_back_partial_work(self, connection):
        def op(conn):
            conn.execute("INSERT INTO items (name) VALUES ('a')")
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            execute_in_transaction(connection, op)

        assert not connection.in_transaction
        assert connection.isolation_level is None
        assert _count(connection) == 0

    def test_domain_errors_propagate_unchanged(self, connection):
        def op(conn):
            conn.execute("INSERT INTO items (name) VALUES ('a')")
            raise NotFoundError("Customer", 999)

        with pytest.raises(NotFoundError):
            execute_in_transaction(connection, op)
        assert _count(connection) == 0

    def test_store_errors_become_persistence_errors(self, connection):
        def op(conn):
            conn.execute("INSERT INTO items (name) VALUES ('a')")
            conn.execute("INSERT INTO items (name) VALUES (NULL)")

        with pytest.raises(PersistenceError) as excinfo:
            execute_in_transaction(connection, op)

        assert isinstance(excinfo.value.cause, sqlite3.IntegrityError)
        assert isinstance(excinfo.value.__cause__, sqlite3.IntegrityError)
        assert _count(connection) == 0

    def test_previous_isolation_level_restored(self, connection):
        connection.isolation_level = "IMMEDIATE"
        execute_in_transaction(connection, lambda conn: None)
        assert connection.isolation_level == "IMMEDIATE"

    def test_failing_commit_rolls_back(self):
        raw = SimpleNamespace(isolation_level=None)
        conn = MagicMock()
        conn.driver_connection = raw
        conn.commit.side_effect = sqlite3.OperationalError("disk I/O error")

        with pytest.raises(PersistenceError):
            execute_in_transaction(conn, lambda c: 1)

        conn.commit.assert_called_once()
        conn.rollback.assert_called_once()
        assert raw.isolation_level is None

    def test_exactly_one_commit_on_success(self):
        raw = SimpleNamespace(isolation_level=None)
        conn = MagicMock()
        conn.driver_connection = raw

        execute_in_transaction(conn, lambda c: None)

        conn.commit.assert_called_once()
        conn.rollback.assert_not_called()


@pytest.fixture
def session():
    engine = make_engine("sqlite:///:memory:")
    initialize_database(engine)
    session = make_sessionmaker(engine)()
    yield session
    session.close()
    engine.dispose()


class TestSessionTransactions:
    def test_execute_with_result_commits(self, session):
        tx = SessionTransactions()

        def op(s):
            record = ShippingZoneRecord(name="North", rate=5.0)
            s.add(record)
            s.flush()
            return record.id

        new_id = tx.execute_with_result(session, op)

        assert new_id == 1
        assert not session.in_transaction()
        assert session.query(ShippingZoneRecord).count() == 1

    def test_execute_rolls_back_on_failure(self, session):
        tx = SessionTransactions()

        def op(s):
            s.add(ShippingZoneRecord(name="North", rate=5.0))
            s.flush()
            raise NotFoundError("ShippingZone", 1)

        with pytest.raises(NotFoundError):
            tx.execute(session, op)

        assert not session.in_transaction()
        assert session.query(ShippingZoneRecord).count() == 0

    def test_store_errors_become_persistence_errors(self, session):
        tx = SessionTransactions()

        def op(s):
            s.add(ShippingZoneRecord(name=None, rate=5.0))
            s.flush()

        with pytest.raises(PersistenceError) as excinfo:
            tx.execute(session, op)
        assert isinstance(excinfo.value.cause, SQLAlchemyError)
        assert not session.in_transaction()

    def test_failing_commit_rolls_back(self):
        session = MagicMock()
        session.in_transaction.return_value = False
        transaction = session.begin.return_value
        transaction.is_active = False
        transaction.commit.side_effect = OperationalError("COMMIT", {}, Exception("locked"))

        with pytest.raises(PersistenceError):
            SessionTransactions().execute_with_result(session, lambda s: 1)

        transaction.rollback.assert_called_once()

    def test_open_transaction_uses_savepoint(self):
        session = MagicMock()
        session.in_transaction.return_value = True
        session.begin_nested.return_value.is_active = False

        assert SessionTransactions().execute_with_result(session, lambda s: "ok") == "ok"

        session.begin_nested.assert_called_once()
        session.begin.assert_not_called()
        session.begin_nested.return_value.commit.assert_called_once()
