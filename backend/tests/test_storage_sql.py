"""
Tests for the raw-SQL storage configuration: pooling, schema initialisation
and shutdown.
"""

import sqlite3
import threading

import pytest
from structlog.testing import capture_logs

from orderdesk.errors import ConfigurationError
from orderdesk.errors import StorageConnectionError
from orderdesk.models.enums import BackendType
from orderdesk.storage import SqlStorageConfig
from orderdesk.storage import StorageProperties
from orderdesk.storage.sql import make_idempotent
from orderdesk.storage.sql import split_statements


def _tables(storage):
    with storage.unit_of_work() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'")
        names = {row[0] for row in cursor.fetchall()}
        cursor.close()
    return names


class TestStatementHelpers:
    def test_split_drops_comments_and_blanks(self):
        script = "-- header\nCREATE TABLE a (id INTEGER);\n\n  ;\nCREATE TABLE b (id INTEGER);\n"
        assert split_statements(script) == ["CREATE TABLE a (id INTEGER)", "CREATE TABLE b (id INTEGER)"]

    def test_create_table_made_idempotent(self):
        assert make_idempotent("create table a (id INTEGER)") == "CREATE TABLE IF NOT EXISTS a (id INTEGER)"

    def test_existing_guard_left_alone(self):
        statement = "CREATE TABLE IF NOT EXISTS a (id INTEGER)"
        assert make_idempotent(statement) == statement

    def test_other_statements_untouched(self):
        statement = "CREATE INDEX ix_a ON a (id)"
        assert make_idempotent(statement) == statement


class TestSqlStorageConfig:
    def test_schema_created(self, sql_storage):
        assert sql_storage.backend is BackendType.PRIMARY_SQL
        assert {"shipping_zones", "customers", "orders"} <= _tables(sql_storage)

    def test_accessors(self, sql_storage, properties):
        assert sql_storage.url == properties.url
        assert sql_storage.username == ""
        assert sql_storage.password == ""
        assert sql_storage.max_pool_size == 4
        assert sql_storage.min_pool_size == 1

    def test_connections_are_autocommit_with_foreign_keys(self, sql_storage):
        with sql_storage.unit_of_work() as conn:
            assert conn.driver_connection.isolation_level is None
            cursor = conn.cursor()
            cursor.execute("PRAGMA foreign_keys")
            assert cursor.fetchone()[0] == 1
            cursor.close()

    def test_reinitialising_keeps_rows(self, sql_storage):
        """Running the schema script again neither fails nor touches data."""
        with sql_storage.unit_of_work() as conn:
            cursor = conn.cursor()
            cursor.execute("INSERT INTO shipping_zones (name, rate) VALUES ('North', 5.0)")
            cursor.close()

        sql_storage.initialize_schema()
        sql_storage.initialize_schema()

        with sql_storage.unit_of_work() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM shipping_zones")
            assert cursor.fetchone()[0] == 1
            cursor.close()

    def test_second_storage_on_same_file(self, sql_storage, properties):
        other = SqlStorageConfig(properties)
        try:
            assert {"shipping_zones", "customers", "orders"} <= _tables(other)
        finally:
            other.shutdown()

    def test_failing_statement_is_logged_and_skipped(self, properties, tmp_path):
        script = tmp_path / "schema.sql"
        script.write_text(
            "CREATE TABLE good_one (id INTEGER);\n"
            "CREATE TABLE broken (id INTEGER,, oops);\n"
            "CREATE TABLE good_two (id INTEGER);\n"
        )

        with capture_logs() as logs:
            storage = SqlStorageConfig(properties, schema_path=script)
        try:
            assert {"good_one", "good_two"} <= _tables(storage)
            assert "broken" not in _tables(storage)
        finally:
            storage.shutdown()

        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert len(warnings) == 1
        assert "broken" in warnings[0]["statement"]

    def test_unreadable_schema_is_fatal(self, properties, tmp_path):
        with pytest.raises(ConfigurationError):
            SqlStorageConfig(properties, schema_path=tmp_path / "missing.sql")

    def test_non_sqlite_url_rejected(self):
        with pytest.raises(ConfigurationError):
            SqlStorageConfig(StorageProperties(url="postgresql://localhost/orders"))

    def test_unreachable_database(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'no-such-dir' / 'orders.db'}"
        with pytest.raises(StorageConnectionError) as excinfo:
            SqlStorageConfig(StorageProperties(url=url))
        assert isinstance(excinfo.value.cause, sqlite3.Error)

    def test_pool_exhaustion_raises_connection_error(self, db_url):
        storage = SqlStorageConfig(StorageProperties(url=db_url, max_pool_size=1, pool_timeout=0.1))
        try:
            with storage.unit_of_work():
                with pytest.raises(StorageConnectionError):
                    with storage.unit_of_work():
                        pass
            # The connection went back to the pool
            with storage.unit_of_work() as conn:
                assert conn is not None
        finally:
            storage.shutdown()

    def test_connection_error_is_builtin_connection_error(self, db_url):
        storage = SqlStorageConfig(StorageProperties(url=db_url))
        storage.shutdown()
        with pytest.raises(ConnectionError):
            with storage.unit_of_work():
                pass

    def test_shutdown_is_idempotent(self, properties):
        storage = SqlStorageConfig(properties)
        storage.shutdown()
        storage.shutdown()
        assert storage.closed

    def test_in_memory_database_is_shared(self):
        storage = SqlStorageConfig(StorageProperties(url="sqlite:///:memory:"))
        try:
            with storage.unit_of_work() as conn:
                cursor = conn.cursor()
                cursor.execute("INSERT INTO shipping_zones (name, rate) VALUES ('North', 5.0)")
                cursor.close()
            with storage.unit_of_work() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) FROM shipping_zones")
                assert cursor.fetchone()[0] == 1
                cursor.close()
        finally:
            storage.shutdown()

    def test_in_memory_units_of_work_do_not_overlap(self):
        storage = SqlStorageConfig(StorageProperties(url="sqlite:///:memory:"))
        holding = threading.Event()
        release = threading.Event()
        entered = threading.Event()

        def hold():
            with storage.unit_of_work():
                holding.set()
                release.wait(5)

        def borrow():
            with storage.unit_of_work():
                entered.set()

        holder = threading.Thread(target=hold)
        borrower = threading.Thread(target=borrow)
        try:
            holder.start()
            assert holding.wait(5)
            borrower.start()
            assert not entered.wait(0.2)
            release.set()
            assert entered.wait(5)
        finally:
            release.set()
            holder.join(5)
            borrower.join(5)
            storage.shutdown()
