from __future__ import annotations

from typing import Iterator
from typing import Optional

from orderdesk.dao.interfaces import CustomerDAO
from orderdesk.dao.interfaces import require_persistent
from orderdesk.dao.sql import queries
from orderdesk.dao.sql.support import generated_key
from orderdesk.dao.sql.support import run_query
from orderdesk.dao.sql.support import run_scalar
from orderdesk.dao.sql.support import run_write
from orderdesk.dao.sql.support import store_errors
from orderdesk.errors import NotFoundError
from orderdesk.models.entities import Customer
from orderdesk.storage.sql import SqlStorageConfig
from orderdesk.transactions import execute_in_transaction
from orderdesk.utils.log import get_logger


def _to_customer(row) -> Customer:
    return Customer(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        zone_id=row["zone_id"],
    )


class SqlCustomerDAO(CustomerDAO):
    def __init__(self, storage: SqlStorageConfig):
        self._storage = storage
        self.log = get_logger(dao="customers", backend=storage.backend.value)

    def insert(self, customer: Customer) -> None:
        params = (customer.name, customer.email, customer.phone, customer.zone_id)
        with store_errors("insert customer", self.log), self._storage.unit_of_work() as conn:
            result = run_write(conn, queries.INSERT_CUSTOMER, params)
        customer.id = generated_key(result, "customer")
        self.log.debug("Customer inserted", customer_id=customer.id)

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        with store_errors("load customer", self.log), self._storage.unit_of_work() as conn:
            rows = run_query(conn, queries.SELECT_CUSTOMER_BY_ID, (customer_id,))
        return _to_customer(rows[0]) if rows else None

    def get_all(self) -> Iterator[Customer]:
        with store_errors("list customers", self.log), self._storage.unit_of_work() as conn:
            rows = run_query(conn, queries.SELECT_ALL_CUSTOMERS)
        return iter([_to_customer(row) for row in rows])

    def update(self, customer: Customer) -> None:
        customer_id = require_persistent(customer, "customer")
        params = (customer.name, customer.email, customer.phone, customer.zone_id, customer_id)
        with store_errors("update customer", self.log), self._storage.unit_of_work() as conn:
            result = run_write(conn, queries.UPDATE_CUSTOMER, params)
        if result.rowcount == 0:
            raise NotFoundError("Customer", customer_id)

    def delete(self, customer_id: int) -> None:
        def _delete(conn) -> None:
            result = run_write(conn, queries.DELETE_CUSTOMER, (customer_id,))
            if result.rowcount == 0:
                raise NotFoundError("Customer", customer_id)

        with self._storage.unit_of_work() as conn:
            execute_in_transaction(conn, _delete)
        self.log.debug("Customer deleted", customer_id=customer_id)

    def get_by_zone(self, zone_id: int) -> Iterator[Customer]:
        with store_errors("list customers by zone", self.log), self._storage.unit_of_work() as conn:
            rows = run_query(conn, queries.SELECT_CUSTOMERS_BY_ZONE, (zone_id,))
        return iter([_to_customer(row) for row in rows])

    def get_total_spent(self, customer_id: int) -> float:
        with store_errors("sum customer orders", self.log), self._storage.unit_of_work() as conn:
            total = run_scalar(conn, queries.SUM_ORDER_TOTALS_BY_CUSTOMER, (customer_id,))
        return round(float(total or 0.0), 2)
