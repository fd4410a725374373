from __future__ import annotations

from datetime import date
from typing import Iterator
from typing import Optional

from orderdesk.dao.interfaces import OrderDAO
from orderdesk.dao.interfaces import require_persistent
from orderdesk.dao.sql import queries
from orderdesk.dao.sql.support import generated_key
from orderdesk.dao.sql.support import run_query
from orderdesk.dao.sql.support import run_scalar
from orderdesk.dao.sql.support import run_write
from orderdesk.dao.sql.support import store_errors
from orderdesk.errors import NotFoundError
from orderdesk.models.entities import Order
from orderdesk.storage.sql import SqlStorageConfig
from orderdesk.utils.log import get_logger


def _to_order(row) -> Order:
    # DATE columns come back from sqlite3 as ISO strings
    return Order(
        id=row["id"],
        order_date=date.fromisoformat(row["order_date"]),
        total=row["total"],
        customer_id=row["customer_id"],
    )


class SqlOrderDAO(OrderDAO):
    def __init__(self, storage: SqlStorageConfig):
        self._storage = storage
        self.log = get_logger(dao="orders", backend=storage.backend.value)

    def insert(self, order: Order) -> None:
        params = (order.order_date.isoformat(), order.total, order.customer_id)
        with store_errors("insert order", self.log), self._storage.unit_of_work() as conn:
            result = run_write(conn, queries.INSERT_ORDER, params)
        order.id = generated_key(result, "order")
        self.log.debug("Order inserted", order_id=order.id, customer_id=order.customer_id)

    def get_by_id(self, order_id: int) -> Optional[Order]:
        with store_errors("load order", self.log), self._storage.unit_of_work() as conn:
            rows = run_query(conn, queries.SELECT_ORDER_BY_ID, (order_id,))
        return _to_order(rows[0]) if rows else None

    def get_all(self) -> Iterator[Order]:
        with store_errors("list orders", self.log), self._storage.unit_of_work() as conn:
            rows = run_query(conn, queries.SELECT_ALL_ORDERS)
        return iter([_to_order(row) for row in rows])

    def update(self, order: Order) -> None:
        order_id = require_persistent(order, "order")
        params = (order.order_date.isoformat(), order.total, order.customer_id, order_id)
        with store_errors("update order", self.log), self._storage.unit_of_work() as conn:
            result = run_write(conn, queries.UPDATE_ORDER, params)
        if result.rowcount == 0:
            raise NotFoundError("Order", order_id)

    def delete(self, order_id: int) -> None:
        with store_errors("delete order", self.log), self._storage.unit_of_work() as conn:
            result = run_write(conn, queries.DELETE_ORDER, (order_id,))
        if result.rowcount == 0:
            raise NotFoundError("Order", order_id)

    def get_by_customer(self, customer_id: int) -> Iterator[Order]:
        with store_errors("list orders by customer", self.log), self._storage.unit_of_work() as conn:
            rows = run_query(conn, queries.SELECT_ORDERS_BY_CUSTOMER, (customer_id,))
        return iter([_to_order(row) for row in rows])

    def get_by_date(self, order_date: date) -> Iterator[Order]:
        with store_errors("list orders by date", self.log), self._storage.unit_of_work() as conn:
            rows = run_query(conn, queries.SELECT_ORDERS_BY_DATE, (order_date.isoformat(),))
        return iter([_to_order(row) for row in rows])

    def get_total_by_customer(self, customer_id: int) -> float:
        with store_errors("sum customer orders", self.log), self._storage.unit_of_work() as conn:
            total = run_scalar(conn, queries.SUM_ORDER_TOTALS_BY_CUSTOMER, (customer_id,))
        return round(float(total or 0.0), 2)
