from __future__ import annotations

from datetime import date
from typing import Iterator
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from orderdesk.dao.interfaces import OrderDAO
from orderdesk.dao.interfaces import require_persistent
from orderdesk.dao.orm.support import generated_key
from orderdesk.errors import NotFoundError
from orderdesk.models.entities import Order
from orderdesk.models.records import OrderRecord
from orderdesk.storage.orm import OrmStorageConfig
from orderdesk.transactions import SessionTransactions
from orderdesk.utils.log import get_logger


class OrmOrderDAO(OrderDAO):
    def __init__(self, storage: OrmStorageConfig, transactions: Optional[SessionTransactions] = None):
        self._storage = storage
        self._tx = transactions or SessionTransactions()
        self.log = get_logger(dao="orders", backend=storage.backend.value)

    def _list_where(self, *criteria) -> Iterator[Order]:
        def _list(session: Session):
            records = session.query(OrderRecord).filter(*criteria).order_by(OrderRecord.id).all()
            return [record.to_entity() for record in records]

        with self._storage.unit_of_work() as session:
            return iter(self._tx.execute_with_result(session, _list))

    def insert(self, order: Order) -> None:
        def _insert(session: Session) -> Optional[int]:
            record = OrderRecord(order_date=order.order_date, total=order.total, customer_id=order.customer_id)
            session.add(record)
            session.flush()
            return record.id

        with self._storage.unit_of_work() as session:
            new_id = self._tx.execute_with_result(session, _insert)
        order.id = generated_key(new_id, "order")
        self.log.debug("Order inserted", order_id=order.id, customer_id=order.customer_id)

    def get_by_id(self, order_id: int) -> Optional[Order]:
        def _load(session: Session) -> Optional[Order]:
            record = session.get(OrderRecord, order_id)
            return record.to_entity() if record else None

        with self._storage.unit_of_work() as session:
            return self._tx.execute_with_result(session, _load)

    def get_all(self) -> Iterator[Order]:
        return self._list_where()

    def update(self, order: Order) -> None:
        order_id = require_persistent(order, "order")
        values = {"order_date": order.order_date, "total": order.total, "customer_id": order.customer_id}

        def _update(session: Session) -> None:
            affected = (
                session.query(OrderRecord)
                .filter(OrderRecord.id == order_id)
                .update(values, synchronize_session=False)
            )
            if affected == 0:
                raise NotFoundError("Order", order_id)

        with self._storage.unit_of_work() as session:
            self._tx.execute(session, _update)

    def delete(self, order_id: int) -> None:
        def _delete(session: Session) -> None:
            affected = (
                session.query(OrderRecord).filter(OrderRecord.id == order_id).delete(synchronize_session=False)
            )
            if affected == 0:
                raise NotFoundError("Order", order_id)

        with self._storage.unit_of_work() as session:
            self._tx.execute(session, _delete)

    def get_by_customer(self, customer_id: int) -> Iterator[Order]:
        return self._list_where(OrderRecord.customer_id == customer_id)

    def get_by_date(self, order_date: date) -> Iterator[Order]:
        return self._list_where(OrderRecord.order_date == order_date)

    def get_total_by_customer(self, customer_id: int) -> float:
        def _sum(session: Session):
            return (
                session.query(func.coalesce(func.sum(OrderRecord.total), 0.0))
                .filter(OrderRecord.customer_id == customer_id)
                .scalar()
            )

        with self._storage.unit_of_work() as session:
            total = self._tx.execute_with_result(session, _sum)
        return round(float(total or 0.0), 2)
