from __future__ import annotations

from typing import Iterator
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from orderdesk.dao.interfaces import CustomerDAO
from orderdesk.dao.interfaces import require_persistent
from orderdesk.dao.orm.support import generated_key
from orderdesk.errors import NotFoundError
from orderdesk.models.entities import Customer
from orderdesk.models.records import CustomerRecord
from orderdesk.models.records import OrderRecord
from orderdesk.storage.orm import OrmStorageConfig
from orderdesk.transactions import SessionTransactions
from orderdesk.utils.log import get_logger


class OrmCustomerDAO(CustomerDAO):
    def __init__(self, storage: OrmStorageConfig, transactions: Optional[SessionTransactions] = None):
        self._storage = storage
        self._tx = transactions or SessionTransactions()
        self.log = get_logger(dao="customers", backend=storage.backend.value)

    def insert(self, customer: Customer) -> None:
        def _insert(session: Session) -> Optional[int]:
            record = CustomerRecord(
                name=customer.name,
                email=customer.email,
                phone=customer.phone,
                zone_id=customer.zone_id,
            )
            session.add(record)
            session.flush()
            return record.id

        with self._storage.unit_of_work() as session:
            new_id = self._tx.execute_with_result(session, _insert)
        customer.id = generated_key(new_id, "customer")
        self.log.debug("Customer inserted", customer_id=customer.id)

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        def _load(session: Session) -> Optional[Customer]:
            record = session.get(CustomerRecord, customer_id)
            return record.to_entity() if record else None

        with self._storage.unit_of_work() as session:
            return self._tx.execute_with_result(session, _load)

    def get_all(self) -> Iterator[Customer]:
        def _list(session: Session):
            records = session.query(CustomerRecord).order_by(CustomerRecord.id).all()
            return [record.to_entity() for record in records]

        with self._storage.unit_of_work() as session:
            return iter(self._tx.execute_with_result(session, _list))

    def update(self, customer: Customer) -> None:
        customer_id = require_persistent(customer, "customer")
        values = {
            "name": customer.name,
            "email": customer.email,
            "phone": customer.phone,
            "zone_id": customer.zone_id,
        }

        def _update(session: Session) -> None:
            affected = (
                session.query(CustomerRecord)
                .filter(CustomerRecord.id == customer_id)
                .update(values, synchronize_session=False)
            )
            if affected == 0:
                raise NotFoundError("Customer", customer_id)

        with self._storage.unit_of_work() as session:
            self._tx.execute(session, _update)

    def delete(self, customer_id: int) -> None:
        def _delete(session: Session) -> None:
            affected = (
                session.query(CustomerRecord)
                .filter(CustomerRecord.id == customer_id)
                .delete(synchronize_session=False)
            )
            if affected == 0:
                raise NotFoundError("Customer", customer_id)

        with self._storage.unit_of_work() as session:
            self._tx.execute(session, _delete)
        self.log.debug("Customer deleted", customer_id=customer_id)

    def get_by_zone(self, zone_id: int) -> Iterator[Customer]:
        def _list(session: Session):
            records = (
                session.query(CustomerRecord)
                .filter(CustomerRecord.zone_id == zone_id)
                .order_by(CustomerRecord.id)
                .all()
            )
            return [record.to_entity() for record in records]

        with self._storage.unit_of_work() as session:
            return iter(self._tx.execute_with_result(session, _list))

    def get_total_spent(self, customer_id: int) -> float:
        def _sum(session: Session):
            return (
                session.query(func.coalesce(func.sum(OrderRecord.total), 0.0))
                .filter(OrderRecord.customer_id == customer_id)
                .scalar()
            )

        with self._storage.unit_of_work() as session:
            total = self._tx.execute_with_result(session, _sum)
        return round(float(total or 0.0), 2)
