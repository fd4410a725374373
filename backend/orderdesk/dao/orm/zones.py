from __future__ import annotations

from typing import Iterator
from typing import Optional

from sqlalchemy.orm import Session

from orderdesk.dao.interfaces import ShippingZoneDAO
from orderdesk.dao.interfaces import require_persistent
from orderdesk.dao.orm.support import generated_key
from orderdesk.errors import NotFoundError
from orderdesk.models.entities import ShippingZone
from orderdesk.models.records import ShippingZoneRecord
from orderdesk.storage.orm import OrmStorageConfig
from orderdesk.transactions import SessionTransactions
from orderdesk.utils.log import get_logger


class OrmShippingZoneDAO(ShippingZoneDAO):
    def __init__(self, storage: OrmStorageConfig, transactions: Optional[SessionTransactions] = None):
        self._storage = storage
        self._tx = transactions or SessionTransactions()
        self.log = get_logger(dao="shipping_zones", backend=storage.backend.value)

    def insert(self, zone: ShippingZone) -> None:
        def _insert(session: Session) -> Optional[int]:
            record = ShippingZoneRecord(name=zone.name, rate=zone.rate)
            session.add(record)
            session.flush()
            return record.id

        with self._storage.unit_of_work() as session:
            new_id = self._tx.execute_with_result(session, _insert)
        zone.id = generated_key(new_id, "shipping zone")
        self.log.debug("Shipping zone inserted", zone_id=zone.id)

    def get_by_id(self, zone_id: int) -> Optional[ShippingZone]:
        def _load(session: Session) -> Optional[ShippingZone]:
            record = session.get(ShippingZoneRecord, zone_id)
            return record.to_entity() if record else None

        with self._storage.unit_of_work() as session:
            return self._tx.execute_with_result(session, _load)

    def get_all(self) -> Iterator[ShippingZone]:
        def _list(session: Session):
            records = session.query(ShippingZoneRecord).order_by(ShippingZoneRecord.id).all()
            return [record.to_entity() for record in records]

        with self._storage.unit_of_work() as session:
            return iter(self._tx.execute_with_result(session, _list))

    def update(self, zone: ShippingZone) -> None:
        zone_id = require_persistent(zone, "shipping zone")

        def _update(session: Session) -> None:
            affected = (
                session.query(ShippingZoneRecord)
                .filter(ShippingZoneRecord.id == zone_id)
                .update({"name": zone.name, "rate": zone.rate}, synchronize_session=False)
            )
            if affected == 0:
                raise NotFoundError("ShippingZone", zone_id)

        with self._storage.unit_of_work() as session:
            self._tx.execute(session, _update)

    def delete(self, zone_id: int) -> None:
        def _delete(session: Session) -> None:
            affected = (
                session.query(ShippingZoneRecord)
                .filter(ShippingZoneRecord.id == zone_id)
                .delete(synchronize_session=False)
            )
            if affected == 0:
                raise NotFoundError("ShippingZone", zone_id)

        with self._storage.unit_of_work() as session:
            self._tx.execute(session, _delete)
        self.log.debug("Shipping zone deleted", zone_id=zone_id)
