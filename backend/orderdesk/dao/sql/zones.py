from __future__ import annotations

from typing import Iterator
from typing import Optional

from orderdesk.dao.interfaces import ShippingZoneDAO
from orderdesk.dao.interfaces import require_persistent
from orderdesk.dao.sql import queries
from orderdesk.dao.sql.support import generated_key
from orderdesk.dao.sql.support import run_query
from orderdesk.dao.sql.support import run_write
from orderdesk.dao.sql.support import store_errors
from orderdesk.errors import NotFoundError
from orderdesk.models.entities import ShippingZone
from orderdesk.storage.sql import SqlStorageConfig
from orderdesk.utils.log import get_logger


def _to_zone(row) -> ShippingZone:
    return ShippingZone(id=row["id"], name=row["name"], rate=row["rate"])


class SqlShippingZoneDAO(ShippingZoneDAO):
    def __init__(self, storage: SqlStorageConfig):
        self._storage = storage
        self.log = get_logger(dao="shipping_zones", backend=storage.backend.value)

    def insert(self, zone: ShippingZone) -> None:
        with store_errors("insert shipping zone", self.log), self._storage.unit_of_work() as conn:
            result = run_write(conn, queries.INSERT_ZONE, (zone.name, zone.rate))
        zone.id = generated_key(result, "shipping zone")
        self.log.debug("Shipping zone inserted", zone_id=zone.id)

    def get_by_id(self, zone_id: int) -> Optional[ShippingZone]:
        with store_errors("load shipping zone", self.log), self._storage.unit_of_work() as conn:
            rows = run_query(conn, queries.SELECT_ZONE_BY_ID, (zone_id,))
        return _to_zone(rows[0]) if rows else None

    def get_all(self) -> Iterator[ShippingZone]:
        with store_errors("list shipping zones", self.log), self._storage.unit_of_work() as conn:
            rows = run_query(conn, queries.SELECT_ALL_ZONES)
        return iter([_to_zone(row) for row in rows])

    def update(self, zone: ShippingZone) -> None:
        zone_id = require_persistent(zone, "shipping zone")
        with store_errors("update shipping zone", self.log), self._storage.unit_of_work() as conn:
            result = run_write(conn, queries.UPDATE_ZONE, (zone.name, zone.rate, zone_id))
        if result.rowcount == 0:
            raise NotFoundError("ShippingZone", zone_id)

    def delete(self, zone_id: int) -> None:
        with store_errors("delete shipping zone", self.log), self._storage.unit_of_work() as conn:
            result = run_write(conn, queries.DELETE_ZONE, (zone_id,))
        if result.rowcount == 0:
            raise NotFoundError("ShippingZone", zone_id)
        self.log.debug("Shipping zone deleted", zone_id=zone_id)
