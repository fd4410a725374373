"""Build the DAO triple for a backend tag.

``DAOFactory`` moves through three states and never back:

    Unconfigured --resolve()--> Resolved(backend) --build()--> Ready(DAOSet)

Resolution is a dictionary lookup; an unknown or unimplemented tag fails
immediately with :class:`ConfigurationError` listing what is supported.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
from typing import Dict
from typing import NamedTuple
from typing import Optional
from typing import Type

from orderdesk.dao.interfaces import CustomerDAO
from orderdesk.dao.interfaces import OrderDAO
from orderdesk.dao.interfaces import ShippingZoneDAO
from orderdesk.dao.orm import OrmCustomerDAO
from orderdesk.dao.orm import OrmOrderDAO
from orderdesk.dao.orm import OrmShippingZoneDAO
from orderdesk.dao.sql import SqlCustomerDAO
from orderdesk.dao.sql import SqlOrderDAO
from orderdesk.dao.sql import SqlShippingZoneDAO
from orderdesk.errors import ConfigurationError
from orderdesk.models.enums import BackendType
from orderdesk.storage.base import StorageConfig
from orderdesk.storage.orm import OrmStorageConfig
from orderdesk.storage.sql import SqlStorageConfig
from orderdesk.transactions import SessionTransactions
from orderdesk.utils.log import get_logger

logger = get_logger(component="factory")


class DAOSet(NamedTuple):
    customers: CustomerDAO
    orders: OrderDAO
    zones: ShippingZoneDAO


@dataclass(frozen=True)
class _Builder:
    storage_type: Type[StorageConfig]
    build: Callable[[StorageConfig], DAOSet]


def _build_sql(storage: SqlStorageConfig) -> DAOSet:
    return DAOSet(
        customers=SqlCustomerDAO(storage),
        orders=SqlOrderDAO(storage),
        zones=SqlShippingZoneDAO(storage),
    )


def _build_orm(storage: OrmStorageConfig) -> DAOSet:
    transactions = SessionTransactions()
    return DAOSet(
        customers=OrmCustomerDAO(storage, transactions),
        orders=OrmOrderDAO(storage, transactions),
        zones=OrmShippingZoneDAO(storage, transactions),
    )


BUILDERS: Dict[BackendType, _Builder] = {
    BackendType.PRIMARY_SQL: _Builder(SqlStorageConfig, _build_sql),
    BackendType.ORM: _Builder(OrmStorageConfig, _build_orm),
}


class DAOFactory:
    """Resolve a backend tag once and hand out the same DAO triple thereafter."""

    def __init__(self, backend: "BackendType | str", storage: StorageConfig):
        self._tag = backend
        self._storage = storage
        self._backend: Optional[BackendType] = None
        self._builder: Optional[_Builder] = None
        self._daos: Optional[DAOSet] = None

    @property
    def state(self) -> str:
        if self._daos is not None:
            return "ready"
        if self._builder is not None:
            return "resolved"
        return "unconfigured"

    @property
    def backend(self) -> Optional[BackendType]:
        return self._backend

    def resolve(self) -> BackendType:
        """Look the tag up in the dispatch table (idempotent)."""

        if self._builder is not None:
            return self._backend

        backend = BackendType.parse(self._tag)
        builder = BUILDERS.get(backend)
        if builder is None:
            supported = ", ".join(tag.value for tag in BUILDERS)
            raise ConfigurationError(f"no DAO implementation for backend '{backend.value}' (supported: {supported})")
        if not isinstance(self._storage, builder.storage_type):
            raise ConfigurationError(
                f"backend '{backend.value}' needs {builder.storage_type.__name__}, "
                f"got {type(self._storage).__name__}"
            )

        self._backend = backend
        self._builder = builder
        logger.debug("DAO backend resolved", backend=backend.value)
        return backend

    def build(self) -> DAOSet:
        """Return the DAO triple, constructing it on first call."""

        if self._daos is None:
            self.resolve()
            self._daos = self._builder.build(self._storage)
            logger.info("DAOs ready", backend=self._backend.value)
        return self._daos

    def create_customer_dao(self) -> CustomerDAO:
        return self.build().customers

    def create_order_dao(self) -> OrderDAO:
        return self.build().orders

    def create_zone_dao(self) -> ShippingZoneDAO:
        return self.build().zones


__all__ = ["DAOFactory", "DAOSet", "BUILDERS"]
