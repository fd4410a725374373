"""Abstract access-object contracts, one per entity.

Both backends implement these exactly; callers cannot tell them apart.
Single-row lookups return ``None`` when nothing matches, list queries return
a (possibly empty) iterator in ascending id order, and aggregates return
``0.0`` rather than ``None``.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from datetime import date
from typing import Any
from typing import Generic
from typing import Iterator
from typing import Optional
from typing import TypeVar

from orderdesk.errors import PersistenceError
from orderdesk.models.entities import Customer
from orderdesk.models.entities import Order
from orderdesk.models.entities import ShippingZone

E = TypeVar("E")


class EntityDAO(ABC, Generic[E]):
    """CRUD operations shared by every entity."""

    @abstractmethod
    def insert(self, entity: E) -> None:
        """Persist a transient *entity* and assign the generated id onto it."""

    @abstractmethod
    def get_by_id(self, entity_id: int) -> Optional[E]:
        """Return the entity with *entity_id* or ``None``."""

    @abstractmethod
    def get_all(self) -> Iterator[E]:
        """Yield every stored entity."""

    @abstractmethod
    def update(self, entity: E) -> None:
        """Overwrite the stored row matching ``entity.id``.

        Raises :class:`~orderdesk.errors.NotFoundError` when no row matches.
        """

    @abstractmethod
    def delete(self, entity_id: int) -> None:
        """Remove the row with *entity_id*.

        Raises :class:`~orderdesk.errors.NotFoundError` when no row matches.
        """


class ShippingZoneDAO(EntityDAO[ShippingZone]):
    pass


class CustomerDAO(EntityDAO[Customer]):
    @abstractmethod
    def get_by_zone(self, zone_id: int) -> Iterator[Customer]:
        """Customers assigned to *zone_id*."""

    @abstractmethod
    def get_total_spent(self, customer_id: int) -> float:
        """Sum of the customer's order totals, ``0.0`` when there are none."""


class OrderDAO(EntityDAO[Order]):
    @abstractmethod
    def get_by_customer(self, customer_id: int) -> Iterator[Order]:
        """Orders placed by *customer_id*."""

    @abstractmethod
    def get_by_date(self, order_date: date) -> Iterator[Order]:
        """Orders placed on *order_date*."""

    @abstractmethod
    def get_total_by_customer(self, customer_id: int) -> float:
        """Sum of the customer's order totals, ``0.0`` when there are none."""


def require_persistent(entity: Any, kind: str) -> int:
    """Return ``entity.id``; a transient entity cannot be updated."""
    if entity.id is None:
        raise PersistenceError(f"Cannot update a {kind} that has not been inserted")
    return entity.id


__all__ = ["EntityDAO", "CustomerDAO", "OrderDAO", "ShippingZoneDAO", "require_persistent"]
