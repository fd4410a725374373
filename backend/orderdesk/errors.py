"""Exception taxonomy for the data-access layer.

Callers branch on these types only; raw driver exceptions (``sqlite3.Error``,
``sqlalchemy.exc.SQLAlchemyError``) never escape a DAO call.

* :class:`ValidationError` – raised by entity construction/assignment before
  any I/O happens.
* :class:`ConfigurationError` – bad connection parameters or backend tag.
* :class:`StorageConnectionError` – a unit of work could not be obtained.
* :class:`PersistenceError` – the store rejected or silently ignored a write.
* :class:`NotFoundError` – update/delete targeted an id that does not exist.
"""

from __future__ import annotations

from typing import Any
from typing import Optional


class OrderDeskError(Exception):
    """Base exception for all data-layer errors."""

    pass


class ValidationError(OrderDeskError, ValueError):
    """Raised when an entity field receives an invalid value."""

    def __init__(self, message: str, field: str = "", value: Any = None):
        self.message = message
        self.field = field
        self.value = value
        super().__init__(f"{field}: {message}" if field else message)


class ConfigurationError(OrderDeskError):
    """Raised for invalid or missing connection parameters and unsupported backends."""

    def __init__(self, message: str):
        super().__init__(f"Invalid storage configuration: {message}")


class StorageConnectionError(OrderDeskError, ConnectionError):
    """Raised when a connection or session cannot be acquired from the store."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        message = f"Unable to acquire a unit of work for {url}"
        if cause:
            message += f": {cause}"
        super().__init__(message)


class PersistenceError(OrderDeskError):
    """Raised when a statement fails or a write does not take effect."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause:
            message += f": {cause}"
        super().__init__(message)


class NotFoundError(OrderDeskError):
    """Raised when update/delete matches no row."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with id {entity_id} does not exist")


__all__ = [
    "OrderDeskError",
    "ValidationError",
    "ConfigurationError",
    "StorageConnectionError",
    "PersistenceError",
    "NotFoundError",
]
