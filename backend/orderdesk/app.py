"""Process bootstrap: settings -> storage -> DAO triple.

UIs call :func:`open_data_layer` once at start-up::

    with open_data_layer() as layer:
        layer.daos.zones.insert(ShippingZone(name="North", rate=5.0))
"""

from __future__ import annotations

import atexit
from typing import Optional

from orderdesk.config import Settings
from orderdesk.config import get_settings
from orderdesk.factory import DAOFactory
from orderdesk.factory import DAOSet
from orderdesk.models.enums import BackendType
from orderdesk.storage import create_storage_config
from orderdesk.storage.base import StorageConfig
from orderdesk.storage.properties import StorageProperties
from orderdesk.utils.log import configure_logging
from orderdesk.utils.log import get_logger

logger = get_logger(component="app")


class DataLayer:
    """The storage configuration plus the DAOs built on top of it."""

    def __init__(self, backend: BackendType, storage: StorageConfig, daos: DAOSet):
        self.backend = backend
        self.storage = storage
        self.daos = daos

    @property
    def customers(self):
        return self.daos.customers

    @property
    def orders(self):
        return self.daos.orders

    @property
    def zones(self):
        return self.daos.zones

    def close(self) -> None:
        self.storage.shutdown()

    def __enter__(self) -> "DataLayer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_data_layer(settings: Optional[Settings] = None, register_atexit: bool = True) -> DataLayer:
    """Build storage and DAOs from *settings* (environment when omitted).

    Raises :class:`~orderdesk.errors.ConfigurationError` for bad settings and
    :class:`~orderdesk.errors.StorageConnectionError` when the store cannot be
    reached.
    """

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    backend = BackendType.parse(settings.backend)
    properties = StorageProperties.from_settings(settings)
    storage = create_storage_config(backend, properties)

    try:
        daos = DAOFactory(backend, storage).build()
    except Exception:
        storage.shutdown()
        raise

    if register_atexit:
        atexit.register(storage.shutdown)

    logger.info("Data layer opened", backend=backend.value, url=properties.url)
    return DataLayer(backend, storage, daos)


__all__ = ["DataLayer", "open_data_layer"]
