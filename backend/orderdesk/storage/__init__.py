"""Storage configurations: pooled connections or ORM sessions."""

from __future__ import annotations

from typing import Dict
from typing import Type

from orderdesk.errors import ConfigurationError
from orderdesk.models.enums import BackendType
from orderdesk.storage.base import StorageConfig
from orderdesk.storage.orm import OrmStorageConfig
from orderdesk.storage.properties import StorageProperties
from orderdesk.storage.sql import SqlStorageConfig

STORAGE_BACKENDS: Dict[BackendType, Type[StorageConfig]] = {
    BackendType.PRIMARY_SQL: SqlStorageConfig,
    BackendType.ORM: OrmStorageConfig,
}


def create_storage_config(backend: "BackendType | str", properties: StorageProperties) -> StorageConfig:
    """Build the storage configuration for *backend*.

    ``mysql`` and ``postgresql`` parse as valid tags but have no storage
    implementation; they raise :class:`ConfigurationError`.
    """

    backend = BackendType.parse(backend)
    storage_cls = STORAGE_BACKENDS.get(backend)
    if storage_cls is None:
        supported = ", ".join(tag.value for tag in STORAGE_BACKENDS)
        raise ConfigurationError(f"backend '{backend.value}' is not implemented (supported: {supported})")
    return storage_cls(properties)


__all__ = [
    "StorageConfig",
    "StorageProperties",
    "SqlStorageConfig",
    "OrmStorageConfig",
    "STORAGE_BACKENDS",
    "create_storage_config",
]
