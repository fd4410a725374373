"""Backend-agnostic storage configuration contract."""

from __future__ import annotations

import threading
from abc import ABC
from abc import abstractmethod
from contextlib import AbstractContextManager
from typing import Any

from orderdesk.models.enums import BackendType
from orderdesk.storage.properties import StorageProperties
from orderdesk.utils.log import get_logger


class StorageConfig(ABC):
    """Owns the pool/session lifecycle for one backend.

    Built once at process start and passed to every DAO.  DAOs only ever call
    :meth:`unit_of_work`; :meth:`shutdown` belongs to whoever built the
    configuration.
    """

    backend: BackendType

    def __init__(self, properties: StorageProperties):
        self._properties = properties
        self._shutdown_lock = threading.Lock()
        self._closed = False
        self.log = get_logger(component="storage", backend=self.backend.value)

    # Read-only accessors ------------------------------------------------

    @property
    def properties(self) -> StorageProperties:
        return self._properties

    @property
    def url(self) -> str:
        return self._properties.url

    @property
    def username(self) -> str:
        return self._properties.username

    @property
    def password(self) -> str:
        return self._properties.password

    @property
    def max_pool_size(self) -> int:
        return self._properties.max_pool_size

    @property
    def min_pool_size(self) -> int:
        return self._properties.min_pool_size

    @property
    def closed(self) -> bool:
        return self._closed

    # Lifecycle -----------------------------------------------------------

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[Any]:
        """Borrow a connection/session; released when the context exits.

        Raises :class:`~orderdesk.errors.StorageConnectionError` when nothing
        can be acquired.
        """

    def shutdown(self) -> None:
        """Release every pooled resource.  Safe to call more than once."""
        with self._shutdown_lock:
            if self._closed:
                return
            self._closed = True
            self._release()
        self.log.info("Storage shut down", url=self.url)

    @abstractmethod
    def _release(self) -> None:
        """Dispose of the backend's pool or session factory (called once)."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r}, closed={self._closed})"


__all__ = ["StorageConfig"]
