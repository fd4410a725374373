"""Connection parameters shared by every storage backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from orderdesk.errors import ConfigurationError

if TYPE_CHECKING:  # pragma: no cover
    from orderdesk.config import Settings

DEFAULT_MAX_POOL_SIZE = 10
DEFAULT_MIN_POOL_SIZE = 1
DEFAULT_POOL_TIMEOUT = 30.0


@dataclass(frozen=True)
class StorageProperties:
    """Validated, immutable connection parameters.

    ``url`` is a SQLAlchemy-style URL (``sqlite:///orders.db``).  Credentials
    default to empty strings for stores without authentication.
    """

    url: str
    username: str = ""
    password: str = ""
    max_pool_size: int = DEFAULT_MAX_POOL_SIZE
    min_pool_size: int = DEFAULT_MIN_POOL_SIZE
    pool_timeout: float = DEFAULT_POOL_TIMEOUT

    def __post_init__(self):
        if not self.url or not isinstance(self.url, str) or not self.url.strip():
            raise ConfigurationError("a database URL is required")
        try:
            make_url(self.url)
        except ArgumentError as exc:
            raise ConfigurationError(f"malformed database URL '{self.url}'") from exc

        if self.username is None or self.password is None:
            raise ConfigurationError("credentials must be strings (use '' for none)")
        if self.max_pool_size < 1:
            raise ConfigurationError(f"max_pool_size must be at least 1, got {self.max_pool_size}")
        if self.min_pool_size < 0:
            raise ConfigurationError(f"min_pool_size must not be negative, got {self.min_pool_size}")
        if self.min_pool_size > self.max_pool_size:
            raise ConfigurationError(
                f"min_pool_size ({self.min_pool_size}) exceeds max_pool_size ({self.max_pool_size})"
            )
        if self.pool_timeout <= 0:
            raise ConfigurationError(f"pool_timeout must be positive, got {self.pool_timeout}")

    @property
    def driver(self) -> str:
        """Backend name of the URL, e.g. ``sqlite``."""
        return make_url(self.url).get_backend_name()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "StorageProperties":
        """Build properties from the process settings."""
        return cls(
            url=settings.database_url,
            username=settings.database_username,
            password=settings.database_password,
            max_pool_size=settings.pool_max,
            min_pool_size=settings.pool_min,
            pool_timeout=settings.pool_timeout,
        )


__all__ = [
    "StorageProperties",
    "DEFAULT_MAX_POOL_SIZE",
    "DEFAULT_MIN_POOL_SIZE",
    "DEFAULT_POOL_TIMEOUT",
]
