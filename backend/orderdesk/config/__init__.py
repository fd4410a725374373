"""Centralised configuration helper.

Exposes a :class:`Settings` container populated from environment variables
(retrieved via :func:`get_settings`).  A project ``.env`` file is loaded with
*python-dotenv* first; variables already present in the process environment
take precedence over the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from orderdesk.errors import ConfigurationError

# ``_REPO_ROOT`` points to the top-level repository directory (one level
# **above** the "backend" package).  This file lives at
# ``backend/orderdesk/config/__init__.py``.

_REPO_ROOT = Path(__file__).resolve().parents[3]


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'") from exc


@dataclass
class Settings:  # noqa: D401 – simple data container
    """Lightweight settings container populated from environment variables."""

    # Backend selection -------------------------------------------------
    backend: str

    # Database ---------------------------------------------------------
    database_url: str
    database_username: str
    database_password: str

    # Pool -------------------------------------------------------------
    pool_max: int
    pool_min: int
    pool_timeout: int

    # Misc
    log_level: str


def _load_settings() -> Settings:  # noqa: D401 – helper
    """Populate :class:`Settings` from environment variables."""

    env_path = _REPO_ROOT / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)

    return Settings(
        backend=os.getenv("ORDERDESK_BACKEND", "sqlite"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./orders.db"),
        database_username=os.getenv("DATABASE_USERNAME", ""),
        database_password=os.getenv("DATABASE_PASSWORD", ""),
        pool_max=_int("DB_POOL_MAX", 10),
        pool_min=_int("DB_POOL_MIN", 1),
        pool_timeout=_int("DB_POOL_TIMEOUT", 30),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


def get_settings() -> Settings:  # noqa: D401 – public accessor
    """Return :class:`Settings` instance loaded from environment."""

    return _load_settings()


__all__ = [
    "Settings",
    "get_settings",
]
