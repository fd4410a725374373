"""Shared *Enum* definitions.

The Enums inherit from ``str`` so values render as plain strings in logs and
compare equal to raw literals read from the environment (``backend == "orm"``).
"""

from __future__ import annotations

from enum import Enum

from orderdesk.errors import ConfigurationError


class BackendType(str, Enum):
    """Storage backend tag consumed once at start-up to pick a DAO factory.

    Only ``PRIMARY_SQL`` and ``ORM`` are implemented; ``MYSQL`` and
    ``POSTGRESQL`` are declared so the tag set stays closed and enumerable.
    """

    PRIMARY_SQL = "sqlite"
    ORM = "orm"
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"

    @classmethod
    def parse(cls, tag: "str | BackendType") -> "BackendType":
        """Return the member matching *tag* (value or member name, any case)."""

        if isinstance(tag, cls):
            return tag

        normalised = str(tag or "").strip().lower()
        for member in cls:
            if normalised in (member.value, member.name.lower()):
                return member

        valid = ", ".join(member.value for member in cls)
        raise ConfigurationError(f"unknown backend type '{tag}' (expected one of: {valid})")


__all__ = ["BackendType"]
