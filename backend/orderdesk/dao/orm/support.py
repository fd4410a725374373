from __future__ import annotations

from typing import Optional

from orderdesk.errors import PersistenceError


def generated_key(new_id: Optional[int], entity: str) -> int:
    """Return the id assigned at flush or raise :class:`PersistenceError`."""
    if not new_id:
        raise PersistenceError(f"Inserting {entity} returned no generated key")
    return new_id


__all__ = ["generated_key"]
