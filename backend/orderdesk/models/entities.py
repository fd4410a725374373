"""Domain entities handed to and returned by the DAOs.

Every field is validated on construction **and** on assignment
(``validate_assignment=True``), so an invalid value never survives long
enough to reach the store.  Pydantic's own error type is translated into
:class:`orderdesk.errors.ValidationError` at the model boundary.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator

from orderdesk.errors import ValidationError
from orderdesk.utils.time import today

MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 100
MAX_ORDER_TOTAL = 999_999.99
MAX_SHIPPING_RATE = 999.99

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@(.+)$")
PHONE_PATTERN = re.compile(r"^[0-9]{9}$")


def _translate(exc: PydanticValidationError) -> ValidationError:
    """Collapse pydantic's error report into our single-field error."""

    first = exc.errors()[0]
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else ""
    cause = (first.get("ctx") or {}).get("error")
    message = str(cause) if cause else first.get("msg", "invalid value")
    return ValidationError(message, field=field, value=first.get("input"))


def _require_text(value: str, label: str, max_length: int) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} must not be empty")
    if len(value) > max_length:
        raise ValueError(f"{label} must not exceed {max_length} characters")
    return value


def _require_positive(value: int, label: str) -> int:
    if value <= 0:
        raise ValueError(f"{label} must be a positive integer")
    return value


class DomainModel(BaseModel):
    """Base for entities: validated on every write, ``id`` assigned by the store."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: Optional[int] = None

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise _translate(exc) from exc

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as exc:
            raise _translate(exc) from exc

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: Optional[int]) -> Optional[int]:
        if value is not None:
            _require_positive(value, "id")
        return value

    @property
    def is_transient(self) -> bool:
        """True until the store has assigned an identifier."""
        return self.id is None


class ShippingZone(DomainModel):
    """A delivery zone with a flat shipping rate."""

    name: str
    rate: float

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _require_text(value, "zone name", MAX_NAME_LENGTH)

    @field_validator("rate")
    @classmethod
    def _check_rate(cls, value: float) -> float:
        value = round(value, 2)
        if not 0 <= value <= MAX_SHIPPING_RATE:
            raise ValueError(f"shipping rate must be between 0 and {MAX_SHIPPING_RATE}")
        return value

    def __str__(self) -> str:
        return f"{self.name} ({self.rate:.2f})"


class Customer(DomainModel):
    """A customer living in one shipping zone."""

    name: str
    email: str
    phone: Optional[str] = None
    zone_id: int

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _require_text(value, "name", MAX_NAME_LENGTH)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = _require_text(value, "email", MAX_EMAIL_LENGTH)
        if not EMAIL_PATTERN.match(value):
            raise ValueError("invalid email format")
        return value

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if not PHONE_PATTERN.match(value):
            raise ValueError("phone must have exactly 9 digits")
        return value

    @field_validator("zone_id")
    @classmethod
    def _check_zone(cls, value: int) -> int:
        return _require_positive(value, "zone id")

    def __str__(self) -> str:
        return f"{self.name} ({self.email})"


class Order(DomainModel):
    """A customer order placed on a given day."""

    order_date: date
    total: float
    customer_id: int

    @field_validator("order_date")
    @classmethod
    def _check_date(cls, value: date) -> date:
        if value > today():
            raise ValueError("order date cannot be in the future")
        return value

    @field_validator("total")
    @classmethod
    def _check_total(cls, value: float) -> float:
        value = round(value, 2)
        if not 0 <= value <= MAX_ORDER_TOTAL:
            raise ValueError(f"order total must be between 0 and {MAX_ORDER_TOTAL}")
        return value

    @field_validator("customer_id")
    @classmethod
    def _check_customer(cls, value: int) -> int:
        return _require_positive(value, "customer id")

    def __str__(self) -> str:
        return f"Order #{self.id} on {self.order_date.isoformat()}: {self.total:.2f}"


__all__ = ["DomainModel", "ShippingZone", "Customer", "Order"]
