from orderdesk.models.entities import Customer
from orderdesk.models.entities import Order
from orderdesk.models.entities import ShippingZone
from orderdesk.models.enums import BackendType

__all__ = ["Customer", "Order", "ShippingZone", "BackendType"]
