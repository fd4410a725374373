from orderdesk.dao.interfaces import CustomerDAO
from orderdesk.dao.interfaces import OrderDAO
from orderdesk.dao.interfaces import ShippingZoneDAO

__all__ = ["CustomerDAO", "OrderDAO", "ShippingZoneDAO"]
