"""ORM access objects over :class:`~orderdesk.storage.orm.OrmStorageConfig`."""

from orderdesk.dao.orm.customers import OrmCustomerDAO
from orderdesk.dao.orm.orders import OrmOrderDAO
from orderdesk.dao.orm.zones import OrmShippingZoneDAO

__all__ = ["OrmCustomerDAO", "OrmOrderDAO", "OrmShippingZoneDAO"]
