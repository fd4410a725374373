"""Raw-SQL access objects over :class:`~orderdesk.storage.sql.SqlStorageConfig`."""

from orderdesk.dao.sql.customers import SqlCustomerDAO
from orderdesk.dao.sql.orders import SqlOrderDAO
from orderdesk.dao.sql.zones import SqlShippingZoneDAO

__all__ = ["SqlCustomerDAO", "SqlOrderDAO", "SqlShippingZoneDAO"]
