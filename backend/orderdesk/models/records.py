# SQLAlchemy core imports
from sqlalchemy import Column
from sqlalchemy import Date
from sqlalchemy import Float
from sqlalchemy import ForeignKey
from sqlalchemy import Integer
from sqlalchemy import String
from sqlalchemy.orm import relationship

from orderdesk.database import Base
from orderdesk.models.entities import Customer
from orderdesk.models.entities import Order
from orderdesk.models.entities import ShippingZone

# ---------------------------------------------------------------------------
# Row mappings used by the ORM backend.  Table and column names match
# ``storage/schema.sql`` so both backends can share one database file.
# ---------------------------------------------------------------------------


class ShippingZoneRecord(Base):
    __tablename__ = "shipping_zones"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    rate = Column(Float, nullable=False)

    def to_entity(self) -> ShippingZone:
        return ShippingZone(id=self.id, name=self.name, rate=self.rate)


class CustomerRecord(Base):
    __tablename__ = "customers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False)
    phone = Column(String(15), nullable=True)

    # Many-to-one – no cascade, deleting a referenced zone is rejected by the store
    zone_id = Column(Integer, ForeignKey("shipping_zones.id"), nullable=False, index=True)
    zone = relationship("ShippingZoneRecord")

    def to_entity(self) -> Customer:
        return Customer(id=self.id, name=self.name, email=self.email, phone=self.phone, zone_id=self.zone_id)


class OrderRecord(Base):
    __tablename__ = "orders"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_date = Column(Date, nullable=False, index=True)
    total = Column(Float, nullable=False)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    customer = relationship("CustomerRecord")

    def to_entity(self) -> Order:
        return Order(id=self.id, order_date=self.order_date, total=self.total, customer_id=self.customer_id)


__all__ = ["ShippingZoneRecord", "CustomerRecord", "OrderRecord"]
