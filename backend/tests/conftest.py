from datetime import date

import pytest

from orderdesk.factory import DAOFactory
from orderdesk.models.entities import Customer
from orderdesk.models.entities import Order
from orderdesk.models.entities import ShippingZone
from orderdesk.storage import OrmStorageConfig
from orderdesk.storage import SqlStorageConfig
from orderdesk.storage import StorageProperties


@pytest.fixture
def db_url(tmp_path):
    """URL of a fresh SQLite file, unique per test."""
    return f"sqlite:///{tmp_path / 'orders.db'}"


@pytest.fixture
def properties(db_url):
    return StorageProperties(url=db_url, max_pool_size=4, min_pool_size=1, pool_timeout=2.0)


@pytest.fixture
def sql_storage(properties):
    storage = SqlStorageConfig(properties)
    yield storage
    storage.shutdown()


@pytest.fixture
def orm_storage(properties):
    storage = OrmStorageConfig(properties)
    yield storage
    storage.shutdown()


@pytest.fixture(params=["sqlite", "orm"])
def storage(request, properties):
    """Both storage configurations; tests using it run once per backend."""
    storage_cls = SqlStorageConfig if request.param == "sqlite" else OrmStorageConfig
    storage = storage_cls(properties)
    yield storage
    storage.shutdown()


@pytest.fixture
def daos(storage):
    return DAOFactory(storage.backend, storage).build()


@pytest.fixture
def sample_zone(daos) -> ShippingZone:
    zone = ShippingZone(name="North", rate=5.0)
    daos.zones.insert(zone)
    return zone


@pytest.fixture
def sample_customer(daos, sample_zone) -> Customer:
    customer = Customer(name="Jane Doe", email="jane@example.com", phone="600123456", zone_id=sample_zone.id)
    daos.customers.insert(customer)
    return customer


@pytest.fixture
def sample_order(daos, sample_customer) -> Order:
    order = Order(order_date=date(2024, 1, 10), total=42.50, customer_id=sample_customer.id)
    daos.orders.insert(order)
    return order
