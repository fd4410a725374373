import pytest

from orderdesk.config import Settings
from orderdesk.errors import ConfigurationError
from orderdesk.storage.properties import StorageProperties


def test_defaults():
    """Only the URL is required."""
    props = StorageProperties(url="sqlite:///orders.db")
    assert props.username == ""
    assert props.password == ""
    assert props.max_pool_size == 10
    assert props.min_pool_size == 1
    assert props.pool_timeout == 30.0
    assert props.driver == "sqlite"


@pytest.mark.parametrize("url", ["", "   ", None, "not a url"])
def test_missing_or_malformed_url(url):
    with pytest.raises(ConfigurationError):
        StorageProperties(url=url)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_pool_size": 0},
        {"min_pool_size": -1},
        {"max_pool_size": 2, "min_pool_size": 3},
        {"pool_timeout": 0},
        {"username": None},
        {"password": None},
    ],
)
def test_invalid_pool_settings(kwargs):
    with pytest.raises(ConfigurationError):
        StorageProperties(url="sqlite:///orders.db", **kwargs)


def test_properties_are_immutable():
    props = StorageProperties(url="sqlite:///orders.db")
    with pytest.raises(AttributeError):
        props.url = "sqlite:///other.db"


def test_from_settings():
    settings = Settings(
        backend="orm",
        database_url="sqlite:///shop.db",
        database_username="app",
        database_password="secret",
        pool_max=5,
        pool_min=2,
        pool_timeout=12,
        log_level="DEBUG",
    )
    props = StorageProperties.from_settings(settings)
    assert props.url == "sqlite:///shop.db"
    assert props.username == "app"
    assert props.password == "secret"
    assert props.max_pool_size == 5
    assert props.min_pool_size == 2
    assert props.pool_timeout == 12


def test_error_message_names_the_problem():
    with pytest.raises(ConfigurationError) as excinfo:
        StorageProperties(url="sqlite:///orders.db", max_pool_size=0)
    assert str(excinfo.value).startswith("Invalid storage configuration:")
    assert "max_pool_size" in str(excinfo.value)
