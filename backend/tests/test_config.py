import pytest

from orderdesk.config import get_settings
from orderdesk.errors import ConfigurationError

_VARS = [
    "ORDERDESK_BACKEND",
    "DATABASE_URL",
    "DATABASE_USERNAME",
    "DATABASE_PASSWORD",
    "DB_POOL_MAX",
    "DB_POOL_MIN",
    "DB_POOL_TIMEOUT",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = get_settings()
    assert settings.backend == "sqlite"
    assert settings.database_url == "sqlite:///./orders.db"
    assert settings.database_username == ""
    assert settings.database_password == ""
    assert settings.pool_max == 10
    assert settings.pool_min == 1
    assert settings.pool_timeout == 30
    assert settings.log_level == "INFO"


def test_values_from_environment(clean_env):
    clean_env.setenv("ORDERDESK_BACKEND", "orm")
    clean_env.setenv("DATABASE_URL", "sqlite:////var/lib/orders.db")
    clean_env.setenv("DB_POOL_MAX", "4")
    clean_env.setenv("DB_POOL_MIN", "2")
    clean_env.setenv("LOG_LEVEL", "DEBUG")

    settings = get_settings()
    assert settings.backend == "orm"
    assert settings.database_url == "sqlite:////var/lib/orders.db"
    assert settings.pool_max == 4
    assert settings.pool_min == 2
    assert settings.log_level == "DEBUG"


def test_blank_integer_uses_default(clean_env):
    clean_env.setenv("DB_POOL_MAX", "  ")
    assert get_settings().pool_max == 10


def test_bad_integer_raises(clean_env):
    clean_env.setenv("DB_POOL_TIMEOUT", "soon")
    with pytest.raises(ConfigurationError) as excinfo:
        get_settings()
    assert "DB_POOL_TIMEOUT" in str(excinfo.value)
