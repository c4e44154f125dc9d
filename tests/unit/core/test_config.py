import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from warden.core.config import Settings, get_settings


def test_settings_defaults():
    """Test that settings load with correct defaults."""
    get_settings.cache_clear()

    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.app_name == "Warden"
    assert settings.environment == "production"
    assert settings.host == "0.0.0.0"
    assert settings.port == 3000
    assert settings.api_prefix == "/api/v1"
    assert settings.secret_key is None
    assert settings.run_migrations_on_startup is True
    assert settings.is_production is True
    assert settings.is_development is False
    assert settings.is_sqlite is True


def test_settings_env_override():
    """Test that environment variables override defaults."""
    with patch.dict(os.environ, {
        "WARDEN_ENVIRONMENT": "development",
        "WARDEN_PORT": "9000",
        "WARDEN_SECRET_KEY": "from-env",
        "WARDEN_DATABASE_URL": "postgresql+asyncpg://u:p@db/warden",
        "WARDEN_RUN_MIGRATIONS_ON_STARTUP": "false",
    }):
        settings = Settings(_env_file=None)

    assert settings.is_development is True
    assert settings.port == 9000
    assert settings.secret_key == "from-env"
    assert settings.is_sqlite is False
    assert settings.run_migrations_on_startup is False


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("api/v2", "/api/v2"), ("/api/v2/", "/api/v2"), ("", "")],
)
def test_api_prefix_normalized(raw, expected):
    assert Settings(_env_file=None, api_prefix=raw).api_prefix == expected


def test_blank_secret_is_unset():
    assert Settings(_env_file=None, secret_key="   ").secret_key is None


def test_invalid_environment_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, environment="staging")


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()
