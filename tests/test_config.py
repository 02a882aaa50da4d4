from __future__ import annotations

from dataclasses import replace

import pytest

from edumanage.config import AppConfig, get_settings_module, load_config
from edumanage.core.enums import SessionBackend, StorageBackend
from edumanage.core.exceptions import ConfigurationError


@pytest.mark.parametrize(
    "env, module",
    [
        ("production", "edumanage.config.production"),
        ("prod", "edumanage.config.production"),
        ("testing", "edumanage.config.testing"),
        ("anything", "edumanage.config.development"),
    ],
)
def test_settings_module_follows_app_env(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == module


def test_testing_settings_load():
    config = load_config("edumanage.config.testing")

    assert config.testing
    assert config.storage_backend is StorageBackend.MEMORY
    assert config.session_backend is SessionBackend.MEMORY
    assert not config.legacy_credentials_enabled


BASE = AppConfig(secret_key="s")


@pytest.mark.parametrize(
    "config",
    [
        replace(BASE, secret_key=""),
        replace(BASE, session_ttl_seconds=0),
        replace(BASE, storage_backend=StorageBackend.RELATIONAL),
        replace(BASE, storage_backend=StorageBackend.RELATIONAL, supabase_url="ftp://x", supabase_api_key="k"),
        replace(BASE, session_backend=SessionBackend.DOCUMENT),
        replace(BASE, legacy_credentials_enabled=True),
    ],
)
def test_invalid_combinations_are_rejected(config):
    with pytest.raises(ConfigurationError):
        config.validate()


def test_unknown_backend_name_is_a_configuration_error():
    class Settings:
        SECRET_KEY = "s"
        STORAGE_BACKEND = "sqlite"

    with pytest.raises(ConfigurationError):
        AppConfig.from_settings(Settings)
