from __future__ import annotations

import importlib
import os
from dataclasses import dataclass
from types import ModuleType
from typing import Optional

from ..common.validators import coerce_enum
from ..core.constants import DEFAULT_SESSION_TTL_SECONDS
from ..core.enums import SessionBackend, StorageBackend
from ..core.exceptions import ConfigurationError, ValidationError


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "edumanage.config.production"

    if env in {"test", "testing"}:
        return "edumanage.config.testing"

    return "edumanage.config.development"


@dataclass(frozen=True)
class AppConfig:
    """Settings read once at startup and passed explicitly to the wiring code."""

    secret_key: str
    debug: bool = False
    testing: bool = False
    log_level: str = "INFO"

    storage_backend: StorageBackend = StorageBackend.MEMORY
    supabase_url: str = ""
    supabase_api_key: str = ""
    mongodb_uri: str = ""

    session_backend: SessionBackend = SessionBackend.MEMORY
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS

    seed_sample_data: bool = False
    legacy_credentials_enabled: bool = False
    legacy_fixed_password: str = ""
    debug_identity_enabled: bool = False

    @classmethod
    def from_settings(cls, settings: ModuleType) -> "AppConfig":
        try:
            storage_backend = coerce_enum(StorageBackend, getattr(settings, "STORAGE_BACKEND", "memory"), "STORAGE_BACKEND")
            session_backend = coerce_enum(SessionBackend, getattr(settings, "SESSION_BACKEND", "memory"), "SESSION_BACKEND")
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

        config = cls(
            secret_key=str(getattr(settings, "SECRET_KEY", "")),
            debug=bool(getattr(settings, "DEBUG", False)),
            testing=bool(getattr(settings, "TESTING", False)),
            log_level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
            storage_backend=storage_backend,
            supabase_url=str(getattr(settings, "SUPABASE_URL", "")),
            supabase_api_key=str(getattr(settings, "SUPABASE_API_KEY", "")),
            mongodb_uri=str(getattr(settings, "MONGODB_URI", "")),
            session_backend=session_backend,
            session_ttl_seconds=int(getattr(settings, "SESSION_TTL_SECONDS", DEFAULT_SESSION_TTL_SECONDS)),
            seed_sample_data=bool(getattr(settings, "SEED_SAMPLE_DATA", False)),
            legacy_credentials_enabled=bool(getattr(settings, "LEGACY_CREDENTIALS_ENABLED", False)),
            legacy_fixed_password=str(getattr(settings, "LEGACY_FIXED_PASSWORD", "")),
            debug_identity_enabled=bool(getattr(settings, "DEBUG_IDENTITY_ENABLED", False)),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if not self.secret_key:
            raise ConfigurationError("SESSION_SECRET must be set")
        if self.session_ttl_seconds <= 0:
            raise ConfigurationError("SESSION_TTL_SECONDS must be positive")
        if self.storage_backend is StorageBackend.RELATIONAL:
            if not self.supabase_url or not self.supabase_api_key:
                raise ConfigurationError("SUPABASE_URL and SUPABASE_API_KEY are required for the relational backend")
            if not self.supabase_url.startswith(("https://", "http://")):
                raise ConfigurationError(f"SUPABASE_URL must be an http(s) URL, got {self.supabase_url!r}")
        uses_mongo = (
            self.storage_backend is StorageBackend.DOCUMENT
            or self.session_backend is SessionBackend.DOCUMENT
        )
        if uses_mongo and not self.mongodb_uri:
            raise ConfigurationError("MONGODB_URI is required for the document backend")
        if self.legacy_credentials_enabled and not self.legacy_fixed_password:
            raise ConfigurationError("LEGACY_FIXED_PASSWORD is required when legacy credentials are enabled")


def load_config(settings_module: Optional[str] = None) -> AppConfig:
    settings = importlib.import_module(settings_module or get_settings_module())
    return AppConfig.from_settings(settings)
