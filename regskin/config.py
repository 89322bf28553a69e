"""Process configuration read from ``REGSKIN_*`` environment variables."""

import os
from typing import Dict, Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, IPvAnyAddress, ValidationError
from pydantic import field_validator, model_validator

from regskin.registry.models import RegistryConfig

ENV_VARS: Dict[str, str] = {
    "REGSKIN_REGISTRY_URL": "registry_url",
    "REGSKIN_CATALOG_LIMIT": "catalog_limit",
    "REGSKIN_LISTEN": "listen",
    "REGSKIN_PORT": "port",
    "REGSKIN_IGNORE_INVALID_CERT": "ignore_invalid_cert",
    "REGSKIN_DISPLAY_REGISTRY": "display_registry",
    "REGSKIN_REGISTRY_NOTE": "registry_note",
    "REGSKIN_REFRESH_INTERVAL": "refresh_interval",
    "REGSKIN_STARTUP_TIMEOUT": "startup_timeout",
    "REGSKIN_REQUEST_TIMEOUT": "request_timeout",
    "REGSKIN_TOKEN_CACHE_TTL": "token_cache_ttl",
    "REGSKIN_LOG_LEVEL": "log_level",
}


class ConfigError(ValueError):
    """Configuration is missing or invalid; the process cannot start"""

    pass


class Settings(BaseModel):
    """regskin settings"""

    model_config = ConfigDict(validate_default=True)

    registry_url: HttpUrl
    catalog_limit: int = Field(default=10000, gt=0)
    listen: IPvAnyAddress = Field(default="127.0.0.1")
    port: int = Field(default=3000, gt=0, le=65535)
    ignore_invalid_cert: bool = False
    display_registry: Optional[str] = None
    registry_note: str = ""
    refresh_interval: float = Field(default=600.0, gt=0)
    startup_timeout: float = Field(default=300.0, gt=0)
    request_timeout: float = Field(default=300.0, gt=0)
    token_cache_ttl: float = Field(default=0.0, ge=0)
    log_level: Optional[str] = None

    @field_validator('registry_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return str(v).rstrip('/')

    @model_validator(mode='after')
    def default_display_registry(self):
        if not self.display_registry:
            self.display_registry = urlparse(str(self.registry_url)).hostname
        return self

    def registry_config(self) -> RegistryConfig:
        return RegistryConfig(
            url=self.registry_url,
            timeout=self.request_timeout,
            catalog_limit=self.catalog_limit,
            verify_tls=not self.ignore_invalid_cert,
            token_cache_ttl=self.token_cache_ttl,
        )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables

    Args:
        environ: Variables to read, defaults to os.environ

    Raises:
        ConfigError: If REGSKIN_REGISTRY_URL is missing or a value is invalid
    """
    if environ is None:
        environ = os.environ

    values = {
        field: environ[var]
        for var, field in ENV_VARS.items()
        if environ.get(var, "") != ""
    }
    if "registry_url" not in values:
        raise ConfigError("REGSKIN_REGISTRY_URL is required")
    if "log_level" not in values and environ.get("REGSKIN_DEBUG", "0") == "1":
        values["log_level"] = "DEBUG"

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
