"""
Shared configuration management for the Edge Article Cache.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="ARTICLES_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local", description="Deployment environment")
    log_level: str = Field(default="info", description="Root log level")

    # External services
    redis_url: str = Field(default="redis://localhost:6379/0", description="Key-value store URL")
    api_server_base_url: str = Field(default="http://localhost:8000", description="Upstream content API base URL")
    upstream_timeout_seconds: float = Field(default=10.0, gt=0, description="Upstream request timeout")


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)


def describe_config(config: BaseConfig, redact: Optional[tuple] = ("redis_url",)) -> dict:
    """Return a log-safe view of the configuration."""
    data = config.model_dump()
    for key in redact or ():
        if key in data and data[key]:
            data[key] = "***"
    return data
