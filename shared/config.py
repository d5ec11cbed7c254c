"""
Shared configuration management for the Sydney Events backend.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Document store
    mongodb_uri: Optional[str] = Field(default=None)
    mongodb_database: str = Field(default="sydney_events")

    # Ticketmaster discovery API
    ticketmaster_api_key: Optional[str] = Field(default=None)
    ticketmaster_base_url: str = Field(default="https://app.ticketmaster.com/discovery/v2")
    upstream_timeout_seconds: float = Field(default=10.0)
    event_city: str = Field(default="Sydney")
    event_country_code: str = Field(default="AU")

    # Events proxy cache
    events_cache_ttl_seconds: float = Field(default=300.0)
    events_cache_max_entries: int = Field(default=1024)

    # Mail relay
    email_user: Optional[str] = Field(default=None)
    email_password: Optional[str] = Field(default=None)
    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=465)

    # Front-end bundle
    static_dir: str = Field(default="public")


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int = 3001
    host: str = "0.0.0.0"


def get_config(service_name: str, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
