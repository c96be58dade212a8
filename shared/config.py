"""
Shared configuration management for the Database Server Web gateway.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env(*names: str) -> AliasChoices:
    """Accept the field name as well as the deployment env var names."""
    return AliasChoices(*names)


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = Field(default="local", validation_alias=_env("env", "DBWEB_ENV"))
    log_level: str = Field(default="info", validation_alias=_env("log_level", "DBWEB_LOG_LEVEL"))

    # Trust authority (auth microservice)
    auth_service_url: str = Field(
        default="http://auth-microservice:3370",
        validation_alias=_env("auth_service_url", "AUTH_SERVICE_URL"),
    )
    authority_timeout_seconds: float = Field(
        default=5.0,
        validation_alias=_env("authority_timeout_seconds", "AUTH_VALIDATE_TIMEOUT"),
    )
    proxy_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=_env("proxy_timeout_seconds", "AUTH_PROXY_TIMEOUT"),
    )

    # PostgreSQL
    postgres_host: str = Field(
        default="db-server-postgres",
        validation_alias=_env("postgres_host", "DB_SERVER_POSTGRES_HOST"),
    )
    postgres_port: int = Field(default=5432, validation_alias=_env("postgres_port", "DB_SERVER_PORT"))
    postgres_user: str = Field(default="dbadmin", validation_alias=_env("postgres_user", "DB_SERVER_ADMIN_USER"))
    postgres_password: str = Field(
        default="",
        validation_alias=_env("postgres_password", "DB_SERVER_ADMIN_PASSWORD"),
    )
    postgres_database: str = Field(
        default="postgres",
        validation_alias=_env("postgres_database", "DB_SERVER_INIT_DB"),
    )

    # Redis
    redis_host: str = Field(default="db-server-redis", validation_alias=_env("redis_host", "DB_SERVER_REDIS_HOST"))
    redis_port: int = Field(default=6379, validation_alias=_env("redis_port", "REDIS_SERVER_PORT"))

    # Probes
    probe_connect_timeout_seconds: float = Field(
        default=5.0,
        validation_alias=_env("probe_connect_timeout_seconds", "PROBE_CONNECT_TIMEOUT"),
    )
    probe_command_timeout_seconds: float = Field(
        default=5.0,
        validation_alias=_env("probe_command_timeout_seconds", "PROBE_COMMAND_TIMEOUT"),
    )


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str = "database-server-web"
    port: int = Field(default=3390, validation_alias=_env("port", "PORT"))
    host: str = Field(default="0.0.0.0", validation_alias=_env("host", "HOST"))


def get_config(service_name: str = "database-server-web", **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
