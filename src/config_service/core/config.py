from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
LOG_FORMATS = ("json", "console")
SSL_MODES = ("disable", "prefer", "require", "verify-ca", "verify-full")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Config Service"
    app_version: str = "1.0.0"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True  # Always off when app_env is production

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 8080
    server_read_timeout: int = 30
    server_write_timeout: int = 30
    server_idle_timeout: int = 120

    # Shutdown
    shutdown_grace_period: int = 30

    # Database
    database_url: str | None = None  # Overrides the host/port/user fields below
    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "postgres"
    database_password: str = "postgres"
    database_name: str = "config_service"
    database_ssl_mode: str = "disable"  # disable, prefer, require, verify-ca, verify-full
    database_max_open_conns: int = 25
    database_max_idle_conns: int = 25
    database_conn_max_lifetime: int = 300  # seconds
    database_migrations_path: str = "src/alembic"
    database_auto_migrate: bool = True

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0

    # Kafka (declared for deployment parity, no producer/consumer is wired)
    kafka_brokers: list[str] = ["localhost:9092"]
    kafka_topic: str = "config-events"

    # Logging
    log_level: str = "info"
    log_format: str = "json"  # json, console

    # Metrics
    metrics_enabled: bool = True
    metrics_path: str = "/metrics"
    metrics_refresh_interval: float = 30.0  # seconds between pool and template gauge updates

    # CORS
    cors_origins: list[str] = ["*"]

    # Health checks (seconds)
    health_check_timeout: float = 5.0
    readiness_check_timeout: float = 3.0

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.lower()
        if v not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in LOG_FORMATS:
            raise ValueError(f"LOG_FORMAT must be one of: {', '.join(LOG_FORMATS)}")
        return v

    @field_validator("database_ssl_mode")
    @classmethod
    def validate_ssl_mode(cls, v: str) -> str:
        if v not in SSL_MODES:
            raise ValueError(f"DATABASE_SSL_MODE must be one of: {', '.join(SSL_MODES)}")
        return v

    @field_validator("metrics_path")
    @classmethod
    def validate_metrics_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("METRICS_PATH must start with '/'")
        return v

    @field_validator("server_port", "database_port", "redis_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for the application engine (asyncpg driver)."""
        if self.database_url:
            url = self.database_url
            if url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            elif url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql+asyncpg://", 1)
            return url
        return (
            f"postgresql+asyncpg://{quote_plus(self.database_user)}:"
            f"{quote_plus(self.database_password)}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def sync_database_url(self) -> str:
        """SQLAlchemy URL for migrations (psycopg2 driver)."""
        return self.async_database_url.replace("+asyncpg", "")

    @property
    def openapi_enabled(self) -> bool:
        return self.enable_openapi and self.app_env != "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
