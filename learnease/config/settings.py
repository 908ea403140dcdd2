"""LearnEase configuration.

Every value can be overridden through the environment (or a ``.env`` file);
names are case-insensitive. List values are given as JSON, for example
``CASSANDRA_HOSTS='["cass-1", "cass-2"]'``.
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEV_SECRET_KEY = "dev-jwt-secret-key-change-in-production-32chars!"
MIN_SECRET_LENGTH = 32

Environment = Literal["development", "staging", "production", "testing"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Runtime configuration of the progress API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service identity
    app_name: str = Field(default="learnease", description="Service name, also log file prefix")
    app_version: str = Field(default="0.1.0")
    environment: Environment = Field(default="development")
    debug: bool = Field(default=True)
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    # Access tokens are minted by the identity service; this API only verifies them
    auth_secret_key: str = Field(
        default=DEV_SECRET_KEY,
        description="Shared HMAC key used to verify access tokens",
    )
    auth_algorithm: str = Field(default="HS256")
    auth_access_token_expire_minutes: int = Field(
        default=15,
        ge=1,
        description="Lifetime of tokens minted by create_access_token (tests, demo tooling)",
    )

    # Course catalogue
    course_cache_enabled: bool = Field(
        default=True,
        description="Keep course definitions in Redis between reads",
    )
    course_cache_ttl_seconds: int = Field(
        default=300,
        ge=1,
        description="How long a cached course definition stays valid",
    )
    seed_demo_on_startup: bool = Field(
        default=False,
        description="Create the demo catalogue and enrollment when the API starts",
    )

    # Redis (course cache backend)
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_max_connections: int = Field(default=10)
    redis_socket_timeout: float = Field(default=2.0)
    redis_socket_connect_timeout: float = Field(default=2.0)
    redis_retry_on_timeout: bool = Field(default=False)
    redis_health_check_interval: int = Field(default=30)

    # Cassandra (courses and enrollments)
    cassandra_hosts: list[str] = Field(default=["localhost"])
    cassandra_port: int = Field(default=9042)
    cassandra_keyspace: str = Field(default="learnease", pattern=r"^[A-Za-z][A-Za-z0-9_]*$")
    cassandra_username: str | None = Field(default=None)
    cassandra_password: str | None = Field(default=None)
    cassandra_protocol_version: int = Field(default=4)
    cassandra_connect_timeout: float = Field(default=10.0)
    cassandra_request_timeout: float = Field(default=10.0)

    # Logging
    log_level: LogLevel = Field(default="DEBUG")
    log_format: Literal["json", "console"] = Field(default="console")
    log_include_caller_info: bool = Field(default=True)
    log_dir: str = Field(default="logs", description="Rotating log files are written here")
    log_file_max_bytes: int = Field(default=10 * 1024 * 1024)
    log_file_backup_count: int = Field(default=5)
    log_requests: bool = Field(default=True, description="Log start and end of each request")
    log_exclude_paths: list[str] = Field(
        default=["/health", "/health/live", "/health/ready"],
        description="Probe endpoints kept out of the request log",
    )

    # CORS (browser front end)
    cors_origins: list[str] = Field(default=["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])
    cors_max_age: int = Field(default=600)

    @field_validator("auth_secret_key")
    @classmethod
    def validate_secret_length(cls, v: str) -> str:
        """Short HMAC keys are rejected outright."""
        if len(v) < MIN_SECRET_LENGTH:
            raise ValueError(f"auth_secret_key must be at least {MIN_SECRET_LENGTH} characters")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_production(self) -> Self:
        if self.environment == "production":
            if self.auth_secret_key == DEV_SECRET_KEY:
                raise ValueError("auth_secret_key must be set in production")
            if self.debug:
                raise ValueError("debug must be disabled in production")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings()
