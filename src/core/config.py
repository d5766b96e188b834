"""Pydantic-settings configuration for the source fetch gateway.

Loads state backend, rate limiting, cache and credential parameters from the
.env file with sensible defaults for local development. Computed fields
produce fully-formed connection URLs for each service.
"""

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = "Source Fetch"
    debug: bool = False

    # State backend: "memory" (single process) or "redis"
    state_backend: str = "memory"
    key_prefix: str = "fetch:"

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str = ""
    redis_max_connections: int = 50

    # Rate limiting (fixed window, global limit)
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60

    # Cache / error log
    stale_ttl_seconds: int = 86400
    max_errors: int = 50

    # Outbound HTTP
    http_timeout_seconds: float = 15.0

    # Credential encryption at rest
    secret_key: str = ""

    # CORS
    allowed_origins: str = ""  # Comma-separated extra CORS origins

    # JWT Authentication
    jwt_secret_key: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expiry_minutes: int = 60

    @computed_field
    @property
    def redis_url(self) -> str:
        """Redis connection URL."""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


# Singleton instance
settings = Settings()
