"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (e.g. SECRET_KEY, DATABASE_URL for the
sql backend) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required_and_backend (secret_key always; database_url or a
    Redis location depending on record_backend).
    """

    # App
    app_name: str = "cms"
    app_version: str = "1.0.0"
    debug: bool = False

    # Collections: "package.module:attribute" holding the static collection configs
    collections_module: str = ""

    # Record store: "sql" (ordered table, SQLAlchemy) or "kv" (Redis namespace)
    record_backend: str = "sql"

    # SQL
    database_url: str = ""
    database_echo: bool = False
    # Optional pool overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Redis key-value store
    redis_url: str | None = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_max_connections: int = 10
    kv_key_prefix: str = ""
    kv_deleted_ttl_days: int = 30

    # Listing
    list_default_limit: int = 10
    sql_list_max_limit: int = 100
    kv_list_max_limit: int = 1000

    # Security (session tokens are verified here, issued elsewhere)
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Rate limits (slowapi syntax)
    write_rate_limit: str = "120/minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required_and_backend(self) -> "Settings":
        """Validate required env and record backend.

        - sql: DATABASE_URL required.
        - kv: REDIS_URL or REDIS_HOST required.
        """
        if self.record_backend == "sql":
            if not self.database_url:
                raise ValueError(
                    "DATABASE_URL is required when record_backend is 'sql'. "
                    "Set in environment or .env file."
                )
        elif self.record_backend == "kv":
            if not self.redis_url and not self.redis_host:
                raise ValueError(
                    "Set REDIS_URL or REDIS_HOST when record_backend is 'kv'."
                )
        else:
            raise ValueError(
                f"record_backend must be 'sql' or 'kv', got: {self.record_backend!r}"
            )
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.list_default_limit < 1:
            raise ValueError("list_default_limit must be at least 1")
        return self

    @property
    def kv_deleted_ttl_seconds(self) -> int:
        return self.kv_deleted_ttl_days * 24 * 60 * 60


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
