from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "RoomSync API"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_migrations_url: str | None = None

    # Identity tokens (issued by the external identity provider)
    identity_jwt_key: str
    identity_jwt_algorithm: str = "HS256"
    identity_jwt_audience: str | None = None
    identity_jwt_issuer: str | None = None

    # Identity provider admin API (account deletion)
    identity_admin_url: str | None = None  # If not set, identity deletion is logged only
    identity_admin_key: str | None = None

    # Billing provider (RevenueCat REST API)
    billing_api_url: str = "https://api.revenuecat.com/v1"
    billing_api_key: str | None = None
    billing_webhook_secret: str | None = None
    billing_timeout_seconds: float = 10.0

    # Subscriptions
    grace_period_days: int = 16
    grace_recheck_delay_seconds: float = 2.0
    resume_grace_on_startup: bool = True
    super_admin_codes: str = ""  # Comma separated, compared case-insensitively

    # Invitations and transfers
    invite_expire_days: int = 7
    invite_code_length: int = 6
    transfer_expire_days: int = 7

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_task_queue: str = "roomsync-queue"

    # Maintenance (Temporal scheduled workflow)
    maintenance_schedule: str | None = None  # Cron syntax, e.g., "0 3 * * *"
    cleanup_retention_days: int = 30

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    @field_validator("identity_jwt_key")
    @classmethod
    def validate_identity_key(cls, v: str) -> str:
        if len(v) < 32:
            raise ValueError("IDENTITY_JWT_KEY must be at least 32 characters")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Reject wildcard origins since credentials are allowed."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @property
    def super_admin_code_set(self) -> set[str]:
        """Configured super admin codes, uppercased."""
        return {code.strip().upper() for code in self.super_admin_codes.split(",") if code.strip()}


@lru_cache
def get_settings() -> Settings:
    return Settings()
