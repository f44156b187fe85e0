"""Application settings and configuration.

This module defines all configuration options for the NEDApay backend.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="NEDApay", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./nedapay.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Redis configuration for the shared challenge store
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")

    # Challenge-response authentication
    challenge_store_backend: Literal["memory", "redis"] = Field(
        default="memory",
        alias="CHALLENGE_STORE_BACKEND",
    )
    challenge_ttl_seconds: int = Field(default=300, gt=0, alias="CHALLENGE_TTL_SECONDS")
    challenge_prefix: str = Field(default="iTZS-auth", alias="CHALLENGE_PREFIX")
    challenge_max_outstanding: int = Field(
        default=10_000,
        gt=0,
        alias="CHALLENGE_MAX_OUTSTANDING",
    )

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Stellar network the wallet keys belong to
    stellar_network: Literal["TESTNET", "PUBLIC"] = Field(
        default="TESTNET",
        alias="STELLAR_NETWORK",
    )
    asset_code: str = Field(default="iTZS", alias="ASSET_CODE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def horizon_url(self) -> str:
        """Return the Horizon endpoint matching the configured network."""
        if self.stellar_network == "PUBLIC":
            return "https://horizon.stellar.org"
        return "https://horizon-testnet.stellar.org"


settings = Settings()  # type: ignore[call-arg]
