# =============================================================================
# Gateway Settings
# =============================================================================
"""
Pydantic Settings configuration for the GitHub gateway.

Loads configuration from environment variables with validation and type safety.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Gateway settings loaded from environment variables.

    All settings can be overridden via environment variables.
    The .env file is automatically loaded if present.

    Attributes:
        github_token: GitHub personal access token.
        github_api_base_url: Base URL for REST calls.
        github_graphql_url: Absolute URL of the GraphQL endpoint.
        github_request_timeout: Request timeout in seconds.
        github_user_agent: User-Agent header sent with every request.
        github_accept: Accept header for REST calls.
        cache_backend: Cache store implementation (memory or redis).
        redis_host: Redis server hostname.
        redis_port: Redis server port.
        redis_db: Redis database number.
        redis_password: Optional Redis password.
        redis_key_prefix: Namespace prepended to every Redis key.
        log_level: Logging level.
    """

    # -------------------------------------------------------------------------
    # GitHub API Settings
    # -------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token",
    )
    github_api_base_url: str = Field(
        default="https://api.github.com/",
        description="GitHub REST API base URL",
    )
    github_graphql_url: str = Field(
        default="https://api.github.com/graphql",
        description="GitHub GraphQL endpoint",
    )
    github_request_timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
    )
    github_user_agent: str = Field(
        default="github-gateway/0.1.0",
        description="User-Agent header value",
    )
    github_accept: str = Field(
        default="application/vnd.github.v3+json",
        description="Accept header for REST requests",
    )

    # -------------------------------------------------------------------------
    # Cache Settings
    # -------------------------------------------------------------------------
    cache_backend: Literal["memory", "redis"] = Field(
        default="memory",
        description="Cache store backend",
    )
    redis_host: str = Field(
        default="localhost",
        description="Redis host address"
    )
    redis_port: int = Field(
        default=6379,
        description="Redis port number"
    )
    redis_db: int = Field(
        default=0,
        description="Redis database number"
    )
    redis_password: Optional[str] = Field(
        default=None,
        description="Redis password"
    )
    redis_key_prefix: str = Field(
        default="github:",
        description="Prefix for all gateway keys in Redis"
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """
        Accept log levels in any case.

        Args:
            v: The raw log level value.

        Returns:
            The upper-cased log level.
        """
        return v.upper() if isinstance(v, str) else v

    @property
    def github_is_configured(self) -> bool:
        """
        Check if a GitHub token has been provided.

        Returns:
            True if a token is set.
        """
        return bool(self.github_token)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached gateway settings instance.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings instance with loaded configuration.
    """
    return Settings()
