"""Type-safe environment configuration using Pydantic Settings."""

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.

    Every field has a default so the story commands work without a .env file.
    Secrets are masked in string representations.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields in .env
        env_ignore_empty=True,
    )

    APP_NAME: str = Field(
        default="hn-newsletter",
        description="Application name"
    )

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )

    DEBUG: bool = Field(
        default=False,
        description="Debug mode flag"
    )

    API_TIMEOUT: int = Field(
        default=30,
        description="Timeout in seconds for Hacker News and search API calls",
        gt=0  # Must be greater than 0
    )

    # Remote endpoints
    HN_API_BASE_URL: str = Field(
        default="https://hacker-news.firebaseio.com/v0",
        description="Hacker News Firebase API base URL"
    )

    HN_SEARCH_API_BASE_URL: str = Field(
        default="https://hn.algolia.com/api/v1",
        description="Hacker News full-text search API base URL"
    )

    FIRECRAWL_API_BASE_URL: str = Field(
        default="https://api.firecrawl.dev/v2",
        description="Firecrawl scraping API base URL"
    )

    FIRECRAWL_TIMEOUT_MS: int = Field(
        default=30000,
        description="Scrape timeout in milliseconds passed to Firecrawl",
        gt=0
    )

    # LLM configuration
    LLM_PROVIDER: str = Field(
        default="anthropic",
        description="LiteLLM provider name"
    )

    LLM_DEFAULT_MODEL: str = Field(
        default="claude-sonnet-4-20250514",
        description="Model used by the newsletter agent"
    )

    LLM_BASE_URL: str | None = Field(
        default=None,
        description="Optional custom OpenAI-compatible endpoint"
    )

    LLM_TIMEOUT: int = Field(
        default=120,
        description="LLM request timeout in seconds",
        gt=0
    )

    LLM_TEMPERATURE: float = Field(
        default=0.3,
        description="Sampling temperature for the agent",
        ge=0.0,
        le=2.0
    )

    AGENT_MAX_TURNS: int = Field(
        default=20,
        description="Maximum number of LLM turns per agent run",
        gt=0
    )

    # Secret fields - masked in repr
    FIRECRAWL_API_KEY: SecretStr | None = Field(
        default=None,
        description="Firecrawl API key for article scraping"
    )

    LLM_API_KEY: SecretStr | None = Field(
        default=None,
        description="API key for the LLM provider"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {valid_levels}, got '{v}'"
            )
        return v_upper

    @field_validator("HN_API_BASE_URL", "HN_SEARCH_API_BASE_URL", "FIRECRAWL_API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs so paths can be appended with a single slash."""
        return v.rstrip("/")

    def get_firecrawl_api_key(self) -> str | None:
        """Get the Firecrawl API key value if set."""
        return self.FIRECRAWL_API_KEY.get_secret_value() if self.FIRECRAWL_API_KEY else None

    def get_llm_api_key(self) -> str | None:
        """Get the LLM API key value if set."""
        return self.LLM_API_KEY.get_secret_value() if self.LLM_API_KEY else None


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Loads settings from environment variables and .env file on first call.
    Subsequent calls return the cached instance.

    Returns:
        Settings: The application settings instance

    Raises:
        ValidationError: If environment variables are invalid
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton. Useful for testing."""
    global _settings
    _settings = None
