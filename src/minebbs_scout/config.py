# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to site endpoints, fetch limits, logging config and feed limits

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="MINEBBS_SCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )

    # Site / backend endpoints
    site_origin: str = Field(
        default="https://www.minebbs.com", description="Origin prefixed to site-relative URLs found in markup"
    )
    api_base: str = Field(default="https://mbapi.xyqaq.cn/api", description="Base URL of the JSON REST backend")
    versions_api: str = Field(
        default="https://api.mc.minebbs.com/api/v1/versions/", description="Endpoint of the game version catalog"
    )

    # HTTP Configuration
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        description="User-Agent sent with every request",
    )
    request_timeout: float = Field(
        default=15.0, gt=0, description="Deadline in seconds for a single fetch, connect and read included"
    )
    auth_cookies: str | None = Field(
        default=None, description="Session cookies forwarded to the JSON backend as the X-Cookies header"
    )
    cache_enabled: bool = Field(default=True, description="Remember the last resolved identifier per URL")

    # Extraction limits and defaults
    default_avatar: str = Field(
        default="https://www.minebbs.com/data/avatars/default/0.png",
        description="Avatar used when a featured item carries none",
    )
    notice_limit: int = Field(default=3, ge=0, description="Maximum notices read from the homepage")
    topic_limit: int = Field(default=10, ge=0, description="Maximum latest topics read from the homepage")
    updates_limit: int = Field(default=5, ge=0, description="Maximum update entries kept in a resource summary")
    versions_page_size: int = Field(default=10, ge=1, description="Page size requested from the version catalog")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")


# Global config instance - lazy loaded when first accessed
_config_instance: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Creates the config on first access, subsequent calls return the same instance.

    Returns:
        Config: The application configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when environment variables change at runtime.

    Returns:
        Config: A fresh configuration instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
