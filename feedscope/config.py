"""
Feedscope configuration.

Settings for the discovery crawler and the HTTP fetch adapter,
loaded from environment variables.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# .env in the current working directory, if any
_env_file = Path.cwd() / ".env"


class FeedscopeSettings(BaseSettings):
    """
    Runtime settings from environment variables.

    All settings are prefixed with FEEDSCOPE_ in environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="FEEDSCOPE_",
        env_file=str(_env_file) if _env_file.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Crawler
    max_depth: int = 4

    # HTTP fetch adapter
    request_timeout: float = 30.0
    fetch_retries: int = 2  # Connection-level retries handled by the httpx transport
    user_agent: str = "Feedscope/1.0"

    log_level: str = "INFO"


# Global instance
settings = FeedscopeSettings()
