"""Client settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.secure_fetch.config import ClientConfig
from src.secure_fetch.constants import DEFAULT_TIMEOUT_SECONDS


class ClientSettings(BaseSettings):
    """Environment configuration for the secure fetch client.

    Variables use the SECURE_FETCH_ prefix, e.g. SECURE_FETCH_BASE_URL.
    """

    model_config = SettingsConfigDict(
        env_prefix="SECURE_FETCH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(default="https://localhost")
    bearer_token: str | None = Field(default=None)
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=1.0, le=300.0)
    follow_redirects: bool = True
    log_level: str = "INFO"
    log_json: bool = True

    def to_config(self) -> ClientConfig:
        """Build the client configuration from these settings."""
        return ClientConfig(
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            follow_redirects=self.follow_redirects,
        )


def get_settings() -> ClientSettings:
    """Get a settings instance."""
    return ClientSettings()
