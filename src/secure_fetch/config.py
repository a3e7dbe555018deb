"""Configuration model for the secure fetch client."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.secure_fetch.constants import (
    DEFAULT_SENSITIVE_QUERY_PARAMS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    FORBIDDEN_DEFAULT_HEADERS,
)


class ClientConfig(BaseModel):
    """Configuration for a SecureHttpClient.

    The base URL is prepended verbatim to every endpoint. Security rules
    are always enforced; the toggles here only tune the cookie checks.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: Annotated[str, Field(min_length=1, description="Prefix for all endpoints")]
    timeout_seconds: Annotated[float, Field(ge=1.0, le=300.0)] = DEFAULT_TIMEOUT_SECONDS
    follow_redirects: bool = True
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = DEFAULT_USER_AGENT
    default_headers: dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
    sensitive_query_params: tuple[str, ...] = DEFAULT_SENSITIVE_QUERY_PARAMS
    enforce_cookie_attributes: bool = Field(
        default=True,
        description="Require Secure/HttpOnly/SameSite on a Cookie header sent with a bearer token",
    )
    warn_insecure_set_cookie: bool = Field(
        default=True,
        description="Warn when a response Set-Cookie lacks Secure/HttpOnly/SameSite",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop a trailing slash so endpoints can start with one."""
        return v.rstrip("/")

    @field_validator("default_headers")
    @classmethod
    def validate_no_auth_headers(cls, v: dict[str, str]) -> dict[str, str]:
        """Ensure no credentials are stored in config."""
        for key in v:
            if key.lower() in FORBIDDEN_DEFAULT_HEADERS:
                msg = (
                    f"Header '{key}' must not be stored in config; "
                    "use the auth provider instead"
                )
                raise ValueError(msg)
        return v
