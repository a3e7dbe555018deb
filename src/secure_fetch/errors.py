"""Domain-specific error types for the secure fetch client."""

from httpx import TransportError

from src.secure_fetch.models import SecurityRule


class HttpClientError(Exception):
    """Base exception for errors raised by the client itself."""


class SecurityViolation(HttpClientError):
    """Request rejected by the security policy before any network call.

    Attributes:
        rule: The rule that was breached.
    """

    def __init__(self, rule: SecurityRule, message: str) -> None:
        super().__init__(message)
        self.rule = rule
        self.message = message


class StatusError(HttpClientError):
    """Response status code failed the status policy.

    Attributes:
        status_code: HTTP status code from the response.
        status_text: Reason phrase reported by the server.
        resource_url: Final URL of the resource after redirects.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        resource_url: str,
        status_text: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status_text = status_text
        self.resource_url = resource_url


class ResponseDecodeError(HttpClientError):
    """Response body could not be parsed as its declared content type."""

    def __init__(self, message: str, content_type: str | None = None) -> None:
        super().__init__(message)
        self.content_type = content_type


__all__ = [
    "HttpClientError",
    "ResponseDecodeError",
    "SecurityViolation",
    "StatusError",
    "TransportError",
]
