"""Pre-flight security checks for outgoing requests.

Rules are evaluated in a fixed order and the first breach wins, so the
error for a given request is deterministic:

1. Basic auth is rejected.
2. Credentials must not travel in URL query parameters.
3. API keys must not travel in an ``API-Key`` header.
4. Authorization must use the Bearer scheme.
5. The base URL must use HTTPS.
6. Bearer requests that also send a Cookie header must mark it
   Secure, HttpOnly and SameSite.
"""

from collections.abc import Iterable
from typing import Any
from urllib.parse import parse_qs, urlparse

import structlog

from src.secure_fetch.constants import (
    DEFAULT_SENSITIVE_QUERY_PARAMS,
    HEADER_API_KEY,
    HEADER_AUTHORIZATION,
    HEADER_COOKIE,
    REQUIRED_COOKIE_ATTRIBUTES,
    SCHEME_BASIC,
    SCHEME_BEARER,
    SECURE_URL_SCHEME,
)
from src.secure_fetch.errors import SecurityViolation
from src.secure_fetch.headers import get_header
from src.secure_fetch.metrics import ClientMetrics
from src.secure_fetch.models import SecurityRule


logger = structlog.get_logger()

_COOKIE_ATTRIBUTE_MESSAGES: dict[str, str] = {
    "Secure": "Cookies must be set with the Secure attribute.",
    "HttpOnly": "Cookies must be set with the HttpOnly attribute.",
    "SameSite": "Cookies must be set with the SameSite attribute (Lax or Strict).",
}


def missing_cookie_attributes(cookie: str) -> list[str]:
    """List the required cookie attributes absent from a cookie string.

    Args:
        cookie: Raw Cookie or Set-Cookie header value.

    Returns:
        Missing attribute names, in check order.
    """
    return [attr for attr in REQUIRED_COOKIE_ATTRIBUTES if attr not in cookie]


def check_cookie_attributes(cookie: str) -> None:
    """Require Secure, HttpOnly and SameSite markers on a cookie string.

    Args:
        cookie: Raw cookie header value.

    Raises:
        SecurityViolation: For the first missing attribute.
    """
    missing = missing_cookie_attributes(cookie)
    if missing:
        raise SecurityViolation(
            SecurityRule.COOKIE_ATTRIBUTES, _COOKIE_ATTRIBUTE_MESSAGES[missing[0]]
        )


def _query_param_names(url: str) -> set[str]:
    return set(parse_qs(urlparse(url).query, keep_blank_values=True))


class SecurityPolicy:
    """Validates request headers and URLs before dispatch."""

    def __init__(
        self,
        sensitive_query_params: Iterable[str] = DEFAULT_SENSITIVE_QUERY_PARAMS,
        enforce_cookie_attributes: bool = True,
    ) -> None:
        """Initialize the policy.

        Args:
            sensitive_query_params: Query parameter names that must not
                appear in request URLs.
            enforce_cookie_attributes: Whether a Cookie header sent along
                with a bearer token must carry the secure attributes.
        """
        self._sensitive_query_params = tuple(sensitive_query_params)
        self._enforce_cookie_attributes = enforce_cookie_attributes
        self._log = logger.bind(component="secure_fetch", subcomponent="security")

    def check(
        self,
        base_url: str,
        headers: Any,
        url: str | None = None,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Enforce all rules against a request.

        Args:
            base_url: The client's base URL.
            headers: Final request headers, any supported representation.
            url: Fully resolved request URL; its query is checked too.
            log: Request-bound logger.

        Raises:
            SecurityViolation: On the first rule breach.
        """
        log = log.bind(subcomponent="security") if log is not None else self._log
        try:
            self._check_rules(base_url, headers, url, log)
        except SecurityViolation as e:
            ClientMetrics.get_instance().record_security_violation(e.rule)
            log.error("security_violation", rule=e.rule.value, error=e.message)
            raise

    def _check_rules(
        self,
        base_url: str,
        headers: Any,
        url: str | None,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        authorization = get_header(headers, HEADER_AUTHORIZATION)

        if authorization and authorization.startswith(SCHEME_BASIC):
            raise SecurityViolation(
                SecurityRule.BASIC_AUTH,
                "Insecure authentication scheme detected: Basic Auth is not allowed",
            )

        present = _query_param_names(base_url)
        if url is not None:
            present |= _query_param_names(url)
        for param in self._sensitive_query_params:
            if param in present:
                raise SecurityViolation(
                    SecurityRule.SENSITIVE_QUERY_PARAM,
                    "Sensitive information detected in URL query parameters: "
                    f"{param} must not be passed in the URL",
                )

        if get_header(headers, HEADER_API_KEY):
            raise SecurityViolation(
                SecurityRule.API_KEY_HEADER,
                "Sensitive information detected in headers: "
                "API keys must not be passed in headers directly",
            )

        if authorization and not authorization.startswith(SCHEME_BEARER):
            raise SecurityViolation(
                SecurityRule.NON_BEARER_AUTH,
                "Sensitive information detected: "
                "Only Bearer tokens should be used in Authorization headers",
            )

        if urlparse(base_url).scheme.lower() != SECURE_URL_SCHEME:
            raise SecurityViolation(
                SecurityRule.INSECURE_PROTOCOL,
                "Insecure protocol detected: Use HTTPS instead of HTTP",
            )

        if authorization and authorization.startswith(SCHEME_BEARER):
            cookie = get_header(headers, HEADER_COOKIE)
            if not cookie:
                log.warning(
                    "bearer_without_cookie",
                    hint="Using bearer tokens with cookies is recommended for added security.",
                )
            elif self._enforce_cookie_attributes:
                check_cookie_attributes(cookie)
