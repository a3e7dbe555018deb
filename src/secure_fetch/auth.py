"""Bearer token and secure-cookie authentication for outgoing requests."""

from typing import Any, Protocol

import structlog

from src.secure_fetch.constants import (
    DEFAULT_AUTH_COOKIE_NAME,
    HEADER_AUTHORIZATION,
    SCHEME_BEARER,
)
from src.secure_fetch.headers import set_header


logger = structlog.get_logger()


class CookieStore(Protocol):
    """Read-only cookie lookup, satisfied by ``httpx.Cookies``."""

    def get(self, name: str) -> str | None:  # pragma: no cover - protocol
        """Return the cookie value, or None if absent."""
        ...


class AuthProvider:
    """Holds authentication state and applies it to request headers.

    The bearer token lives in memory only. Cookie mode assumes the
    transport sends the auth cookie on its own; the provider only checks
    that the cookie exists. When both are configured the token wins.
    """

    def __init__(self, token: str | None = None) -> None:
        """Initialize the provider.

        Args:
            token: Optional initial bearer token.
        """
        self._token: str | None = token or None
        self._use_cookie = False
        self._cookie_name = DEFAULT_AUTH_COOKIE_NAME
        self._log = logger.bind(component="secure_fetch", subcomponent="auth")

    @property
    def has_token(self) -> bool:
        """Check if a bearer token is set."""
        return self._token is not None

    @property
    def uses_cookie(self) -> bool:
        """Check if secure-cookie mode is enabled."""
        return self._use_cookie

    @property
    def cookie_name(self) -> str:
        """Name of the auth cookie checked in cookie mode."""
        return self._cookie_name

    def set_token(self, token: str) -> None:
        """Store a bearer token in memory.

        Args:
            token: The bearer token; an empty string clears it.
        """
        self._token = token or None

    def clear_token(self) -> None:
        """Forget the bearer token."""
        self._token = None

    def configure_cookie(
        self, enabled: bool, name: str = DEFAULT_AUTH_COOKIE_NAME
    ) -> None:
        """Enable or disable secure-cookie authentication.

        Args:
            enabled: Whether to rely on a secure auth cookie.
            name: Name of the auth cookie.
        """
        self._use_cookie = enabled
        self._cookie_name = name

    def apply_auth(
        self,
        headers: Any,
        cookies: CookieStore | None = None,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> Any:
        """Apply authentication to request headers.

        Args:
            headers: Headers in any representation accepted by set_header.
            cookies: Cookie store consulted in cookie mode.
            log: Request-bound logger; defaults to the provider logger.

        Returns:
            The same headers object.
        """
        if self._token is not None:
            return set_header(headers, HEADER_AUTHORIZATION, f"{SCHEME_BEARER}{self._token}")

        if self._use_cookie:
            value = cookies.get(self._cookie_name) if cookies is not None else None
            log = log.bind(subcomponent="auth") if log is not None else self._log
            if value:
                log.info("auth_cookie_present", cookie_name=self._cookie_name)
            else:
                log.warning("auth_cookie_missing", cookie_name=self._cookie_name)

        return headers
