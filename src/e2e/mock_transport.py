"""Fixture-backed httpx transport with network blocking.

Provides a mock transport that:
- Returns canned responses for registered (method, URL) pairs
- Blocks all other outbound requests
- Records all request attempts, with redacted headers, for audit
"""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import httpx
import structlog

from src.secure_fetch.headers import HeaderSet


logger = structlog.get_logger()


class NetworkAccessBlockedError(httpx.TransportError):
    """Raised when a request targets a URL with no registered fixture."""

    def __init__(self, method: str, url: str) -> None:
        """Initialize the error.

        Args:
            method: HTTP method of the blocked request.
            url: URL that was blocked.
        """
        self.method = method
        self.url = url
        super().__init__(
            f"Network access blocked: {method} {url}. "
            "Mock transport serves registered fixtures only."
        )


@dataclass(frozen=True)
class FixtureResponse:
    """Canned response served for a registered request.

    Attributes:
        status_code: HTTP status code.
        headers: Response headers; repeated names use a list of pairs.
        body: Raw response body.
    """

    status_code: int = 200
    headers: dict[str, str] | list[tuple[str, str]] = field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def json(
        cls, data: Any, status_code: int = 200, content_type: str = "application/json"
    ) -> "FixtureResponse":
        """Build a JSON fixture."""
        return cls(
            status_code=status_code,
            headers={"content-type": content_type},
            body=json.dumps(data).encode(),
        )

    @classmethod
    def text(
        cls, text: str, status_code: int = 200, content_type: str | None = "text/plain"
    ) -> "FixtureResponse":
        """Build a text fixture; content_type None omits the header."""
        headers = {"content-type": content_type} if content_type else {}
        return cls(status_code=status_code, headers=headers, body=text.encode())


@dataclass
class RequestRecord:
    """Record of a request attempt.

    Attributes:
        method: HTTP method.
        url: Requested URL.
        timestamp: When the request was made.
        headers: Request headers with credentials redacted.
        body: Raw request body.
        matched: Whether a fixture answered the request.
        blocked: Whether the request was blocked.
    """

    method: str
    url: str
    timestamp: datetime
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    matched: bool = False
    blocked: bool = False


@dataclass
class MockTransportStats:
    """Statistics for mock transport usage.

    Attributes:
        requests_total: Total requests made.
        requests_matched: Requests answered by a fixture.
        requests_blocked: Requests with no fixture.
    """

    requests_total: int = 0
    requests_matched: int = 0
    requests_blocked: int = 0
    request_log: list[RequestRecord] = field(default_factory=list)


class FixtureTransport(httpx.AsyncBaseTransport):
    """Async httpx transport serving registered fixtures.

    Unregistered requests raise NetworkAccessBlockedError, or get a bare
    404 when allow_unmatched is set. Registered failures raise the given
    exception to simulate network errors.
    """

    def __init__(self, allow_unmatched: bool = False) -> None:
        """Initialize the transport.

        Args:
            allow_unmatched: If True, answer 404 instead of blocking.
        """
        self._allow_unmatched = allow_unmatched
        self._routes: dict[tuple[str, str], FixtureResponse | Exception] = {}
        self._stats = MockTransportStats()
        self._log = logger.bind(component="e2e", subcomponent="mock_transport")

    @property
    def stats(self) -> MockTransportStats:
        """Get transport statistics."""
        return self._stats

    @property
    def last_request(self) -> RequestRecord | None:
        """Get the most recent request record."""
        return self._stats.request_log[-1] if self._stats.request_log else None

    def register(
        self, method: str, url: str, response: FixtureResponse
    ) -> "FixtureTransport":
        """Serve a fixture for a method and exact URL."""
        self._routes[(method.upper(), url)] = response
        return self

    def register_failure(
        self, method: str, url: str, error: Exception
    ) -> "FixtureTransport":
        """Raise an error for a method and exact URL."""
        self._routes[(method.upper(), url)] = error
        return self

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Answer a request from the registered fixtures.

        Raises:
            NetworkAccessBlockedError: If no fixture matches and blocking is on.
        """
        body = await request.aread()
        method = request.method.upper()
        url = str(request.url)
        record = RequestRecord(
            method=method,
            url=url,
            timestamp=datetime.now(UTC),
            headers=HeaderSet(request.headers.items()).redacted(),
            body=body,
        )
        self._stats.requests_total += 1
        self._stats.request_log.append(record)

        route = self._routes.get((method, url))
        if route is None:
            return self._handle_unmatched(record, request)

        record.matched = True
        self._stats.requests_matched += 1
        if isinstance(route, Exception):
            self._log.debug("mock_request_failed", method=method, url=url)
            raise route

        self._log.debug(
            "mock_request_matched",
            method=method,
            url=url,
            status_code=route.status_code,
            bytes=len(route.body),
        )
        return httpx.Response(
            route.status_code,
            headers=route.headers,
            content=route.body,
            request=request,
        )

    def _handle_unmatched(
        self, record: RequestRecord, request: httpx.Request
    ) -> httpx.Response:
        record.blocked = True
        self._stats.requests_blocked += 1
        self._log.warning("mock_request_blocked", method=record.method, url=record.url)

        if not self._allow_unmatched:
            raise NetworkAccessBlockedError(record.method, record.url)

        return httpx.Response(404, request=request)

    def get_request_log(self) -> list[dict[str, object]]:
        """Get the request log as a list of dictionaries."""
        return [
            {
                "method": r.method,
                "url": r.url,
                "timestamp": r.timestamp.isoformat(),
                "headers": r.headers,
                "matched": r.matched,
                "blocked": r.blocked,
            }
            for r in self._stats.request_log
        ]
