"""Security-checked async HTTP client."""

import time
from types import TracebackType
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from src.secure_fetch.auth import AuthProvider
from src.secure_fetch.body import (
    as_method,
    encode_payload,
    prepare_body,
    prepare_headers,
)
from src.secure_fetch.config import ClientConfig
from src.secure_fetch.constants import (
    HEADER_CONTENT_TYPE,
    HEADER_SET_COOKIE,
    HEADER_USER_AGENT,
    HTTP_STATUS_NO_CONTENT,
)
from src.secure_fetch.decoder import decode_response
from src.secure_fetch.errors import ResponseDecodeError, StatusError
from src.secure_fetch.headers import HeaderSet, get_header, set_header
from src.secure_fetch.metrics import (
    FAILURE_BUILD,
    FAILURE_DECODE,
    FAILURE_STATUS,
    FAILURE_TRANSPORT,
    ClientMetrics,
)
from src.secure_fetch.models import HttpMethod
from src.secure_fetch.security import SecurityPolicy, missing_cookie_attributes
from src.secure_fetch.status import StatusPolicy


if TYPE_CHECKING:
    from src.settings.app import ClientSettings


logger = structlog.get_logger()


class SecureHttpClient:
    """Thin async wrapper around an httpx transport.

    Each call runs a fixed pipeline:
    - apply authentication to a fresh copy of the caller's headers
    - prepare the body and default its Content-Type
    - enforce the security policy on the final headers
    - send exactly one request through the transport
    - apply the status policy, then decode the body by Content-Type

    Nothing is retried; security, status, decode and transport errors
    propagate to the caller after being logged once.
    """

    get_header = staticmethod(get_header)
    set_header = staticmethod(set_header)

    def __init__(
        self,
        config: ClientConfig | str,
        auth: AuthProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration, or just a base URL.
            auth: Authentication provider; without one no auth is applied
                and a warning is logged on the first request.
            transport: Transport for the owned httpx client (tests pass
                a mock transport here).
            http_client: Externally managed httpx client to use instead;
                it is not closed by aclose().
        """
        if isinstance(config, str):
            config = ClientConfig(base_url=config)
        self._config = config
        self._auth = auth
        self._warned_no_auth = False
        self._security = SecurityPolicy(
            sensitive_query_params=config.sensitive_query_params,
            enforce_cookie_attributes=config.enforce_cookie_attributes,
        )
        self._status = StatusPolicy()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_seconds,
            follow_redirects=config.follow_redirects,
            transport=transport,
        )
        self._log = logger.bind(component="secure_fetch", subcomponent="client")

    @classmethod
    def from_settings(
        cls,
        settings: "ClientSettings",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "SecureHttpClient":
        """Build a client from environment settings.

        An AuthProvider is attached only when a bearer token is configured.

        Args:
            settings: Loaded client settings.
            transport: Optional transport override.

        Returns:
            Configured client.
        """
        auth = AuthProvider(settings.bearer_token) if settings.bearer_token else None
        return cls(settings.to_config(), auth=auth, transport=transport)

    @property
    def base_url(self) -> str:
        """Base URL prepended to every endpoint."""
        return self._config.base_url

    @property
    def config(self) -> ClientConfig:
        """Client configuration."""
        return self._config

    @property
    def auth(self) -> AuthProvider | None:
        """Authentication provider, if any."""
        return self._auth

    @property
    def metrics(self) -> ClientMetrics:
        """Process-wide client metrics."""
        return ClientMetrics.get_instance()

    async def __aenter__(self) -> "SecureHttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance owns it."""
        if self._owns_client:
            await self._client.aclose()

    async def get(self, endpoint: str, headers: Any = None) -> Any:
        """Perform a GET request and return the decoded body."""
        return await self.request(HttpMethod.GET, endpoint, None, headers)

    async def post(self, endpoint: str, body: Any = None, headers: Any = None) -> Any:
        """Perform a POST request and return the decoded body."""
        return await self.request(HttpMethod.POST, endpoint, body, headers)

    async def put(self, endpoint: str, body: Any = None, headers: Any = None) -> Any:
        """Perform a PUT request and return the decoded body."""
        return await self.request(HttpMethod.PUT, endpoint, body, headers)

    async def patch(self, endpoint: str, body: Any = None, headers: Any = None) -> Any:
        """Perform a PATCH request and return the decoded body."""
        return await self.request(HttpMethod.PATCH, endpoint, body, headers)

    async def delete(self, endpoint: str, body: Any = None, headers: Any = None) -> Any:
        """Perform a DELETE request and return the decoded body."""
        return await self.request(HttpMethod.DELETE, endpoint, body, headers)

    async def head(self, endpoint: str, headers: Any = None) -> HeaderSet:
        """Perform a HEAD request and return the response headers."""
        url = self._resolve(endpoint)
        log = self._log.bind(method=HttpMethod.HEAD.value, url=url)
        response = await self._send(HttpMethod.HEAD, url, None, headers, log)
        log.info("request_completed", status_code=response.status_code)
        return HeaderSet(response.headers.items())

    async def request(
        self,
        method: HttpMethod | str,
        endpoint: str,
        body: Any = None,
        headers: Any = None,
    ) -> Any:
        """Perform a request and return the decoded body.

        Args:
            method: HTTP method.
            endpoint: Path appended to the base URL.
            body: Optional body; dropped for GET and HEAD.
            headers: Optional headers in any supported representation.
                The caller's object is not modified.

        Returns:
            The decoded body (see BodyKind), None for 204 responses, or
            a HeaderSet for HEAD.

        Raises:
            SecurityViolation: If the request breaks the security policy.
            StatusError: If the response status fails the status policy.
            ResponseDecodeError: If the body does not match its Content-Type.
            TypeError: If the body cannot be serialized as JSON.
            httpx.HTTPError: Transport failures, unchanged.
        """
        method = as_method(method)
        if method == HttpMethod.HEAD:
            return await self.head(endpoint, headers)

        url = self._resolve(endpoint)
        log = self._log.bind(method=method.value, url=url)
        response = await self._send(method, url, body, headers, log)

        if response.status_code == HTTP_STATUS_NO_CONTENT:
            log.info("request_completed", status_code=response.status_code, kind=None)
            return None

        try:
            decoded = decode_response(response, log)
        except ResponseDecodeError:
            ClientMetrics.get_instance().record_failure(FAILURE_DECODE)
            raise

        log.info(
            "request_completed",
            status_code=response.status_code,
            kind=decoded.kind.value,
        )
        return decoded.value

    def _resolve(self, endpoint: str) -> str:
        return f"{self._config.base_url}{endpoint}"

    def _compose_headers(self, headers: Any) -> HeaderSet:
        composed = HeaderSet(self._config.default_headers)
        composed.setdefault_header(HEADER_USER_AGENT, self._config.user_agent)
        composed.update(HeaderSet.from_any(headers))
        return composed

    def _apply_auth(self, headers: HeaderSet, log: structlog.stdlib.BoundLogger) -> None:
        if self._auth is not None:
            self._auth.apply_auth(headers, self._client.cookies, log)
            return
        if not self._warned_no_auth:
            self._warned_no_auth = True
            log.warning(
                "auth_provider_missing",
                base_url=self._config.base_url,
                hint="No authentication will be applied.",
            )

    async def _send(
        self,
        method: HttpMethod,
        url: str,
        body: Any,
        headers: Any,
        log: structlog.stdlib.BoundLogger,
    ) -> httpx.Response:
        """Assemble, check and send one request, then apply the status policy.

        Args:
            method: HTTP method.
            url: Fully resolved URL.
            body: Caller-supplied body.
            headers: Caller-supplied headers.
            log: Request-bound logger.

        Returns:
            Response that passed the status policy.
        """
        request_headers = self._compose_headers(headers)
        self._apply_auth(request_headers, log)

        if not method.allows_body:
            body = None
        try:
            payload = prepare_body(method, body)
        except (TypeError, ValueError) as e:
            ClientMetrics.get_instance().record_failure(FAILURE_BUILD)
            log.error("request_build_failed", error=str(e), error_type=type(e).__name__)
            raise
        prepare_headers(request_headers, body)

        self._security.check(self._config.base_url, request_headers, url=url, log=log)

        content, implicit_type = encode_payload(payload)
        if implicit_type:
            request_headers.setdefault_header(HEADER_CONTENT_TYPE, implicit_type)

        log.info("request_started", headers=request_headers.redacted())
        start_ns = time.perf_counter_ns()
        try:
            request = self._client.build_request(
                method.value,
                url,
                headers=request_headers.to_dict(),
                content=content,
            )
            response = await self._client.send(request)
        except Exception as e:
            ClientMetrics.get_instance().record_failure(FAILURE_TRANSPORT)
            log.error("request_failed", error=str(e), error_type=type(e).__name__)
            raise

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        ClientMetrics.get_instance().record_response(response.status_code, duration_ms)

        if self._config.warn_insecure_set_cookie:
            self._check_set_cookies(response, log)

        try:
            self._status.enforce(
                response.status_code,
                str(response.url),
                response.reason_phrase,
                log,
            )
        except StatusError:
            ClientMetrics.get_instance().record_failure(FAILURE_STATUS)
            raise
        return response

    def _check_set_cookies(
        self, response: httpx.Response, log: structlog.stdlib.BoundLogger
    ) -> None:
        for cookie in response.headers.get_list(HEADER_SET_COOKIE):
            missing = missing_cookie_attributes(cookie)
            if missing:
                log.warning(
                    "insecure_set_cookie",
                    cookie_name=cookie.split("=", 1)[0].strip(),
                    missing_attributes=missing,
                )
