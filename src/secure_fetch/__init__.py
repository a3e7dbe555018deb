"""Security-checked HTTP client over httpx.

This module provides a thin request wrapper with:
- Case-insensitive header access across header representations
- Bearer token and secure-cookie authentication
- Pre-flight security policy enforcement
- Status code policy with fixed log severity per code
- Content-type driven response decoding
- Metrics collection for observability
"""

from src.secure_fetch.auth import AuthProvider, CookieStore
from src.secure_fetch.body import encode_payload, prepare_body, prepare_headers
from src.secure_fetch.client import SecureHttpClient
from src.secure_fetch.config import ClientConfig
from src.secure_fetch.decoder import classify_content_type, decode_response
from src.secure_fetch.errors import (
    HttpClientError,
    ResponseDecodeError,
    SecurityViolation,
    StatusError,
    TransportError,
)
from src.secure_fetch.headers import HeaderSet, get_header, set_header
from src.secure_fetch.metrics import ClientMetrics
from src.secure_fetch.models import (
    Blob,
    BodyKind,
    DecodedBody,
    Disposition,
    FormData,
    HttpMethod,
    SecurityRule,
    Severity,
    StatusRule,
    StatusVerdict,
)
from src.secure_fetch.security import SecurityPolicy, check_cookie_attributes
from src.secure_fetch.status import StatusPolicy


__all__ = [
    # Client
    "SecureHttpClient",
    "ClientConfig",
    # Components
    "AuthProvider",
    "CookieStore",
    "SecurityPolicy",
    "StatusPolicy",
    "check_cookie_attributes",
    "classify_content_type",
    "decode_response",
    "encode_payload",
    "prepare_body",
    "prepare_headers",
    # Headers
    "HeaderSet",
    "get_header",
    "set_header",
    # Models
    "Blob",
    "BodyKind",
    "DecodedBody",
    "Disposition",
    "FormData",
    "HttpMethod",
    "SecurityRule",
    "Severity",
    "StatusRule",
    "StatusVerdict",
    # Errors
    "HttpClientError",
    "ResponseDecodeError",
    "SecurityViolation",
    "StatusError",
    "TransportError",
    # Metrics
    "ClientMetrics",
]
