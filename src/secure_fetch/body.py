"""Request body preparation.

Bodies the transport understands natively (strings, byte buffers, blobs,
multipart forms and URL-encoded parameters) pass through untouched;
everything else is serialized as JSON.
"""

import json
from typing import Any

import httpx
from pydantic import BaseModel

from src.secure_fetch.constants import (
    HEADER_CONTENT_TYPE,
    MEDIA_TYPE_FORM_URLENCODED_UTF8,
    MEDIA_TYPE_JSON,
    MEDIA_TYPE_TEXT_UTF8,
)
from src.secure_fetch.headers import get_header, set_header
from src.secure_fetch.models import Blob, FormData, HttpMethod


NATIVE_BODY_TYPES: tuple[type, ...] = (
    str,
    bytes,
    bytearray,
    memoryview,
    Blob,
    FormData,
    httpx.QueryParams,
)


def as_method(method: HttpMethod | str) -> HttpMethod:
    """Normalize a method name to HttpMethod.

    Raises:
        ValueError: If the method is not supported.
    """
    if isinstance(method, HttpMethod):
        return method
    return HttpMethod(method.upper())


def is_native_body(body: Any) -> bool:
    """Check if a body can be handed to the transport without serialization."""
    return isinstance(body, NATIVE_BODY_TYPES)


def prepare_body(method: HttpMethod | str, body: Any) -> Any:
    """Convert a request body into a transport payload.

    Args:
        method: HTTP method of the request.
        body: Caller-supplied body, or None.

    Returns:
        None for GET/HEAD or a missing body, the body itself for native
        kinds, otherwise its JSON text.
    """
    if not as_method(method).allows_body or body is None:
        return None
    if is_native_body(body):
        return body
    if isinstance(body, BaseModel):
        return body.model_dump_json()
    return json.dumps(body, separators=(",", ":"))


def prepare_headers(headers: Any, body: Any) -> Any:
    """Default Content-Type to JSON for bodies that will be serialized.

    An explicit Content-Type is never overwritten.

    Args:
        headers: Request headers, any supported representation.
        body: Caller-supplied body.

    Returns:
        The same headers object.
    """
    if (
        body is not None
        and not is_native_body(body)
        and not get_header(headers, HEADER_CONTENT_TYPE)
    ):
        set_header(headers, HEADER_CONTENT_TYPE, MEDIA_TYPE_JSON)
    return headers


def encode_payload(payload: Any) -> tuple[bytes | str | None, str | None]:
    """Adapt a prepared payload to raw request content.

    Mirrors what a fetch transport does with native bodies: the returned
    media type applies only when the request has no explicit Content-Type.

    Args:
        payload: Output of prepare_body.

    Returns:
        Tuple of (content, implicit media type).
    """
    if payload is None:
        return None, None
    if isinstance(payload, str):
        return payload, MEDIA_TYPE_TEXT_UTF8
    if isinstance(payload, bytes | bytearray | memoryview):
        return bytes(payload), None
    if isinstance(payload, Blob):
        return payload.data, payload.media_type
    if isinstance(payload, FormData):
        return payload.encode()
    if isinstance(payload, httpx.QueryParams):
        return str(payload), MEDIA_TYPE_FORM_URLENCODED_UTF8
    msg = f"Unsupported payload type: {type(payload).__name__}"
    raise TypeError(msg)
