"""Content-type driven response decoding.

The Content-Type header is matched by substring containment against a
priority-ordered table; the first family that matches decides how the
body is read. Unknown or missing types fall back to text.
"""

from collections.abc import Callable
from typing import Any
from xml.etree.ElementTree import ParseError

import defusedxml.ElementTree as DefusedET
import httpx
import structlog
from defusedxml import DefusedXmlException

from src.secure_fetch.constants import (
    BLOB_MEDIA_TYPES,
    HEADER_CONTENT_TYPE,
    MEDIA_TYPE_JSON,
    MEDIA_TYPE_MULTIPART,
    TEXT_MEDIA_TYPES,
    XML_MEDIA_TYPES,
)
from src.secure_fetch.errors import ResponseDecodeError
from src.secure_fetch.models import Blob, BodyKind, DecodedBody, FormData


logger = structlog.get_logger()

# First match wins.
CONTENT_TYPE_TABLE: tuple[tuple[tuple[str, ...], BodyKind], ...] = (
    ((MEDIA_TYPE_JSON,), BodyKind.JSON),
    (TEXT_MEDIA_TYPES, BodyKind.TEXT),
    (XML_MEDIA_TYPES, BodyKind.XML),
    ((MEDIA_TYPE_MULTIPART,), BodyKind.FORM_DATA),
    (("application/x-www-form-urlencoded",), BodyKind.URL_ENCODED),
    (("application/octet-stream",), BodyKind.BINARY_BUFFER),
    (BLOB_MEDIA_TYPES, BodyKind.BINARY_BLOB),
)


def _bound(log: structlog.stdlib.BoundLogger | None) -> structlog.stdlib.BoundLogger:
    if log is None:
        return logger.bind(component="secure_fetch", subcomponent="decoder")
    return log.bind(subcomponent="decoder")


def match_content_type(content_type: str | None) -> BodyKind | None:
    """Find the body kind for a Content-Type value without logging.

    Args:
        content_type: Raw header value, possibly with parameters.

    Returns:
        The matched kind, or None for a missing or unrecognized type.
    """
    if not content_type:
        return None
    for media_types, kind in CONTENT_TYPE_TABLE:
        if any(media_type in content_type for media_type in media_types):
            return kind
    return None


def classify_content_type(
    content_type: str | None,
    log: structlog.stdlib.BoundLogger | None = None,
) -> BodyKind:
    """Classify a response Content-Type into a body kind.

    Never raises. Missing and unrecognized types are logged as warnings
    and classified as text.

    Args:
        content_type: Raw header value, possibly with parameters.
        log: Request-bound logger.

    Returns:
        Body kind to decode into.
    """
    kind = match_content_type(content_type)
    if kind is not None:
        return kind

    if not content_type:
        _bound(log).warning("content_type_missing")
    else:
        _bound(log).warning("content_type_unhandled", content_type=content_type)
    return BodyKind.TEXT


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip()


def _read_json(response: httpx.Response, content_type: str) -> Any:
    return response.json()


def _read_text(response: httpx.Response, content_type: str) -> str:
    return response.text


def _read_xml(response: httpx.Response, content_type: str) -> Any:
    return DefusedET.fromstring(response.content)


def _read_form_data(response: httpx.Response, content_type: str) -> FormData:
    return FormData.from_multipart(response.content, content_type)


def _read_url_encoded(response: httpx.Response, content_type: str) -> httpx.QueryParams:
    return httpx.QueryParams(response.text)


def _read_buffer(response: httpx.Response, content_type: str) -> bytes:
    return response.content


def _read_blob(response: httpx.Response, content_type: str) -> Blob:
    return Blob(data=response.content, media_type=_media_type(content_type))


_READERS: dict[BodyKind, Callable[[httpx.Response, str], Any]] = {
    BodyKind.JSON: _read_json,
    BodyKind.TEXT: _read_text,
    BodyKind.XML: _read_xml,
    BodyKind.FORM_DATA: _read_form_data,
    BodyKind.URL_ENCODED: _read_url_encoded,
    BodyKind.BINARY_BUFFER: _read_buffer,
    BodyKind.BINARY_BLOB: _read_blob,
}


def decode_response(
    response: httpx.Response,
    log: structlog.stdlib.BoundLogger | None = None,
) -> DecodedBody:
    """Decode a response body according to its Content-Type.

    Args:
        response: Response whose body has been read.
        log: Request-bound logger.

    Returns:
        The decoded body tagged with its kind.

    Raises:
        ResponseDecodeError: If the body does not parse as its declared type.
    """
    content_type = response.headers.get(HEADER_CONTENT_TYPE)
    kind = classify_content_type(content_type, log)

    try:
        value = _READERS[kind](response, content_type or "")
    except (ValueError, LookupError, ParseError, DefusedXmlException) as e:
        _bound(log).error(
            "response_decode_failed",
            content_type=content_type,
            kind=kind.value,
            error=str(e),
        )
        msg = f"Failed to decode {kind.value} response body: {e}"
        raise ResponseDecodeError(msg, content_type=content_type) from e

    return DecodedBody(kind=kind, value=value, content_type=content_type)
