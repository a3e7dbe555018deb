"""Data models for the secure fetch client."""

import uuid
from dataclasses import dataclass
from email import policy
from email.parser import BytesParser
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from src.secure_fetch.constants import MEDIA_TYPE_MULTIPART


class HttpMethod(str, Enum):
    """HTTP methods exposed by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"

    @property
    def allows_body(self) -> bool:
        """GET and HEAD requests never carry a message body."""
        return self not in (HttpMethod.GET, HttpMethod.HEAD)


class BodyKind(str, Enum):
    """Shape a response body was decoded into.

    - JSON: parsed JSON value (dict, list, scalar)
    - TEXT: str
    - XML: xml.etree.ElementTree.Element
    - FORM_DATA: FormData
    - URL_ENCODED: httpx.QueryParams
    - BINARY_BUFFER: bytes
    - BINARY_BLOB: Blob
    """

    JSON = "json"
    TEXT = "text"
    XML = "xml"
    FORM_DATA = "form_data"
    URL_ENCODED = "url_encoded"
    BINARY_BUFFER = "binary_buffer"
    BINARY_BLOB = "binary_blob"


class SecurityRule(str, Enum):
    """Security rules enforced before a request is sent, in check order."""

    BASIC_AUTH = "BASIC_AUTH"
    SENSITIVE_QUERY_PARAM = "SENSITIVE_QUERY_PARAM"
    API_KEY_HEADER = "API_KEY_HEADER"
    NON_BEARER_AUTH = "NON_BEARER_AUTH"
    INSECURE_PROTOCOL = "INSECURE_PROTOCOL"
    COOKIE_ATTRIBUTES = "COOKIE_ATTRIBUTES"


class Severity(str, Enum):
    """Log severity attached to a status code."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Disposition(str, Enum):
    """Whether a request may proceed after its status check."""

    CONTINUE = "CONTINUE"
    FAIL = "FAIL"


class StatusRule(BaseModel):
    """Fixed handling for one standard HTTP status code."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: Annotated[int, Field(ge=100, le=599)]
    reason: Annotated[str, Field(min_length=1)]
    description: Annotated[str, Field(min_length=1)]
    severity: Severity
    disposition: Disposition


class StatusVerdict(BaseModel):
    """Outcome of evaluating a response status code."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status_code: int
    disposition: Disposition
    severity: Severity
    message: str
    standard: bool = True

    @property
    def is_failure(self) -> bool:
        """Check if the request must fail."""
        return self.disposition == Disposition.FAIL


class DecodedBody(BaseModel):
    """A response body tagged with the shape it was decoded into."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    kind: BodyKind
    value: Any = None
    content_type: str | None = None


@dataclass(frozen=True)
class Blob:
    """Opaque binary payload with an optional media type.

    Attributes:
        data: Raw bytes.
        media_type: Declared media type, if known.
        filename: File name when the blob is a multipart file part.
    """

    data: bytes
    media_type: str | None = None
    filename: str | None = None

    @property
    def size(self) -> int:
        """Get the size of the blob in bytes."""
        return len(self.data)


class FormData:
    """Ordered multipart form fields.

    Values are strings for plain fields and Blob instances for file parts.
    Repeated names are kept in insertion order.
    """

    def __init__(self, fields: list[tuple[str, "str | Blob"]] | None = None) -> None:
        self._fields: list[tuple[str, str | Blob]] = list(fields or [])

    def append(self, name: str, value: "str | Blob") -> None:
        """Append a field, keeping any existing values for the name."""
        self._fields.append((name, value))

    def get(self, name: str) -> "str | Blob | None":
        """Return the first value for a field name."""
        for key, value in self._fields:
            if key == name:
                return value
        return None

    def get_all(self, name: str) -> list["str | Blob"]:
        """Return all values for a field name."""
        return [value for key, value in self._fields if key == name]

    def items(self) -> list[tuple[str, "str | Blob"]]:
        """Return all fields as (name, value) pairs."""
        return list(self._fields)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormData):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        return f"FormData({self._fields!r})"

    def encode(self) -> tuple[bytes, str]:
        """Encode the fields as a multipart/form-data body.

        Returns:
            Tuple of (body bytes, Content-Type header value with boundary).
        """
        boundary = "----secure-fetch-" + uuid.uuid4().hex
        crlf = "\r\n"
        parts: list[bytes] = []

        for name, value in self._fields:
            parts.append(f"--{boundary}{crlf}".encode())
            if isinstance(value, Blob):
                filename = value.filename or "blob"
                media_type = value.media_type or "application/octet-stream"
                parts.append(
                    f'Content-Disposition: form-data; name="{name}"; '
                    f'filename="{filename}"{crlf}'.encode()
                )
                parts.append(f"Content-Type: {media_type}{crlf}{crlf}".encode())
                parts.append(value.data)
            else:
                parts.append(
                    f'Content-Disposition: form-data; name="{name}"{crlf}{crlf}'.encode()
                )
                parts.append(str(value).encode())
            parts.append(crlf.encode())

        parts.append(f"--{boundary}--{crlf}".encode())
        return b"".join(parts), f"{MEDIA_TYPE_MULTIPART}; boundary={boundary}"

    @classmethod
    def from_multipart(cls, body: bytes, content_type: str) -> "FormData":
        """Parse a multipart/form-data body.

        Args:
            body: Raw response body.
            content_type: Content-Type header value carrying the boundary.

        Returns:
            Parsed form data.

        Raises:
            ValueError: If the body is not valid multipart content.
        """
        header = f"Content-Type: {content_type}\r\n\r\n".encode("latin-1")
        message = BytesParser(policy=policy.HTTP).parsebytes(header + body)
        if message.get_boundary() is None or not message.is_multipart():
            msg = "multipart body has no boundary"
            raise ValueError(msg)

        form = cls()
        for part in message.iter_parts():
            name = part.get_param("name", header="content-disposition")
            if not isinstance(name, str):
                msg = "multipart part has no field name"
                raise ValueError(msg)
            payload = part.get_payload(decode=True) or b""
            filename = part.get_filename()
            if filename is None:
                charset = part.get_content_charset() or "utf-8"
                try:
                    text = payload.decode(charset)
                except LookupError as e:
                    msg = f"multipart part {name!r} declares unknown charset {charset!r}"
                    raise ValueError(msg) from e
                form.append(name, text)
            else:
                form.append(
                    name,
                    Blob(
                        data=payload,
                        media_type=part.get_content_type(),
                        filename=filename,
                    ),
                )
        return form
