"""Unit tests for content-type driven response decoding."""

import httpx
import pytest
from structlog.testing import capture_logs

from src.secure_fetch.decoder import (
    classify_content_type,
    decode_response,
    match_content_type,
)
from src.secure_fetch.errors import ResponseDecodeError
from src.secure_fetch.models import Blob, BodyKind, FormData


def _response(body: bytes, content_type: str | None) -> httpx.Response:
    headers = {"content-type": content_type} if content_type is not None else {}
    return httpx.Response(200, headers=headers, content=body)


class TestClassify:
    """Tests for Content-Type classification."""

    @pytest.mark.parametrize(
        ("content_type", "kind"),
        [
            ("application/json", BodyKind.JSON),
            ("application/json; charset=utf-8", BodyKind.JSON),
            ("text/plain", BodyKind.TEXT),
            ("text/html; charset=utf-8", BodyKind.TEXT),
            ("text/csv", BodyKind.TEXT),
            ("text/markdown", BodyKind.TEXT),
            ("application/x-yaml", BodyKind.TEXT),
            ("application/xml", BodyKind.XML),
            ("text/xml; charset=utf-8", BodyKind.XML),
            ("multipart/form-data; boundary=abc", BodyKind.FORM_DATA),
            ("application/x-www-form-urlencoded", BodyKind.URL_ENCODED),
            ("application/octet-stream", BodyKind.BINARY_BUFFER),
            ("application/pdf", BodyKind.BINARY_BLOB),
            ("image/png", BodyKind.BINARY_BLOB),
            ("image/svg+xml", BodyKind.BINARY_BLOB),
            ("video/mp4", BodyKind.BINARY_BLOB),
            ("application/gzip", BodyKind.BINARY_BLOB),
        ],
    )
    def test_known_types(self, content_type: str, kind: BodyKind) -> None:
        """Test each media type family."""
        with capture_logs() as logs:
            assert classify_content_type(content_type) == kind

        assert logs == []

    def test_missing_content_type_warns(self) -> None:
        """Test that a missing header falls back to text with a warning."""
        with capture_logs() as logs:
            kind = classify_content_type(None)

        assert kind == BodyKind.TEXT
        assert logs[0]["event"] == "content_type_missing"
        assert logs[0]["log_level"] == "warning"

    def test_unknown_content_type_warns_with_name(self) -> None:
        """Test that an unrecognized type is named in the warning."""
        with capture_logs() as logs:
            kind = classify_content_type("application/weirdtype")

        assert kind == BodyKind.TEXT
        assert logs[0]["event"] == "content_type_unhandled"
        assert logs[0]["content_type"] == "application/weirdtype"

    def test_vendor_json_is_not_json(self) -> None:
        """Test that matching is by containment of the exact family string."""
        assert match_content_type("application/vnd.api+json") is None

    def test_match_does_not_log(self) -> None:
        """Test that the matcher itself is silent."""
        with capture_logs() as logs:
            assert match_content_type(None) is None

        assert logs == []


class TestDecode:
    """Tests for decode_response."""

    def test_json(self) -> None:
        """Test JSON decoding."""
        decoded = decode_response(_response(b'{"id": 1}', "application/json; charset=utf-8"))

        assert decoded.kind == BodyKind.JSON
        assert decoded.value == {"id": 1}
        assert decoded.content_type == "application/json; charset=utf-8"

    def test_text(self) -> None:
        """Test text decoding."""
        decoded = decode_response(_response(b"hello", "text/plain"))

        assert decoded.value == "hello"

    def test_missing_content_type_decodes_text(self) -> None:
        """Test the text fallback when no Content-Type is sent."""
        with capture_logs():
            decoded = decode_response(_response(b"plain body", None))

        assert decoded.kind == BodyKind.TEXT
        assert decoded.value == "plain body"

    def test_xml(self) -> None:
        """Test XML decoding into an element tree."""
        decoded = decode_response(
            _response(b"<feed><entry id='1'>a</entry></feed>", "application/xml")
        )

        assert decoded.kind == BodyKind.XML
        assert decoded.value.tag == "feed"
        assert decoded.value.find("entry").get("id") == "1"

    def test_xml_honours_declared_encoding(self) -> None:
        """Test that the XML prolog encoding is used to read the bytes."""
        body = '<?xml version="1.0" encoding="ISO-8859-1"?><p>café</p>'.encode("latin-1")

        decoded = decode_response(_response(body, "application/xml"))

        assert decoded.value.text == "café"

    def test_url_encoded(self) -> None:
        """Test URL-encoded decoding into query params."""
        decoded = decode_response(
            _response(b"a=1&b=two&a=3", "application/x-www-form-urlencoded")
        )

        assert isinstance(decoded.value, httpx.QueryParams)
        assert decoded.value.get_list("a") == ["1", "3"]
        assert decoded.value["b"] == "two"

    def test_octet_stream(self) -> None:
        """Test that octet streams decode to raw bytes."""
        decoded = decode_response(_response(b"\x00\xff", "application/octet-stream"))

        assert decoded.kind == BodyKind.BINARY_BUFFER
        assert decoded.value == b"\x00\xff"

    def test_blob(self) -> None:
        """Test that binary documents decode to a Blob."""
        decoded = decode_response(_response(b"%PDF-1.7", "application/pdf; qs=0.9"))

        assert decoded.value == Blob(data=b"%PDF-1.7", media_type="application/pdf")
        assert decoded.value.size == 8

    def test_multipart(self) -> None:
        """Test that multipart bodies decode to FormData."""
        form = FormData()
        form.append("title", "report")
        form.append("file", Blob(b"col1,col2", "text/csv", "data.csv"))
        body, content_type = form.encode()

        decoded = decode_response(_response(body, content_type))

        assert decoded.kind == BodyKind.FORM_DATA
        assert decoded.value.get("title") == "report"
        attachment = decoded.value.get("file")
        assert isinstance(attachment, Blob)
        assert attachment.filename == "data.csv"
        assert attachment.media_type == "text/csv"
        assert attachment.data == b"col1,col2"


class TestDecodeErrors:
    """Tests for malformed bodies."""

    @pytest.mark.parametrize(
        ("body", "content_type"),
        [
            (b"{not json", "application/json"),
            (b"<open>", "application/xml"),
            (b"no boundary here", "multipart/form-data"),
            (
                b'--b\r\nContent-Disposition: form-data; name="f"\r\n'
                b"Content-Type: text/plain; charset=bogus\r\n\r\nv\r\n--b--\r\n",
                "multipart/form-data; boundary=b",
            ),
        ],
    )
    def test_malformed_body_raises(self, body: bytes, content_type: str) -> None:
        """Test that parse failures raise ResponseDecodeError."""
        with pytest.raises(ResponseDecodeError) as exc_info:
            decode_response(_response(body, content_type))

        assert exc_info.value.content_type == content_type

    def test_decode_failure_is_logged(self) -> None:
        """Test that decode failures are logged at error level."""
        with capture_logs() as logs, pytest.raises(ResponseDecodeError):
            decode_response(_response(b"[1,", "application/json"))

        assert logs[0]["event"] == "response_decode_failed"
        assert logs[0]["log_level"] == "error"
        assert logs[0]["kind"] == "json"

    def test_entity_expansion_rejected(self) -> None:
        """Test that XML entity declarations are refused."""
        body = (
            b'<?xml version="1.0"?><!DOCTYPE x [<!ENTITY a "aaaa">]>'
            b"<x>&a;</x>"
        )

        with pytest.raises(ResponseDecodeError):
            decode_response(_response(body, "text/xml"))
