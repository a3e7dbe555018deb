"""Unit tests for secure fetch data models."""

import pytest

from src.secure_fetch.models import (
    Blob,
    Disposition,
    FormData,
    HttpMethod,
    Severity,
    StatusVerdict,
)


class TestHttpMethod:
    """Tests for HttpMethod."""

    @pytest.mark.parametrize(
        ("method", "allowed"),
        [
            (HttpMethod.GET, False),
            (HttpMethod.HEAD, False),
            (HttpMethod.POST, True),
            (HttpMethod.PUT, True),
            (HttpMethod.PATCH, True),
            (HttpMethod.DELETE, True),
        ],
    )
    def test_allows_body(self, method: HttpMethod, allowed: bool) -> None:
        """Test which methods may carry a body."""
        assert method.allows_body is allowed


class TestStatusVerdict:
    """Tests for StatusVerdict."""

    def test_is_failure(self) -> None:
        """Test the failure shortcut."""
        verdict = StatusVerdict(
            status_code=500,
            disposition=Disposition.FAIL,
            severity=Severity.ERROR,
            message="500 Internal Server Error",
        )

        assert verdict.is_failure is True
        assert verdict.standard is True


class TestBlob:
    """Tests for Blob."""

    def test_size(self) -> None:
        """Test that size reports the byte length."""
        assert Blob(b"abcd").size == 4


class TestFormData:
    """Tests for FormData."""

    def test_repeated_fields_keep_order(self) -> None:
        """Test multi-valued fields."""
        form = FormData()
        form.append("tag", "a")
        form.append("tag", "b")
        form.append("name", "x")

        assert form.get("tag") == "a"
        assert form.get_all("tag") == ["a", "b"]
        assert "name" in form
        assert "missing" not in form
        assert form.get("missing") is None
        assert len(form) == 3

    def test_encode_layout(self) -> None:
        """Test the multipart wire layout."""
        form = FormData([("title", "hi"), ("file", Blob(b"\x89PNG", "image/png", "a.png"))])

        body, content_type = form.encode()

        boundary = content_type.split("boundary=", 1)[1]
        assert body.startswith(f"--{boundary}\r\n".encode())
        assert b'Content-Disposition: form-data; name="title"\r\n\r\nhi\r\n' in body
        assert b'name="file"; filename="a.png"\r\nContent-Type: image/png\r\n\r\n\x89PNG' in body
        assert body.endswith(f"--{boundary}--\r\n".encode())

    def test_encode_uses_fresh_boundary(self) -> None:
        """Test that each encoding gets its own boundary."""
        form = FormData([("a", "1")])

        assert form.encode()[1] != form.encode()[1]

    def test_parse_encoded_form(self) -> None:
        """Test that an encoded form parses back to the same fields."""
        form = FormData([("a", "1"), ("a", "2"), ("doc", Blob(b"bytes", "text/plain", "d.txt"))])
        body, content_type = form.encode()

        parsed = FormData.from_multipart(body, content_type)

        assert parsed == form

    def test_parse_without_boundary(self) -> None:
        """Test that a missing boundary is rejected."""
        with pytest.raises(ValueError, match="no boundary"):
            FormData.from_multipart(b"data", "multipart/form-data")

    def test_parse_part_without_name(self) -> None:
        """Test that unnamed parts are rejected."""
        body = b"--xyz\r\nContent-Type: text/plain\r\n\r\nvalue\r\n--xyz--\r\n"

        with pytest.raises(ValueError, match="no field name"):
            FormData.from_multipart(body, "multipart/form-data; boundary=xyz")

    def test_parse_part_with_unknown_charset(self) -> None:
        """Test that an unknown part charset is a ValueError."""
        body = (
            b'--xyz\r\nContent-Disposition: form-data; name="f"\r\n'
            b"Content-Type: text/plain; charset=bogus\r\n\r\nvalue\r\n--xyz--\r\n"
        )

        with pytest.raises(ValueError, match="unknown charset 'bogus'"):
            FormData.from_multipart(body, "multipart/form-data; boundary=xyz")
