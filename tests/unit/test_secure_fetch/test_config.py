"""Unit tests for the client configuration model."""

import pytest
from pydantic import ValidationError

from src.secure_fetch.config import ClientConfig


class TestClientConfig:
    """Tests for ClientConfig validation."""

    def test_defaults(self) -> None:
        """Test default configuration values."""
        config = ClientConfig(base_url="https://api.example.com")

        assert config.timeout_seconds == 30.0
        assert config.follow_redirects is True
        assert config.user_agent == "secure-fetch/1.0"
        assert config.default_headers == {}
        assert config.sensitive_query_params == ("api_key", "apikey", "access_token")
        assert config.enforce_cookie_attributes is True
        assert config.warn_insecure_set_cookie is True

    def test_trailing_slash_stripped(self) -> None:
        """Test base URL normalization."""
        assert ClientConfig(base_url="https://api.example.com/v1/").base_url == (
            "https://api.example.com/v1"
        )

    def test_http_base_url_accepted(self) -> None:
        """Test that scheme enforcement is left to the security policy."""
        assert ClientConfig(base_url="http://localhost").base_url == "http://localhost"

    def test_empty_base_url_rejected(self) -> None:
        """Test that a base URL is required."""
        with pytest.raises(ValidationError):
            ClientConfig(base_url="")

    @pytest.mark.parametrize("timeout", [0.5, 301.0])
    def test_timeout_bounds(self, timeout: float) -> None:
        """Test timeout range validation."""
        with pytest.raises(ValidationError):
            ClientConfig(base_url="https://a.example", timeout_seconds=timeout)

    @pytest.mark.parametrize("header", ["Authorization", "cookie", "API-Key", "X-Api-Key"])
    def test_credentials_rejected_in_default_headers(self, header: str) -> None:
        """Test that credentials cannot live in static config."""
        with pytest.raises(ValidationError, match="must not be stored in config"):
            ClientConfig(base_url="https://a.example", default_headers={header: "x"})

    def test_ordinary_default_headers_allowed(self) -> None:
        """Test that non-credential headers are accepted."""
        config = ClientConfig(
            base_url="https://a.example", default_headers={"Accept": "application/json"}
        )

        assert config.default_headers == {"Accept": "application/json"}

    def test_frozen(self) -> None:
        """Test that config is immutable."""
        config = ClientConfig(base_url="https://a.example")

        with pytest.raises(ValidationError):
            config.base_url = "https://b.example"  # type: ignore[misc]

    def test_unknown_fields_rejected(self) -> None:
        """Test that typos in field names fail loudly."""
        with pytest.raises(ValidationError):
            ClientConfig(base_url="https://a.example", retries=3)  # type: ignore[call-arg]
