"""Unit tests for client metrics."""

import pytest

from src.secure_fetch.metrics import FAILURE_DECODE, FAILURE_TRANSPORT, ClientMetrics
from src.secure_fetch.models import SecurityRule


@pytest.fixture(autouse=True)
def _reset_metrics() -> None:
    ClientMetrics.reset()


class TestClientMetrics:
    """Tests for ClientMetrics."""

    def test_singleton(self) -> None:
        """Test that get_instance returns the same object until reset."""
        first = ClientMetrics.get_instance()

        assert ClientMetrics.get_instance() is first
        ClientMetrics.reset()
        assert ClientMetrics.get_instance() is not first

    def test_record_response(self) -> None:
        """Test per-status counting and duration totals."""
        metrics = ClientMetrics.get_instance()

        metrics.record_response(200, 10.0)
        metrics.record_response(200, 30.0)
        metrics.record_response(404, 20.0)

        assert metrics.requests_total == {200: 2, 404: 1}
        assert metrics.request_count == 3
        assert metrics.avg_duration_ms == 20.0

    def test_avg_duration_without_requests(self) -> None:
        """Test that the average is zero before any request."""
        assert ClientMetrics.get_instance().avg_duration_ms == 0.0

    def test_record_failure(self) -> None:
        """Test failure counting by kind."""
        metrics = ClientMetrics.get_instance()

        metrics.record_failure(FAILURE_TRANSPORT)
        metrics.record_failure(FAILURE_DECODE)
        metrics.record_failure(FAILURE_TRANSPORT)

        assert metrics.failures_total == {"transport": 2, "decode": 1}

    def test_security_violation_counts_as_failure(self) -> None:
        """Test that violations feed both counters."""
        metrics = ClientMetrics.get_instance()

        metrics.record_security_violation(SecurityRule.API_KEY_HEADER)

        assert metrics.security_violations_total == {"API_KEY_HEADER": 1}
        assert metrics.failures_total == {"security": 1}

    def test_to_dict_is_a_snapshot(self) -> None:
        """Test that to_dict copies the counters."""
        metrics = ClientMetrics.get_instance()
        metrics.record_response(200, 5.0)

        snapshot = metrics.to_dict()
        metrics.record_response(200, 5.0)

        assert snapshot["requests_total"] == {200: 1}
        assert snapshot["request_count"] == 1
        assert snapshot["duration_ms_total"] == 5.0
