"""Metrics collection for the secure fetch client."""

from dataclasses import dataclass, field
from typing import ClassVar

from src.secure_fetch.models import SecurityRule


FAILURE_SECURITY = "security"
FAILURE_STATUS = "status"
FAILURE_TRANSPORT = "transport"
FAILURE_DECODE = "decode"
FAILURE_BUILD = "build"


@dataclass
class ClientMetrics:
    """Metrics for client request operations.

    Singleton class that tracks request counts per status code,
    failures per kind, and security rule violations.
    """

    requests_total: dict[int, int] = field(default_factory=dict)
    failures_total: dict[str, int] = field(default_factory=dict)
    security_violations_total: dict[str, int] = field(default_factory=dict)
    duration_ms_total: float = 0.0
    request_count: int = 0

    _instance: ClassVar["ClientMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "ClientMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_response(self, status_code: int, duration_ms: float) -> None:
        """Record a completed transport round trip.

        Args:
            status_code: HTTP status code.
            duration_ms: Round trip duration in milliseconds.
        """
        self.requests_total[status_code] = self.requests_total.get(status_code, 0) + 1
        self.duration_ms_total += duration_ms
        self.request_count += 1

    def record_failure(self, kind: str) -> None:
        """Record a failed request.

        Args:
            kind: One of security, status, transport, decode, build.
        """
        self.failures_total[kind] = self.failures_total.get(kind, 0) + 1

    def record_security_violation(self, rule: SecurityRule) -> None:
        """Record a security policy rejection.

        Args:
            rule: The rule that was breached.
        """
        key = rule.value
        self.security_violations_total[key] = (
            self.security_violations_total.get(key, 0) + 1
        )
        self.record_failure(FAILURE_SECURITY)

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "requests_total": dict(self.requests_total),
            "failures_total": dict(self.failures_total),
            "security_violations_total": dict(self.security_violations_total),
            "duration_ms_total": self.duration_ms_total,
            "request_count": self.request_count,
        }

    @property
    def avg_duration_ms(self) -> float:
        """Calculate average round trip duration.

        Returns:
            Average duration in milliseconds.
        """
        if self.request_count == 0:
            return 0.0
        return self.duration_ms_total / self.request_count
