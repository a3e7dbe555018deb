"""Fixture-backed transport for deterministic client tests."""

from src.e2e.mock_transport import (
    FixtureResponse,
    FixtureTransport,
    MockTransportStats,
    NetworkAccessBlockedError,
    RequestRecord,
)


__all__ = [
    "FixtureResponse",
    "FixtureTransport",
    "MockTransportStats",
    "NetworkAccessBlockedError",
    "RequestRecord",
]
