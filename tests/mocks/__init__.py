"""Mock implementations for testing."""

from tests.mocks.exchange import FakeResponse, FakeSession, MockPairProvider


__all__ = [
    "FakeResponse",
    "FakeSession",
    "MockPairProvider",
]
