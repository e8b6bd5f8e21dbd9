"""Test configuration and fixtures."""

import copy
from typing import Callable

import httpx
import pytest

from perspective_client.app.config import Settings
from perspective_client.app.services.client import PerspectiveClient

MOCK_API_KEY = "mock-key"

_DEFAULT_RESPONSE = {
    "attributeScores": {
        "TOXICITY": {
            "spanScores": [
                {
                    "begin": 0,
                    "end": 56,
                    "score": {"value": 0.8728314, "type": "PROBABILITY"},
                }
            ],
            "summaryScore": {"value": 0.8728314, "type": "PROBABILITY"},
        }
    },
    "languages": ["en"],
}


@pytest.fixture(autouse=True)
def disable_telemetry(monkeypatch: pytest.MonkeyPatch) -> None:
    """Disable OpenTelemetry for all tests.

    Args:
        monkeypatch: pytest's monkeypatch fixture for modifying values.
    """
    from perspective_client.app import telemetry
    from perspective_client.app.config import settings

    monkeypatch.setattr(settings, "OTEL_ENABLED", False)
    telemetry._tracer_provider = None
    telemetry._span_processors.clear()
    telemetry._is_setup_complete = False


@pytest.fixture
def default_response() -> dict:
    """Return a copy of a typical TOXICITY analyze response."""
    return copy.deepcopy(_DEFAULT_RESPONSE)


@pytest.fixture
def api_settings() -> Settings:
    """Settings with a mock API key that ignore any local .env file."""
    return Settings(PERSPECTIVE_API_KEY=MOCK_API_KEY, _env_file=None)


@pytest.fixture
def make_client(api_settings: Settings) -> Callable[..., PerspectiveClient]:
    """Return a factory for clients backed by an httpx.MockTransport.

    The factory takes a request handler with the same contract as
    ``httpx.MockTransport`` handlers.
    """

    def factory(handler, settings: Settings | None = None) -> PerspectiveClient:
        return PerspectiveClient(
            settings=settings or api_settings,
            transport=httpx.MockTransport(handler),
        )

    return factory
