"""Tests for OpenTelemetry setup and tracing."""

from unittest.mock import MagicMock, Mock, patch

import pytest

from perspective_client.app import telemetry
from perspective_client.app.telemetry import (
    _is_collector_available,
    setup_telemetry,
    shutdown_telemetry,
    trace_method,
)


@pytest.fixture
def enable_telemetry(monkeypatch: pytest.MonkeyPatch) -> None:
    from perspective_client.app.config import settings

    monkeypatch.setattr(settings, "OTEL_ENABLED", True)
    monkeypatch.setattr(settings, "OTEL_EXPORTER_OTLP_ENDPOINT", "")


def test_setup_disabled_is_noop() -> None:
    setup_telemetry()
    assert telemetry._is_setup_complete is False
    assert telemetry._tracer_provider is None


@pytest.mark.usefixtures("enable_telemetry")
def test_setup_and_shutdown_with_console_exporter() -> None:
    with (
        patch("perspective_client.app.telemetry.trace") as mock_trace,
        patch("perspective_client.app.telemetry.BatchSpanProcessor") as mock_processor,
    ):
        mock_trace.get_tracer_provider.return_value = object()

        setup_telemetry()

        assert telemetry._is_setup_complete is True
        mock_trace.set_tracer_provider.assert_called_once()
        assert telemetry._span_processors == [mock_processor.return_value]

        shutdown_telemetry()

    mock_processor.return_value.shutdown.assert_called_once()
    assert telemetry._is_setup_complete is False
    assert telemetry._span_processors == []


@pytest.mark.usefixtures("enable_telemetry")
def test_setup_skipped_when_provider_exists() -> None:
    with patch("perspective_client.app.telemetry.trace") as mock_trace:
        mock_trace.get_tracer_provider.return_value = Mock(spec=["add_span_processor"])

        setup_telemetry()

        mock_trace.set_tracer_provider.assert_not_called()
    assert telemetry._is_setup_complete is False


def test_shutdown_without_setup_is_noop() -> None:
    shutdown_telemetry()
    assert telemetry._is_setup_complete is False


def test_collector_unavailable() -> None:
    with patch(
        "perspective_client.app.telemetry.socket.create_connection",
        side_effect=OSError("refused"),
    ):
        assert _is_collector_available("localhost", 4317) is False


@pytest.mark.asyncio
async def test_trace_method_disabled_passthrough() -> None:
    @trace_method("noop")
    async def add(a: int, b: int) -> int:
        return a + b

    assert await add(1, 2) == 3
    assert add.__name__ == "add"


@pytest.mark.asyncio
@pytest.mark.usefixtures("enable_telemetry")
async def test_trace_method_records_exception() -> None:
    span = Mock()
    tracer = MagicMock()
    tracer.start_as_current_span.return_value.__enter__.return_value = span

    @trace_method("failing")
    async def fail() -> None:
        raise ValueError("boom")

    with patch(
        "perspective_client.app.telemetry.trace.get_tracer", return_value=tracer
    ):
        with pytest.raises(ValueError, match="boom"):
            await fail()

    span.record_exception.assert_called_once()
    span.set_status.assert_called_once()
