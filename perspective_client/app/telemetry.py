"""OpenTelemetry configuration and utilities."""

import logging
import socket
from functools import wraps
from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.resource import ResourceAttributes
from opentelemetry.trace.status import Status, StatusCode

from perspective_client.app.config import Settings, settings

# Configure logging with a NullHandler to avoid "No handlers" warnings
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Global tracking for telemetry resources
_tracer_provider: Optional[TracerProvider] = None
_span_processors: list[SpanProcessor] = []
_is_setup_complete = False


def _is_collector_available(host: str, port: int, timeout: float = 0.5) -> bool:
    """Check if the OpenTelemetry collector is available."""
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


def _build_span_processor() -> SpanProcessor:
    endpoint = settings.OTEL_EXPORTER_OTLP_ENDPOINT.strip()
    if not endpoint:
        logger.info("OTLP endpoint not configured. Using console exporter.")
        return BatchSpanProcessor(ConsoleSpanExporter())

    endpoint_parts = endpoint.replace("http://", "").replace("https://", "").split(":")
    collector_host = endpoint_parts[0]
    collector_port = int(endpoint_parts[1]) if len(endpoint_parts) > 1 else 4317

    if not _is_collector_available(collector_host, collector_port):
        logger.warning(
            "OTLP collector not available at %s:%s. Using console exporter.",
            collector_host,
            collector_port,
        )
        return BatchSpanProcessor(ConsoleSpanExporter())

    logger.info("OTLP collector is available at %s:%s", collector_host, collector_port)
    otlp_exporter = OTLPSpanExporter(
        endpoint=endpoint,
        insecure=not settings.OTLP_SECURE,
        timeout=3,
    )
    return BatchSpanProcessor(otlp_exporter)


def setup_telemetry() -> None:
    """Set up OpenTelemetry tracing for analyze calls."""
    global _tracer_provider, _is_setup_complete

    if not settings.OTEL_ENABLED:
        logger.info("OpenTelemetry instrumentation is disabled")
        return

    if _is_setup_complete:
        logger.debug("OpenTelemetry already configured, skipping setup")
        return

    # An SDK provider installed by the host application wins
    existing_provider = trace.get_tracer_provider()
    if hasattr(existing_provider, "add_span_processor"):
        logger.warning(
            "TracerProvider already exists, skipping telemetry setup to avoid conflicts"
        )
        return

    try:
        resource = Resource.create(
            {ResourceAttributes.SERVICE_NAME: settings.OTEL_SERVICE_NAME}
        )
        sampler = ParentBased(root=TraceIdRatioBased(settings.OTEL_TRACES_SAMPLER_ARG))
        _tracer_provider = TracerProvider(resource=resource, sampler=sampler)
        trace.set_tracer_provider(_tracer_provider)

        try:
            span_processor = _build_span_processor()
        except Exception as e:
            logger.warning(
                "Failed to configure OTLP exporter: %s. Using console exporter.", e
            )
            span_processor = BatchSpanProcessor(ConsoleSpanExporter())

        _tracer_provider.add_span_processor(span_processor)
        _span_processors.append(span_processor)

        _is_setup_complete = True
        logger.info("OpenTelemetry instrumentation configured successfully")

    except Exception as e:
        logger.error("Failed to configure OpenTelemetry: %s", str(e))
        logger.exception(e)


def shutdown_telemetry() -> None:
    """Properly shutdown OpenTelemetry components to prevent resource leaks."""
    global _tracer_provider, _is_setup_complete

    if not _is_setup_complete:
        return

    logger.info("Shutting down OpenTelemetry components...")

    for processor in _span_processors:
        try:
            processor.shutdown()
            logger.debug("Span processor shutdown completed")
        except Exception as e:
            logger.warning("Error shutting down span processor: %s", e)

    _span_processors.clear()
    _tracer_provider = None
    _is_setup_complete = False

    logger.info("OpenTelemetry shutdown completed")


def _tracing_enabled(args) -> bool:
    # Methods of objects carrying their own Settings use those
    config = getattr(args[0], "settings", None) if args else None
    if not isinstance(config, Settings):
        config = settings
    return config.OTEL_ENABLED


def trace_method(name=None):
    """Decorator to add OpenTelemetry tracing to an async method.

    When the first argument has a ``settings`` attribute holding a Settings
    instance, its OTEL_ENABLED flag decides whether a span is created.
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            if not _tracing_enabled(args):
                return await func(*args, **kwargs)

            tracer = trace.get_tracer(__name__)
            span_name = name or func.__name__

            with tracer.start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            ) as span:
                try:
                    span.set_attributes(
                        {
                            "function.name": func.__name__,
                            "function.args_count": len(args),
                            "function.kwargs_keys": str(list(kwargs.keys())),
                        }
                    )

                    result = await func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result

                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        return wrapper
    return decorator
