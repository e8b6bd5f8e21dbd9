"""Prometheus metrics for analyze calls."""

import logging
from typing import Iterable, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from perspective_client.app.config import Settings, settings

logger = logging.getLogger(__name__)

# Define Prometheus metrics
ANALYZE_REQUESTS = Counter(
    "perspective_analyze_requests_total",
    "Total count of analyze calls by outcome",
    ["outcome"],
)
ANALYZE_LATENCY = Histogram(
    "perspective_analyze_duration_seconds",
    "Latency of analyze calls that reached the network, in seconds",
)
VALIDATION_ERRORS = Counter(
    "perspective_validation_errors_total",
    "Total count of payloads rejected before dispatch",
    ["kind"],
)
REQUESTED_ATTRIBUTES = Counter(
    "perspective_requested_attributes_total",
    "Total count of attributes requested from the service",
    ["attribute"],
)



# Production and experimental attributes of the comment analyzer. Anything
# else is counted under OTHER_ATTRIBUTE to keep label cardinality bounded.
KNOWN_ATTRIBUTES = frozenset(
    {
        "TOXICITY",
        "SEVERE_TOXICITY",
        "IDENTITY_ATTACK",
        "INSULT",
        "PROFANITY",
        "THREAT",
        "SEXUALLY_EXPLICIT",
        "FLIRTATION",
        "TOXICITY_EXPERIMENTAL",
        "SEVERE_TOXICITY_EXPERIMENTAL",
        "IDENTITY_ATTACK_EXPERIMENTAL",
        "INSULT_EXPERIMENTAL",
        "PROFANITY_EXPERIMENTAL",
        "THREAT_EXPERIMENTAL",
        "ATTACK_ON_AUTHOR",
        "ATTACK_ON_COMMENTER",
        "INCOHERENT",
        "INFLAMMATORY",
        "LIKELY_TO_REJECT",
        "OBSCENE",
        "SPAM",
        "UNSUBSTANTIAL",
    }
)
OTHER_ATTRIBUTE = "OTHER"


def _metrics_enabled(config: Optional[Settings]) -> bool:
    return (config or settings).METRICS_ENABLED


def attribute_label(attribute: str) -> str:
    """Map an attribute name to a bounded label value."""
    name = str(attribute).strip().upper()
    return name if name in KNOWN_ATTRIBUTES else OTHER_ATTRIBUTE


def track_analyze_outcome(
    outcome: str,
    duration: float | None = None,
    config: Optional[Settings] = None,
) -> None:
    """Record the outcome of an analyze call.

    Args:
        outcome: One of "success", "response_error" or "validation_error".
        duration: Seconds spent on the network call, when one was made.
        config: Settings of the calling client. Defaults to the global settings.
    """
    if not _metrics_enabled(config):
        return
    ANALYZE_REQUESTS.labels(outcome=outcome).inc()
    if duration is not None:
        ANALYZE_LATENCY.observe(duration)


def track_validation_error(kind: str, config: Optional[Settings] = None) -> None:
    """Increment counter for a payload rejected locally.

    Args:
        kind: The error class name, e.g. "TextEmptyError".
        config: Settings of the calling client. Defaults to the global settings.
    """
    if not _metrics_enabled(config):
        return
    VALIDATION_ERRORS.labels(kind=kind).inc()
    ANALYZE_REQUESTS.labels(outcome="validation_error").inc()


def track_attributes(
    attributes: Iterable[str], config: Optional[Settings] = None
) -> None:
    """Increment counters for each requested attribute.

    Unknown attribute names are counted under OTHER_ATTRIBUTE.
    """
    if not _metrics_enabled(config):
        return
    for attribute in attributes:
        REQUESTED_ATTRIBUTES.labels(attribute=attribute_label(attribute)).inc()


def metrics_payload(registry: CollectorRegistry = REGISTRY) -> tuple[bytes, str]:
    """Render metrics in the Prometheus text exposition format.

    Returns:
        The encoded metrics and their content type, ready to be served by
        whatever HTTP layer embeds the client.
    """
    return generate_latest(registry), CONTENT_TYPE_LATEST
