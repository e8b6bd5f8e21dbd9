"""Initialize the models package."""

from .analyze_input import PayloadInput, PrebuiltRequest, RawText, as_payload_input
from .analyze_options import AnalyzeOptions
from .analyze_response import (
    AnalyzeCommentResponse,
    AttributeScores,
    Score,
    SpanScore,
    parse_response,
)

__all__ = [
    "AnalyzeCommentResponse",
    "AnalyzeOptions",
    "AttributeScores",
    "PayloadInput",
    "PrebuiltRequest",
    "RawText",
    "Score",
    "SpanScore",
    "as_payload_input",
    "parse_response",
]
