"""Client library for the Perspective comment analyzer API."""

from perspective_client.app.config import Settings, configure_logging, get_settings
from perspective_client.app.exceptions import (
    ConfigurationError,
    PerspectiveError,
    ResponseError,
    TextEmptyError,
    TextTooLongError,
    ValidationError,
)
from perspective_client.app.models import (
    AnalyzeCommentResponse,
    AnalyzeOptions,
    PrebuiltRequest,
    RawText,
    parse_response,
)
from perspective_client.app.services.client import PerspectiveClient
from perspective_client.app.services.html import strip_html
from perspective_client.app.services.payload import MAX_LENGTH, build

__version__ = "0.1.0"

__all__ = [
    "AnalyzeCommentResponse",
    "AnalyzeOptions",
    "ConfigurationError",
    "MAX_LENGTH",
    "PerspectiveClient",
    "PerspectiveError",
    "PrebuiltRequest",
    "RawText",
    "ResponseError",
    "Settings",
    "TextEmptyError",
    "TextTooLongError",
    "ValidationError",
    "build",
    "configure_logging",
    "get_settings",
    "parse_response",
    "strip_html",
]
