"""Exception types raised by the Perspective client."""

from typing import Any, Optional

import httpx


class PerspectiveError(Exception):
    """Base class for all client errors."""


class ConfigurationError(PerspectiveError):
    """Raised when the client is constructed without required settings."""


class ValidationError(PerspectiveError):
    """Raised when a payload fails local validation.

    These errors are raised before any network access and are not retriable:
    the caller has to fix the input.
    """


class TextEmptyError(ValidationError):
    """Raised when the comment text is missing or empty after processing."""

    def __init__(self, message: str = "Comment text must not be empty") -> None:
        super().__init__(message)


class TextTooLongError(ValidationError):
    """Raised when the comment text exceeds the maximum length.

    Attributes:
        length: Length of the offending text.
        limit: Maximum number of characters accepted.
    """

    def __init__(self, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(
            f"Comment text is {length} characters long, "
            f"exceeding the limit of {limit}"
        )


class ResponseError(PerspectiveError):
    """Raised when the remote call fails.

    Attributes:
        message: Error message from the response body, the HTTP reason phrase
            or the transport failure.
        status_code: HTTP status code, or None when no response was received.
        response: The raw ``httpx.Response``, or None when no response was
            received.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[httpx.Response] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(message)

    @property
    def body(self) -> Any:
        """The decoded JSON error body, or None when it is unavailable."""
        if self.response is None:
            return None
        try:
            return self.response.json()
        except ValueError:
            return None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ResponseError":
        """Build an error from a non-2xx response.

        The message is taken from ``error.message`` in the JSON body, which is
        where the service reports failures, falling back to the reason phrase.
        """
        message = None
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            message = data["error"].get("message")
        if not message:
            message = response.reason_phrase or f"HTTP {response.status_code}"
        return cls(message, status_code=response.status_code, response=response)
