"""Asynchronous client for the comment analyze endpoint."""

import asyncio
import logging
import time
from typing import Any, Optional

import httpx

from perspective_client.app.config import Settings, get_settings
from perspective_client.app.exceptions import (
    ConfigurationError,
    ResponseError,
    ValidationError,
)
from perspective_client.app.prometheus import (
    track_analyze_outcome,
    track_attributes,
    track_validation_error,
)
from perspective_client.app.services.payload import OptionsLike, build
from perspective_client.app.telemetry import trace_method

logger = logging.getLogger(__name__)


class PerspectiveClient:
    """Builds analyze payloads and sends them to the Perspective API.

    The underlying ``httpx.AsyncClient`` is created on first use and reused
    for every later call. Concurrent first calls create it exactly once.

    Args:
        api_key: API key sent as the ``key`` query parameter. Falls back to
            ``PERSPECTIVE_API_KEY`` from the settings.
        settings: Settings to read defaults from. Uses the cached settings
            when omitted.
        http_client: An externally owned ``httpx.AsyncClient`` to send
            requests with. It is never closed by this client.
        transport: An ``httpx`` transport for the lazily created client,
            mainly useful for tests.

    Raises:
        ConfigurationError: If no API key is available.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.api_key = api_key or self.settings.PERSPECTIVE_API_KEY
        if not self.api_key:
            raise ConfigurationError(
                "Must provide an API key or set PERSPECTIVE_API_KEY"
            )
        self.url = self.settings.PERSPECTIVE_API_URL
        self.timeout = self.settings.REQUEST_TIMEOUT
        self._transport = transport
        self._client = http_client
        self._owns_client = http_client is None
        self._client_lock = asyncio.Lock()

    async def __aenter__(self) -> "PerspectiveClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it.

        Calls still in flight fail with ResponseError. A later analyze call
        creates a new HTTP client.
        """
        async with self._client_lock:
            if self._client is not None and self._owns_client:
                await self._client.aclose()
                self._client = None

    def make_resource(self, value: Any, options: OptionsLike = None) -> dict[str, Any]:
        """Build the request body without sending it.

        Raises:
            TextEmptyError: If the comment text is missing or empty.
            TextTooLongError: If the text is too long and not truncated.
        """
        return build(
            value,
            options,
            max_length=self.settings.MAX_TEXT_LENGTH,
            default_attributes=self.settings.default_attributes,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        async with self._client_lock:
            if self._client is None:
                logger.debug("Creating HTTP client for %s", self.url)
                self._client = httpx.AsyncClient(
                    timeout=self.timeout, transport=self._transport
                )
        return self._client

    @trace_method("perspective.analyze")
    async def analyze(self, value: Any, options: OptionsLike = None) -> dict[str, Any]:
        """Analyze a comment.

        Args:
            value: Comment text, or a mapping shaped like an analyze request.
            options: Per-call options (stripHTML, truncate, doNotStore,
                attributes).

        Returns:
            The decoded JSON response body. Its schema is not checked; see
            ``parse_response`` for a typed view.

        Raises:
            TextEmptyError: If the comment text is missing or empty. No
                request is sent.
            TextTooLongError: If the text is too long and truncation was not
                requested. No request is sent.
            ResponseError: If the service answers with a non-2xx status or
                the request fails in transport, including when ``aclose``
                closed the HTTP client while the call was in flight.
        """
        try:
            resource = self.make_resource(value, options)
        except ValidationError as e:
            logger.info("Rejected comment before dispatch: %s", e)
            track_validation_error(type(e).__name__, self.settings)
            raise

        attributes = list(resource.get("requestedAttributes") or {})
        track_attributes(attributes, self.settings)
        logger.info(
            "Analyzing comment of %d characters for %s",
            len(resource["comment"]["text"]),
            ", ".join(attributes) or "no attributes",
        )

        client = await self._get_client()
        started = time.perf_counter()
        try:
            response = await client.post(
                self.url, params={"key": self.api_key}, json=resource
            )
        except httpx.HTTPError as e:
            track_analyze_outcome(
                "response_error", time.perf_counter() - started, self.settings
            )
            logger.error("Analyze request failed: %s", str(e))
            raise ResponseError(str(e) or type(e).__name__) from e
        except RuntimeError as e:
            # aclose() ran after this call obtained the handle
            if not client.is_closed:
                raise
            track_analyze_outcome(
                "response_error", time.perf_counter() - started, self.settings
            )
            logger.error("Analyze request failed, HTTP client closed: %s", str(e))
            raise ResponseError(str(e) or "HTTP client is closed") from e
        duration = time.perf_counter() - started

        if not response.is_success:
            track_analyze_outcome("response_error", duration, self.settings)
            error = ResponseError.from_response(response)
            logger.error(
                "Analyze request returned %d: %s", response.status_code, error.message
            )
            raise error

        try:
            data = response.json()
        except ValueError as e:
            track_analyze_outcome("response_error", duration, self.settings)
            raise ResponseError(
                "Response body is not valid JSON",
                status_code=response.status_code,
                response=response,
            ) from e

        track_analyze_outcome("success", duration, self.settings)
        logger.info("Analyze request completed in %.3fs", duration)
        return data
