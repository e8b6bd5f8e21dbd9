"""Payload builder for the comment analyze endpoint.

Turns raw comment text or a caller-supplied request object into the JSON
body sent to the service. Rules are applied in a fixed order on an owned
copy of the input:

1. strip HTML markup from ``comment.text``
2. validate the text (empty, too long, or truncate)
3. resolve ``requestedAttributes``
4. merge ``doNotStore`` without overriding a caller-supplied value
"""

import copy
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from perspective_client.app.exceptions import TextEmptyError, TextTooLongError
from perspective_client.app.models import (
    AnalyzeOptions,
    PrebuiltRequest,
    as_payload_input,
)
from perspective_client.app.services.html import strip_html

logger = logging.getLogger(__name__)

MAX_LENGTH = 3000
DEFAULT_ATTRIBUTES = ("TOXICITY",)

OptionsLike = Union[AnalyzeOptions, Mapping[str, Any], None]


def resolve_options(options: OptionsLike) -> AnalyzeOptions:
    """Coerce None, a mapping or an AnalyzeOptions into AnalyzeOptions."""
    if options is None:
        return AnalyzeOptions()
    if isinstance(options, AnalyzeOptions):
        return options
    return AnalyzeOptions.model_validate(dict(options))


def build(
    value: Any,
    options: OptionsLike = None,
    *,
    max_length: int = MAX_LENGTH,
    default_attributes: tuple[str, ...] | list[str] = DEFAULT_ATTRIBUTES,
) -> dict[str, Any]:
    """Build a validated analyze request.

    Args:
        value: Comment text, a request-shaped mapping, or an already tagged
            RawText / PrebuiltRequest.
        options: Per-call options, as an AnalyzeOptions or a mapping using
            either wire or snake_case names.
        max_length: Maximum accepted comment length.
        default_attributes: Attributes requested when neither the options nor
            the request name any.

    Returns:
        A new request mapping. The caller's input is never mutated.

    Raises:
        TextEmptyError: If the comment text is missing or empty.
        TextTooLongError: If the text is longer than ``max_length`` and
            truncation was not requested.
        pydantic.ValidationError: If the options are malformed.
    """
    opts = resolve_options(options)
    payload_input = as_payload_input(value)

    if isinstance(payload_input, PrebuiltRequest):
        resource = copy.deepcopy(payload_input.resource)
        prebuilt = True
    else:
        resource = {"comment": {"text": payload_input.text}}
        prebuilt = False

    comment = resource.get("comment")
    if not isinstance(comment, dict):
        comment = {}
        resource["comment"] = comment

    text = comment.get("text")
    if opts.strip_html and text:
        text = strip_html(text)
    comment["text"] = _validate_text(text, opts.truncate, max_length)

    attributes = _resolve_attributes(
        opts.attributes, resource.get("requestedAttributes"), default_attributes
    )
    if attributes is not None:
        resource["requestedAttributes"] = attributes

    if not (prebuilt and "doNotStore" in resource):
        resource["doNotStore"] = opts.do_not_store

    logger.debug(
        "Built analyze payload: %d characters, attributes=%s",
        len(comment["text"]),
        sorted(resource.get("requestedAttributes", {})),
    )
    return resource


def _validate_text(text: Optional[str], truncate: bool, max_length: int) -> str:
    if not text:
        raise TextEmptyError()
    if len(text) > max_length:
        if not truncate:
            raise TextTooLongError(len(text), max_length)
        logger.debug("Truncating comment from %d to %d characters", len(text), max_length)
        text = text[:max_length]
    return text


def _resolve_attributes(
    requested: Union[list[str], dict[str, Any], None],
    existing: Any,
    default_attributes: tuple[str, ...] | list[str],
) -> Optional[dict[str, Any]]:
    """Return the requestedAttributes to set, or None to keep the existing ones."""
    if isinstance(requested, list):
        return {name.upper(): {} for name in requested}
    if isinstance(requested, dict):
        return copy.deepcopy(requested)
    if existing is None:
        return {name.upper(): {} for name in default_attributes}
    return None
