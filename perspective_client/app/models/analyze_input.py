"""The two input shapes accepted by the payload builder."""

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict


class RawText(BaseModel):
    """Free-form comment text, wrapped as ``{"comment": {"text": ...}}``."""

    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None


class PrebuiltRequest(BaseModel):
    """A caller-supplied object already shaped like an analyze request."""

    model_config = ConfigDict(frozen=True)

    resource: dict[str, Any]


PayloadInput = Union[RawText, PrebuiltRequest]


def as_payload_input(value: Any) -> PayloadInput:
    """Tag an arbitrary analyze input with its variant.

    Mappings are treated as pre-built requests, anything else as raw text.
    """
    if isinstance(value, (RawText, PrebuiltRequest)):
        return value
    if isinstance(value, Mapping):
        return PrebuiltRequest(resource=dict(value))
    return RawText(text=value)
