"""Per-call options for building an analyze payload."""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class AnalyzeOptions(BaseModel):
    """Options consumed once per analyze call.

    Accepts the wire-style names (``stripHTML``, ``doNotStore``) as well as
    the snake_case field names.

    Attributes:
        strip_html: Remove HTML markup from the text before length checks.
        truncate: Cut oversized text to the limit instead of failing.
        do_not_store: Ask the service not to persist the comment.
        attributes: Attribute names to request, or a ready-made
            ``requestedAttributes`` mapping. None means "use the default".
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    strip_html: bool = Field(default=True, alias="stripHTML")
    truncate: bool = False
    do_not_store: bool = Field(default=True, alias="doNotStore")
    attributes: Optional[Union[list[str], dict[str, Any]]] = None
