"""Typed view of an analyze response body."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Score(BaseModel):
    value: float = Field(..., description="Score value")
    type: Optional[str] = Field(default=None, description="Score type, e.g. PROBABILITY")


class SpanScore(BaseModel):
    begin: Optional[int] = Field(default=None, description="Start offset of the span")
    end: Optional[int] = Field(default=None, description="End offset of the span")
    score: Score


class AttributeScores(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    summary_score: Optional[Score] = Field(default=None, alias="summaryScore")
    span_scores: list[SpanScore] = Field(default_factory=list, alias="spanScores")


class AnalyzeCommentResponse(BaseModel):
    """Parsed analyze response.

    Unknown fields are kept so nothing the service returns is lost.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    attribute_scores: dict[str, AttributeScores] = Field(
        default_factory=dict, alias="attributeScores"
    )
    languages: list[str] = Field(default_factory=list)
    detected_languages: list[str] = Field(
        default_factory=list, alias="detectedLanguages"
    )
    client_token: Optional[str] = Field(default=None, alias="clientToken")

    def summary_score(self, attribute: str) -> Optional[float]:
        """Return the summary score value for an attribute, if present."""
        scores = self.attribute_scores.get(attribute.upper())
        if scores is None or scores.summary_score is None:
            return None
        return scores.summary_score.value

    def summary_scores(self) -> dict[str, float]:
        """Return summary score values keyed by attribute name."""
        return {
            name: scores.summary_score.value
            for name, scores in self.attribute_scores.items()
            if scores.summary_score is not None
        }


def parse_response(data: dict[str, Any]) -> AnalyzeCommentResponse:
    """Validate a raw response mapping into an AnalyzeCommentResponse."""
    return AnalyzeCommentResponse.model_validate(data)
