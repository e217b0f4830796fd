"""Pydantic models for the canonical AI triage analysis."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class IssueKind(str, Enum):
    """Issue classification kinds the model may return."""

    BUG = "bug"
    FEATURE = "feature"
    QUESTION = "question"


class Tone(str, Enum):
    """Author tone detected by the model."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    HOSTILE = "hostile"


class _AnalysisModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Classification(_AnalysisModel):
    """Issue kind with the model's confidence."""

    type: IssueKind
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str


class DuplicateDetection(_AnalysisModel):
    """Duplicate signal and the resolved original issue, if any."""

    is_duplicate: bool = Field(alias="isDuplicate")
    original_issue_number: int | None = Field(
        default=None, alias="originalIssueNumber", ge=1
    )
    similarity_score: float = Field(alias="similarityScore", ge=0.0, le=1.0)
    has_explicit_original_issue_reference: bool = Field(
        default=False,
        alias="hasExplicitOriginalIssueReference",
        description="The model named an original issue, even if it did not resolve",
    )


class Sentiment(_AnalysisModel):
    """Author tone with the model's confidence."""

    tone: Tone
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str


class LabelRecommendation(_AnalysisModel):
    """Model opinion about a single curation label."""

    should_apply: bool = Field(alias="shouldApply")
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str | None = None


class LabelRecommendations(_AnalysisModel):
    """Curation label recommendations keyed by label kind."""

    documentation: LabelRecommendation | None = None
    help_wanted: LabelRecommendation | None = Field(default=None, alias="helpWanted")
    good_first_issue: LabelRecommendation | None = Field(
        default=None, alias="goodFirstIssue"
    )


class AiAnalysis(_AnalysisModel):
    """Canonical analysis record produced by the normalizer.

    Serialize with ``model_dump_json(by_alias=True)`` to obtain the canonical
    camelCase JSON shape accepted back by ``normalize_ai_analysis``.
    """

    classification: Classification
    duplicate_detection: DuplicateDetection = Field(alias="duplicateDetection")
    sentiment: Sentiment
    label_recommendations: LabelRecommendations | None = Field(
        default=None, alias="labelRecommendations"
    )
    suggested_response: str | None = Field(default=None, alias="suggestedResponse")
