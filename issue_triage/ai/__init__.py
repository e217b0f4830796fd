"""AI analysis parsing and model access for issue triage."""

from .models import (
    AiAnalysis,
    Classification,
    DuplicateDetection,
    IssueKind,
    LabelRecommendation,
    LabelRecommendations,
    Sentiment,
    Tone,
)
from .normalizer import normalize_ai_analysis
from .prompts import ISSUE_TRIAGE_SYSTEM_PROMPT, build_issue_triage_user_prompt

__all__ = [
    # Models
    "AiAnalysis",
    "Classification",
    "DuplicateDetection",
    "IssueKind",
    "LabelRecommendation",
    "LabelRecommendations",
    "Sentiment",
    "Tone",
    # Normalization
    "normalize_ai_analysis",
    # Prompts
    "ISSUE_TRIAGE_SYSTEM_PROMPT",
    "build_issue_triage_user_prompt",
]
