"""Normalization of raw model output into the canonical analysis record."""

import json
import logging
from typing import Any

from .fields import is_confidence, is_record
from .grammars import parse_legacy_analysis, parse_structured_analysis
from .models import AiAnalysis, IssueKind, Tone

logger = logging.getLogger(__name__)

ISSUE_KINDS = {kind.value for kind in IssueKind}
TONES = {tone.value for tone in Tone}
CANONICAL_LABEL_RECOMMENDATION_KEYS = {"documentation", "helpWanted", "goodFirstIssue"}


def _is_canonical_classification(value: Any) -> bool:
    return (
        is_record(value)
        and isinstance(value.get("type"), str)
        and value["type"] in ISSUE_KINDS
        and is_confidence(value.get("confidence"))
        and isinstance(value.get("reasoning"), str)
    )


def _is_canonical_duplicate_detection(value: Any, current_issue_number: int) -> bool:
    if not is_record(value):
        return False

    original = value.get("originalIssueNumber")
    has_valid_original = original is None or (
        isinstance(original, int)
        and not isinstance(original, bool)
        and original > 0
        and original != current_issue_number
    )
    explicit = value.get("hasExplicitOriginalIssueReference", False)
    return (
        isinstance(value.get("isDuplicate"), bool)
        and has_valid_original
        and is_confidence(value.get("similarityScore"))
        and isinstance(explicit, bool)
    )


def _is_canonical_sentiment(value: Any) -> bool:
    return (
        is_record(value)
        and isinstance(value.get("tone"), str)
        and value["tone"] in TONES
        and is_confidence(value.get("confidence"))
        and isinstance(value.get("reasoning"), str)
    )


def _is_canonical_label_recommendation(value: Any) -> bool:
    return (
        is_record(value)
        and isinstance(value.get("shouldApply"), bool)
        and is_confidence(value.get("confidence"))
        and isinstance(value.get("reasoning"), (str, type(None)))
    )


def _is_canonical_label_recommendations(value: Any) -> bool:
    if value is None:
        return True
    if not is_record(value) or not set(value) <= CANONICAL_LABEL_RECOMMENDATION_KEYS:
        return False
    return all(
        entry is None or _is_canonical_label_recommendation(entry)
        for entry in value.values()
    )


def is_canonical_analysis(value: Any, current_issue_number: int) -> bool:
    """Check whether a decoded payload already has the canonical shape."""
    if not is_record(value):
        return False

    suggested_response = value.get("suggestedResponse")
    return (
        _is_canonical_classification(value.get("classification"))
        and _is_canonical_duplicate_detection(
            value.get("duplicateDetection"), current_issue_number
        )
        and _is_canonical_sentiment(value.get("sentiment"))
        and _is_canonical_label_recommendations(value.get("labelRecommendations"))
        and (
            suggested_response is None
            or (isinstance(suggested_response, str) and bool(suggested_response.strip()))
        )
    )


def normalize_ai_analysis(raw_text: str, current_issue_number: int) -> AiAnalysis | None:
    """Parse raw model output into a canonical analysis.

    Grammars are tried in order: canonical shape, structured aliases, legacy.
    The first one that accepts the payload wins.

    Args:
        raw_text: Raw text returned by the model
        current_issue_number: Number of the issue being analyzed

    Returns:
        Canonical analysis, or None when the text is not usable
    """
    try:
        value = json.loads(raw_text)
    except (TypeError, ValueError, RecursionError) as e:
        logger.debug(f"AI response is not valid JSON: {e}")
        return None

    if is_canonical_analysis(value, current_issue_number):
        return AiAnalysis.model_validate(value)

    if not is_record(value):
        logger.debug("AI response JSON is not an object")
        return None

    analysis = parse_structured_analysis(value, current_issue_number)
    if analysis is None:
        analysis = parse_legacy_analysis(value, current_issue_number)

    if analysis is None:
        logger.debug("AI response did not match any known analysis grammar")
    return analysis
