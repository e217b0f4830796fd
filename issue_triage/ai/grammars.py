"""Fallback grammars for model responses that are not in canonical shape.

Each grammar is a pure function from a decoded JSON object to an
``AiAnalysis`` or None when the payload does not qualify for it.
"""

from typing import Any

from .fields import (
    first_present,
    is_confidence,
    is_record,
    normalize_issue_kind,
    normalize_suggested_response,
    normalize_tone,
    parse_label_recommendations,
)
from .models import (
    AiAnalysis,
    Classification,
    DuplicateDetection,
    IssueKind,
    Sentiment,
    Tone,
)
from .references import (
    parse_first_valid_duplicate_reference,
    parse_issue_number_from_reference,
)

STRUCTURED_DEFAULT_REASONING = "Structured-format AI response"
LEGACY_DEFAULT_REASONING = "Legacy-format AI response"
DEFAULT_SENTIMENT_CONFIDENCE = 0.5

# Root keys that, on their own, mark a payload as carrying duplicate signals.
ROOT_DUPLICATE_SIGNAL_KEYS = (
    "similarityScore",
    "originalIssueNumber",
    "duplicateIssueId",
    "original_issue_number",
    "duplicate_of",
)
# Resolution order for the original issue, tried in the duplicate block
# first and then at the root of the payload.
ORIGINAL_ISSUE_KEYS = (
    "originalIssueNumber",
    "duplicateIssueId",
    "similarIssueId",
    "original_issue_number",
)
DUPLICATE_OF_KEY = "duplicate_of"


def _first_record(value: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any] | None:
    for key in keys:
        candidate = value.get(key)
        if is_record(candidate):
            return candidate
    return None


def _first_bool(value: dict[str, Any], keys: tuple[str, ...]) -> bool | None:
    for key in keys:
        candidate = value.get(key)
        if isinstance(candidate, bool):
            return candidate
    return None


def _first_confidence(*candidates: Any) -> float | None:
    for candidate in candidates:
        if is_confidence(candidate):
            return candidate
    return None


def _resolve_original_issue(
    scope: dict[str, Any], current_issue_number: int
) -> int | None:
    for key in ORIGINAL_ISSUE_KEYS:
        number = parse_issue_number_from_reference(scope.get(key))
        if number is not None:
            return number
    return parse_first_valid_duplicate_reference(
        scope.get(DUPLICATE_OF_KEY), current_issue_number
    )


def _has_original_issue_reference(scope: dict[str, Any]) -> bool:
    return any(key in scope for key in (*ORIGINAL_ISSUE_KEYS, DUPLICATE_OF_KEY))


def _has_duplicate_signals(
    value: dict[str, Any],
    classification_raw: dict[str, Any],
    duplicate_raw: dict[str, Any] | None,
    root_is_duplicate: bool | None,
) -> bool:
    return (
        duplicate_raw is not None
        or root_is_duplicate is not None
        or any(key in value for key in ROOT_DUPLICATE_SIGNAL_KEYS)
        or "similarityScore" in classification_raw
    )


def parse_structured_analysis(
    value: dict[str, Any], current_issue_number: int
) -> AiAnalysis | None:
    """Parse the structured grammar with its aliased keys.

    The payload qualifies only when it carries a classification object, a
    sentiment object (``sentiment`` or ``tone``) and at least one duplicate
    signal. Every aliased field is resolved through a fixed priority chain.

    Args:
        value: Decoded JSON object
        current_issue_number: Issue being analyzed

    Returns:
        Canonical analysis, or None when the payload does not qualify
    """
    classification_raw = _first_record(value, ("classification",))
    duplicate_raw = _first_record(value, ("duplicateDetection", "duplicate"))
    sentiment_raw = _first_record(value, ("sentiment", "tone"))
    root_is_duplicate = _first_bool(value, ("duplicate", "isDuplicate"))

    if classification_raw is None or sentiment_raw is None:
        return None
    if not _has_duplicate_signals(
        value, classification_raw, duplicate_raw, root_is_duplicate
    ):
        return None

    duplicate_scope = duplicate_raw or {}

    kind = normalize_issue_kind(classification_raw.get("type"))
    classification_confidence = _first_confidence(
        classification_raw.get("confidence"), value.get("confidence")
    )
    if classification_confidence is None:
        classification_confidence = 1 if kind is not None else 0

    original_issue_number = _resolve_original_issue(
        duplicate_scope, current_issue_number
    )
    if original_issue_number is None:
        original_issue_number = _resolve_original_issue(value, current_issue_number)
    if original_issue_number == current_issue_number:
        original_issue_number = None

    has_explicit_reference = _has_original_issue_reference(
        duplicate_scope
    ) or _has_original_issue_reference(value)

    is_duplicate = duplicate_scope.get("isDuplicate") is True or root_is_duplicate is True
    similarity_score = _first_confidence(
        duplicate_scope.get("similarityScore"),
        value.get("similarityScore"),
        classification_raw.get("similarityScore"),
    )
    if similarity_score is None:
        similarity_score = 1 if is_duplicate else 0

    tone = (
        normalize_tone(sentiment_raw.get("tone"))
        or normalize_tone(sentiment_raw.get("sentiment"))
        or Tone.NEUTRAL
    )
    sentiment_confidence = _first_confidence(sentiment_raw.get("confidence"))
    if sentiment_confidence is None:
        sentiment_confidence = DEFAULT_SENTIMENT_CONFIDENCE

    classification_reasoning = classification_raw.get("reasoning")
    sentiment_reasoning = sentiment_raw.get("reasoning")

    return AiAnalysis(
        classification=Classification(
            type=kind or IssueKind.BUG,
            confidence=classification_confidence,
            reasoning=classification_reasoning
            if isinstance(classification_reasoning, str)
            else STRUCTURED_DEFAULT_REASONING,
        ),
        duplicate_detection=DuplicateDetection(
            is_duplicate=is_duplicate,
            original_issue_number=original_issue_number,
            similarity_score=similarity_score,
            has_explicit_original_issue_reference=has_explicit_reference,
        ),
        sentiment=Sentiment(
            tone=tone,
            confidence=sentiment_confidence,
            reasoning=sentiment_reasoning
            if isinstance(sentiment_reasoning, str)
            else STRUCTURED_DEFAULT_REASONING,
        ),
        label_recommendations=parse_label_recommendations(
            first_present(value, ("labelRecommendations", "label_recommendations"))
        ),
        suggested_response=normalize_suggested_response(value.get("suggestedResponse"))
        or normalize_suggested_response(value.get("suggested_response")),
    )


def parse_legacy_analysis(
    value: dict[str, Any], current_issue_number: int
) -> AiAnalysis | None:
    """Parse the legacy grammar with bare-string classification and tone.

    Qualifies only when ``tone`` is a string or ``duplicate_detection`` is an
    object.
    """
    duplicate_raw = _first_record(value, ("duplicate_detection",))
    if not isinstance(value.get("tone"), str) and duplicate_raw is None:
        return None

    duplicate_scope = duplicate_raw or {}
    kind = normalize_issue_kind(value.get("classification"))
    tone = normalize_tone(value.get("tone"))

    explicit_number = parse_issue_number_from_reference(
        duplicate_scope.get("original_issue_number")
    )
    if explicit_number is None:
        explicit_number = parse_issue_number_from_reference(
            duplicate_scope.get("originalIssueNumber")
        )
    original_issue_number = parse_first_valid_duplicate_reference(
        explicit_number
        if explicit_number is not None
        else duplicate_scope.get(DUPLICATE_OF_KEY),
        current_issue_number,
    )
    has_explicit_reference = any(
        key in duplicate_scope
        for key in ("original_issue_number", "originalIssueNumber", DUPLICATE_OF_KEY)
    )
    is_duplicate = duplicate_scope.get("is_duplicate") is True

    reasoning = value.get("reasoning")
    sentiment_confidence = _first_confidence(value.get("confidence"))

    suggested_response = value.get("suggested_response")
    if not isinstance(suggested_response, str):
        suggested_response = value.get("suggestedResponse")

    return AiAnalysis(
        classification=Classification(
            type=kind or IssueKind.BUG,
            confidence=1 if kind is not None else 0,
            reasoning=reasoning if isinstance(reasoning, str) else LEGACY_DEFAULT_REASONING,
        ),
        duplicate_detection=DuplicateDetection(
            is_duplicate=is_duplicate,
            original_issue_number=original_issue_number,
            similarity_score=1 if is_duplicate else 0,
            has_explicit_original_issue_reference=has_explicit_reference,
        ),
        sentiment=Sentiment(
            tone=tone or Tone.NEUTRAL,
            confidence=sentiment_confidence
            if sentiment_confidence is not None
            else DEFAULT_SENTIMENT_CONFIDENCE,
            reasoning=LEGACY_DEFAULT_REASONING,
        ),
        suggested_response=normalize_suggested_response(suggested_response)
        if isinstance(suggested_response, str)
        else None,
    )
