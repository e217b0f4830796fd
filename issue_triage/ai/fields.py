"""Field-level normalization shared by every analysis grammar."""

import math
from typing import Any

from .models import IssueKind, LabelRecommendation, LabelRecommendations, Tone

TONE_ALIASES = {"aggressive": Tone.HOSTILE}

# Canonical key first, then accepted aliases.
LABEL_RECOMMENDATION_KEYS = {
    "documentation": ("documentation", "docs"),
    "help_wanted": ("helpWanted", "help_wanted"),
    "good_first_issue": ("goodFirstIssue", "good_first_issue"),
}
LABEL_RECOMMENDATION_ORDER = ("documentation", "help_wanted", "good_first_issue")


def is_record(value: Any) -> bool:
    return isinstance(value, dict)


def is_confidence(value: Any) -> bool:
    """Check for a finite real number in [0, 1]. Booleans do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return 0 <= value <= 1 and math.isfinite(value)


def normalize_issue_kind(value: Any) -> IssueKind | None:
    if not isinstance(value, str):
        return None
    try:
        return IssueKind(value.strip().lower())
    except ValueError:
        return None


def normalize_tone(value: Any) -> Tone | None:
    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    if normalized in TONE_ALIASES:
        return TONE_ALIASES[normalized]
    try:
        return Tone(normalized)
    except ValueError:
        return None


def normalize_suggested_response(value: Any) -> str | None:
    """Normalize a suggested response given as text or a list of lines.

    Returns:
        Trimmed non-empty text, or None when nothing usable remains
    """
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None

    if isinstance(value, list):
        lines = [item.strip() for item in value if isinstance(item, str)]
        joined = "\n".join(line for line in lines if line)
        return joined or None

    return None


def first_present(record: dict[str, Any], keys: tuple[str, ...]) -> Any:
    """Return the value of the first key present in the record."""
    for key in keys:
        if key in record:
            return record[key]
    return None


def parse_label_recommendation(value: Any) -> LabelRecommendation | None:
    """Parse one recommendation entry, rejecting it as a whole when invalid."""
    if not is_record(value):
        return None

    should_apply = first_present(value, ("shouldApply", "should_apply"))
    confidence = value.get("confidence")
    if not isinstance(should_apply, bool) or not is_confidence(confidence):
        return None

    reasoning = value.get("reasoning")
    return LabelRecommendation(
        should_apply=should_apply,
        confidence=confidence,
        reasoning=reasoning if isinstance(reasoning, str) else None,
    )


def parse_label_recommendations(value: Any) -> LabelRecommendations | None:
    """Parse a recommendation block given as an object or a 3-item sequence.

    Invalid entries are dropped individually. A block that is structurally
    invalid, or that has no valid entries left, is treated as absent.
    """
    entries: dict[str, Any] = {}
    if is_record(value):
        for field_name, keys in LABEL_RECOMMENDATION_KEYS.items():
            entries[field_name] = first_present(value, keys)
    elif isinstance(value, list) and len(value) == len(LABEL_RECOMMENDATION_ORDER):
        entries = dict(zip(LABEL_RECOMMENDATION_ORDER, value))
    else:
        return None

    parsed = {
        field_name: parse_label_recommendation(raw)
        for field_name, raw in entries.items()
    }
    if all(entry is None for entry in parsed.values()):
        return None

    return LabelRecommendations(**parsed)
