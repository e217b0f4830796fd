"""Curation label policy for documentation, help wanted and good first issue."""

from collections.abc import Collection

from ..ai.models import IssueKind, LabelRecommendation, LabelRecommendations, Tone
from .constants import DOCUMENTATION_LABEL, GOOD_FIRST_ISSUE_LABEL, HELP_WANTED_LABEL

CURATION_KINDS = (IssueKind.QUESTION, IssueKind.FEATURE)


def _is_recommended(recommendation: LabelRecommendation | None, threshold: float) -> bool:
    return (
        recommendation is not None
        and recommendation.should_apply
        and recommendation.confidence >= threshold
    )


def decide_curation_labels(
    label_recommendations: LabelRecommendations | None,
    existing_labels: Collection[str],
    classification_type: IssueKind | str,
    classification_confidence: float,
    classification_threshold: float,
    tone: Tone | str,
    is_likely_duplicate: bool,
    documentation_threshold: float = 0.9,
    help_wanted_threshold: float = 0.9,
    good_first_issue_threshold: float = 0.95,
    documentation_label: str = DOCUMENTATION_LABEL,
    help_wanted_label: str = HELP_WANTED_LABEL,
    good_first_issue_label: str = GOOD_FIRST_ISSUE_LABEL,
) -> list[str]:
    """Select curation labels to add, in documentation, help wanted, good first issue order.

    Nothing is added for hostile or likely duplicate issues.
    """
    if label_recommendations is None or tone == Tone.HOSTILE or is_likely_duplicate:
        return []

    is_curation_kind = classification_type in CURATION_KINDS
    labels_to_add: list[str] = []

    if (
        is_curation_kind
        and _is_recommended(label_recommendations.documentation, documentation_threshold)
        and documentation_label not in existing_labels
    ):
        labels_to_add.append(documentation_label)

    if (
        _is_recommended(label_recommendations.help_wanted, help_wanted_threshold)
        and help_wanted_label not in existing_labels
    ):
        labels_to_add.append(help_wanted_label)

    if (
        is_curation_kind
        and classification_confidence >= classification_threshold
        and _is_recommended(
            label_recommendations.good_first_issue, good_first_issue_threshold
        )
        and good_first_issue_label not in existing_labels
    ):
        labels_to_add.append(good_first_issue_label)

    return labels_to_add
