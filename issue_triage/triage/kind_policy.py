"""Kind (classification) label policy."""

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field

from ..ai.models import IssueKind, Tone
from .constants import KIND_LABELS


@dataclass(frozen=True)
class KindLabelDecision:
    """Kind labels to add and remove for one issue."""

    labels_to_add: list[str] = field(default_factory=list)
    labels_to_remove: list[str] = field(default_factory=list)
    was_suppressed_by_hostile_tone: bool = False


def kind_label_for(kind: IssueKind | str) -> str:
    return KIND_LABELS[IssueKind(kind).value]


def decide_kind_label_actions(
    target_label: str,
    classification_confidence: float,
    classification_threshold: float,
    tone: Tone | str,
    tone_confidence: float,
    tone_threshold: float,
    existing_labels: Collection[str],
    all_kind_labels: Iterable[str] = KIND_LABELS.values(),
) -> KindLabelDecision:
    """Decide kind label changes, keeping at most one kind label on the issue.

    A confidently hostile tone strips every kind label and takes priority
    over the classification.

    Args:
        target_label: Kind label for the classified type
        classification_confidence: Model confidence in the classification
        classification_threshold: Minimum confidence to apply the label
        tone: Detected tone
        tone_confidence: Model confidence in the tone
        tone_threshold: Minimum confidence for hostile suppression
        existing_labels: Labels currently on the issue
        all_kind_labels: Every mutually exclusive kind label

    Returns:
        Labels to add and remove, and whether hostile tone suppressed them
    """
    present_kind_labels = [label for label in all_kind_labels if label in existing_labels]

    if tone == Tone.HOSTILE and tone_confidence >= tone_threshold:
        return KindLabelDecision(
            labels_to_remove=present_kind_labels,
            was_suppressed_by_hostile_tone=True,
        )

    if classification_confidence < classification_threshold:
        return KindLabelDecision()

    return KindLabelDecision(
        labels_to_add=[target_label],
        labels_to_remove=[label for label in present_kind_labels if label != target_label],
    )
