"""Duplicate detection policy."""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from .constants import DUPLICATE_COMMENT_PREFIX


@dataclass(frozen=True)
class DuplicateDecision:
    """Whether duplicate actions apply and which original issue they target."""

    should_apply_duplicate_actions: bool
    resolved_original_issue_number: int | None
    has_similarity_score: bool
    has_valid_original_issue: bool
    used_fallback_original_issue: bool


@dataclass(frozen=True)
class DuplicateCommentPublicationPlan:
    """Comment to post once the duplicate label is newly added."""

    original_issue_number: int
    used_fallback_original_issue: bool
    comment_body: str


def resolve_fallback_duplicate_issue_number(
    current_issue_number: int, recent_issue_numbers: Iterable[int]
) -> int | None:
    """Pick the most recent issue that is not the current one."""
    for number in recent_issue_numbers:
        if number != current_issue_number:
            return number
    return None


def decide_duplicate_actions(
    is_duplicate: bool,
    original_issue_number: int | None,
    similarity_score: float,
    has_explicit_reference: bool,
    current_issue_number: int,
    fallback_original_issue_number: int | None,
    similarity_threshold: float,
) -> DuplicateDecision:
    """Decide whether to mark the issue as a duplicate.

    The fallback issue is used only when the model gave no reference at
    all. A reference the model gave but that did not resolve is treated as
    unresolved and never replaced.

    Args:
        is_duplicate: Model duplicate signal
        original_issue_number: Original issue resolved from model output
        similarity_score: Model similarity score
        has_explicit_reference: Model named an original issue
        current_issue_number: Issue being triaged
        fallback_original_issue_number: Most recent other open issue
        similarity_threshold: Minimum similarity for duplicate actions

    Returns:
        Duplicate decision
    """
    has_similarity_score = similarity_score >= similarity_threshold
    use_fallback = (
        original_issue_number is None
        and has_similarity_score
        and not has_explicit_reference
    )
    resolved = fallback_original_issue_number if use_fallback else original_issue_number
    has_valid_original_issue = resolved is not None and resolved != current_issue_number

    return DuplicateDecision(
        should_apply_duplicate_actions=(
            is_duplicate and has_similarity_score and has_valid_original_issue
        ),
        resolved_original_issue_number=resolved,
        has_similarity_score=has_similarity_score,
        has_valid_original_issue=has_valid_original_issue,
        used_fallback_original_issue=use_fallback and resolved is not None,
    )


def format_similarity_percentage(similarity_score: float) -> int:
    """Round a similarity score to a whole percentage, halves rounding up."""
    return math.floor(similarity_score * 100 + 0.5)


def build_duplicate_comment(
    original_issue_number: int,
    similarity_score: float,
    prefix: str = DUPLICATE_COMMENT_PREFIX,
) -> str:
    percentage = format_similarity_percentage(similarity_score)
    return f"{prefix}{original_issue_number} (Similarity: {percentage}%)."


def plan_duplicate_comment_publication(
    decision: DuplicateDecision,
    similarity_score: float,
    prefix: str = DUPLICATE_COMMENT_PREFIX,
) -> DuplicateCommentPublicationPlan | None:
    if (
        not decision.should_apply_duplicate_actions
        or decision.resolved_original_issue_number is None
    ):
        return None

    return DuplicateCommentPublicationPlan(
        original_issue_number=decision.resolved_original_issue_number,
        used_fallback_original_issue=decision.used_fallback_original_issue,
        comment_body=build_duplicate_comment(
            decision.resolved_original_issue_number, similarity_score, prefix
        ),
    )
