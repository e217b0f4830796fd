"""Question response policy: when and what to answer on question-like issues."""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from ..ai.models import IssueKind, Tone
from .constants import (
    GROUNDING_STOP_WORDS,
    MIN_GROUNDING_TOKEN_LENGTH,
    MIN_GROUNDING_TOKEN_MATCHES,
    OPENED_ACTION,
    QUESTION_AI_SUGGESTED_COMMENT_PREFIX,
    QUESTION_FALLBACK_CHECKLIST_COMMENT_PREFIX,
)

TOKEN_SEPARATOR_PATTERN = re.compile(r"[^a-z0-9]+")
QUESTION_MARKS = ("?", "¿")


class QuestionResponseSource(str, Enum):
    """Where a published question response came from."""

    AI_SUGGESTED_RESPONSE = "ai_suggested_response"
    FALLBACK_CHECKLIST = "fallback_checklist"


@dataclass(frozen=True)
class QuestionResponseDecision:
    """Whether to answer and with which body."""

    should_create_comment: bool
    response_source: QuestionResponseSource | None = None
    response_body: str = ""


@dataclass(frozen=True)
class QuestionCommentPublicationPlan:
    """Comment ready for publication, pending the existing-comment check."""

    response_source: QuestionResponseSource
    response_body: str
    comment_prefix: str
    comment_body: str
    used_repository_context: bool


def is_likely_question_issue(
    title: str, body: str, question_signal_keywords: Iterable[str]
) -> bool:
    """Check title and body for question marks or configured signal keywords."""
    text = f"{title}\n{body}".lower()
    if any(mark in text for mark in QUESTION_MARKS):
        return True
    return any(keyword.lower() in text for keyword in question_signal_keywords if keyword)


def normalize_question_suggested_response(value: str | None) -> str:
    return (value or "").strip()


def build_fallback_response(
    looks_like_question: bool, checklist_lines: Iterable[str]
) -> str:
    """Render the fallback checklist, only for issues that look like questions."""
    if not looks_like_question:
        return ""
    return "\n".join(checklist_lines)


def decide_question_response(
    action: str,
    tone: Tone | str,
    classification_type: IssueKind | str,
    classification_confidence: float,
    classification_threshold: float,
    looks_like_question: bool,
    normalized_suggested_response: str,
    fallback_checklist_text: str,
) -> QuestionResponseDecision:
    """Decide whether a question response comment should be created.

    Only newly opened, non-hostile issues that are confidently classified as
    questions or that look like questions are answered. The model's own
    suggestion wins over the fallback checklist.

    Args:
        action: Webhook action verb
        tone: Detected tone
        classification_type: Classified issue kind
        classification_confidence: Model confidence in the classification
        classification_threshold: Minimum confidence for a question classification
        looks_like_question: Result of the question heuristic
        normalized_suggested_response: Trimmed model suggestion, or empty
        fallback_checklist_text: Fallback checklist, or empty

    Returns:
        Question response decision
    """
    is_confident_question = (
        classification_type == IssueKind.QUESTION
        and classification_confidence >= classification_threshold
    )
    is_eligible = (
        action == OPENED_ACTION
        and tone != Tone.HOSTILE
        and (is_confident_question or looks_like_question)
    )

    if normalized_suggested_response:
        source = QuestionResponseSource.AI_SUGGESTED_RESPONSE
        body = normalized_suggested_response
    elif fallback_checklist_text:
        source = QuestionResponseSource.FALLBACK_CHECKLIST
        body = fallback_checklist_text
    else:
        return QuestionResponseDecision(should_create_comment=False)

    if not is_eligible:
        return QuestionResponseDecision(should_create_comment=False)

    return QuestionResponseDecision(
        should_create_comment=True, response_source=source, response_body=body
    )


def resolve_question_comment_prefix(
    source: QuestionResponseSource,
    ai_suggested_prefix: str = QUESTION_AI_SUGGESTED_COMMENT_PREFIX,
    fallback_checklist_prefix: str = QUESTION_FALLBACK_CHECKLIST_COMMENT_PREFIX,
) -> str:
    if source == QuestionResponseSource.AI_SUGGESTED_RESPONSE:
        return ai_suggested_prefix
    return fallback_checklist_prefix


def build_question_comment(prefix: str, response_body: str) -> str:
    return f"{prefix}\n\n{response_body}"


def _meaningful_tokens(text: str) -> set[str]:
    return {
        token
        for token in TOKEN_SEPARATOR_PATTERN.split(text.lower())
        if len(token) >= MIN_GROUNDING_TOKEN_LENGTH and token not in GROUNDING_STOP_WORDS
    }


def detect_repository_context_usage(response: str, repository_readme: str | None) -> bool:
    """Check whether a response reuses at least two distinct README terms."""
    if not response or not repository_readme:
        return False

    shared = _meaningful_tokens(response) & _meaningful_tokens(repository_readme)
    return len(shared) >= MIN_GROUNDING_TOKEN_MATCHES


def plan_question_comment_publication(
    decision: QuestionResponseDecision,
    repository_readme: str | None,
    ai_suggested_prefix: str = QUESTION_AI_SUGGESTED_COMMENT_PREFIX,
    fallback_checklist_prefix: str = QUESTION_FALLBACK_CHECKLIST_COMMENT_PREFIX,
) -> QuestionCommentPublicationPlan | None:
    if not decision.should_create_comment or decision.response_source is None:
        return None

    prefix = resolve_question_comment_prefix(
        decision.response_source, ai_suggested_prefix, fallback_checklist_prefix
    )
    return QuestionCommentPublicationPlan(
        response_source=decision.response_source,
        response_body=decision.response_body,
        comment_prefix=prefix,
        comment_body=build_question_comment(prefix, decision.response_body),
        used_repository_context=detect_repository_context_usage(
            decision.response_body, repository_readme
        ),
    )
