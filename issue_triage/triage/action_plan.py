"""Composition of the triage policies into a single action plan."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..ai.models import AiAnalysis, Tone
from ..config import TriageSettings
from .constants import DUPLICATE_LABEL, KIND_LABELS, MONITOR_LABEL, OPENED_ACTION
from .curation_policy import decide_curation_labels
from .duplicate_policy import (
    DuplicateCommentPublicationPlan,
    DuplicateDecision,
    decide_duplicate_actions,
    plan_duplicate_comment_publication,
    resolve_fallback_duplicate_issue_number,
)
from .kind_policy import KindLabelDecision, decide_kind_label_actions, kind_label_for
from .ports import RecentIssueSummary
from .question_policy import (
    QuestionCommentPublicationPlan,
    QuestionResponseDecision,
    build_fallback_response,
    decide_question_response,
    is_likely_question_issue,
    normalize_question_suggested_response,
    plan_question_comment_publication,
)
from .tone_policy import decide_tone_labels


@dataclass(frozen=True)
class IssueSnapshot:
    """Issue state as fetched by the caller before planning."""

    number: int
    title: str
    body: str
    action: str = OPENED_ACTION
    labels: tuple[str, ...] = ()
    recent_issues: tuple[RecentIssueSummary, ...] = ()
    repository_readme: str | None = None


@dataclass(frozen=True)
class DuplicatePlan:
    should_process_signal: bool
    decision: DuplicateDecision
    comment_publication: DuplicateCommentPublicationPlan | None
    label: str = DUPLICATE_LABEL


@dataclass(frozen=True)
class QuestionPlan:
    decision: QuestionResponseDecision
    comment_publication: QuestionCommentPublicationPlan | None


@dataclass(frozen=True)
class TonePlan:
    labels_to_add: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CurationPlan:
    labels_to_add: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ActionPlan:
    """Every governance decision for one triage request, in application order."""

    effective_tone: Tone
    classification: KindLabelDecision
    duplicate: DuplicatePlan
    tone: TonePlan
    question: QuestionPlan
    curation: CurationPlan


def _open_issue_numbers(recent_issues: Sequence[RecentIssueSummary]) -> list[int]:
    return [issue.number for issue in recent_issues if issue.state == "open"]


class ActionPlanBuilder:
    """Builds action plans from an analysis and an issue snapshot."""

    def __init__(self, settings: TriageSettings | None = None):
        self.settings = settings or TriageSettings()

    def build(self, snapshot: IssueSnapshot, analysis: AiAnalysis) -> ActionPlan:
        """Run every policy against the snapshot.

        Args:
            snapshot: Issue state before any action is applied
            analysis: Canonical analysis for the issue

        Returns:
            Immutable action plan
        """
        settings = self.settings
        classification = analysis.classification
        sentiment = analysis.sentiment
        duplicate_detection = analysis.duplicate_detection

        kind_decision = decide_kind_label_actions(
            target_label=kind_label_for(classification.type),
            classification_confidence=classification.confidence,
            classification_threshold=settings.classification_confidence_threshold,
            tone=sentiment.tone,
            tone_confidence=sentiment.confidence,
            tone_threshold=settings.sentiment_confidence_threshold,
            existing_labels=snapshot.labels,
            all_kind_labels=KIND_LABELS.values(),
        )

        duplicate_decision = decide_duplicate_actions(
            is_duplicate=duplicate_detection.is_duplicate,
            original_issue_number=duplicate_detection.original_issue_number,
            similarity_score=duplicate_detection.similarity_score,
            has_explicit_reference=duplicate_detection.has_explicit_original_issue_reference,
            current_issue_number=snapshot.number,
            fallback_original_issue_number=resolve_fallback_duplicate_issue_number(
                snapshot.number, _open_issue_numbers(snapshot.recent_issues)
            ),
            similarity_threshold=settings.duplicate_similarity_threshold,
        )
        duplicate_plan = DuplicatePlan(
            should_process_signal=duplicate_detection.is_duplicate,
            decision=duplicate_decision,
            comment_publication=plan_duplicate_comment_publication(
                duplicate_decision, duplicate_detection.similarity_score
            ),
        )

        looks_like_question = is_likely_question_issue(
            snapshot.title, snapshot.body, settings.question_signal_keywords
        )
        question_decision = decide_question_response(
            action=snapshot.action,
            tone=sentiment.tone,
            classification_type=classification.type,
            classification_confidence=classification.confidence,
            classification_threshold=settings.classification_confidence_threshold,
            looks_like_question=looks_like_question,
            normalized_suggested_response=normalize_question_suggested_response(
                analysis.suggested_response
            ),
            fallback_checklist_text=build_fallback_response(
                looks_like_question, settings.question_fallback_checklist
            ),
        )
        question_plan = QuestionPlan(
            decision=question_decision,
            comment_publication=plan_question_comment_publication(
                question_decision, snapshot.repository_readme
            ),
        )

        curation_labels = decide_curation_labels(
            label_recommendations=analysis.label_recommendations,
            existing_labels=snapshot.labels,
            classification_type=classification.type,
            classification_confidence=classification.confidence,
            classification_threshold=settings.classification_confidence_threshold,
            tone=sentiment.tone,
            is_likely_duplicate=duplicate_detection.is_duplicate
            and duplicate_decision.has_similarity_score,
            documentation_threshold=settings.documentation_confidence_threshold,
            help_wanted_threshold=settings.help_wanted_confidence_threshold,
            good_first_issue_threshold=settings.good_first_issue_confidence_threshold,
        )

        return ActionPlan(
            effective_tone=sentiment.tone,
            classification=kind_decision,
            duplicate=duplicate_plan,
            tone=TonePlan(labels_to_add=decide_tone_labels(sentiment.tone, MONITOR_LABEL)),
            question=question_plan,
            curation=CurationPlan(labels_to_add=curation_labels),
        )
