"""Application of an action plan against the governance gateway."""

import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from ..ai.models import Tone
from .action_plan import ActionPlan, CurationPlan, DuplicatePlan, QuestionPlan, TonePlan
from .kind_policy import KindLabelDecision
from .ports import GovernanceGateway, IssueHistoryGateway, QuestionResponseMetrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GovernanceResult:
    """Summary of an applied action plan."""

    actions_applied_count: int
    effective_tone: Tone


class GovernanceExecutionContext:
    """Request-scoped state for applying governance actions.

    Keeps a live mirror of the issue labels so that each step sees the
    changes made by the steps before it, and counts every action that
    reached the gateway.
    """

    def __init__(
        self,
        repo: str,
        issue_number: int,
        labels: Iterable[str],
        governance_gateway: GovernanceGateway,
        history_gateway: IssueHistoryGateway,
        bot_login: str,
        question_response_metrics: QuestionResponseMetrics | None = None,
    ):
        self.repo = repo
        self.issue_number = issue_number
        self.governance_gateway = governance_gateway
        self.history_gateway = history_gateway
        self.bot_login = bot_login
        self.question_response_metrics = question_response_metrics
        self._labels = set(labels)
        self._actions_applied_count = 0

    @property
    def labels(self) -> frozenset[str]:
        return frozenset(self._labels)

    @property
    def actions_applied_count(self) -> int:
        return self._actions_applied_count

    def has_label(self, label: str) -> bool:
        return label in self._labels

    def increment_actions_applied_count(self) -> None:
        self._actions_applied_count += 1

    async def add_label_if_missing(self, label: str) -> bool:
        """Add a label unless the mirror already has it.

        Returns:
            True if the gateway was called
        """
        if label in self._labels:
            logger.debug(
                f"Label '{label}' already present on {self.repo}#{self.issue_number}, "
                f"skipping add"
            )
            return False

        await self.governance_gateway.add_labels(self.repo, self.issue_number, [label])
        self._labels.add(label)
        self.increment_actions_applied_count()
        logger.debug(f"Added label '{label}' to {self.repo}#{self.issue_number}")
        return True

    async def remove_label_if_present(self, label: str) -> bool:
        """Remove a label only if the mirror has it.

        Returns:
            True if the gateway was called
        """
        if label not in self._labels:
            logger.debug(
                f"Label '{label}' not present on {self.repo}#{self.issue_number}, "
                f"skipping remove"
            )
            return False

        await self.governance_gateway.remove_label(self.repo, self.issue_number, label)
        self._labels.discard(label)
        self.increment_actions_applied_count()
        logger.debug(f"Removed label '{label}' from {self.repo}#{self.issue_number}")
        return True

    async def create_comment(self, body: str) -> None:
        await self.governance_gateway.create_comment(self.repo, self.issue_number, body)
        self.increment_actions_applied_count()


async def apply_classification_actions(
    context: GovernanceExecutionContext, decision: KindLabelDecision | None
) -> None:
    if decision is None:
        raise ValueError("Classification action plan is required.")

    for label in decision.labels_to_remove:
        await context.remove_label_if_present(label)
    for label in decision.labels_to_add:
        await context.add_label_if_missing(label)

    if decision.was_suppressed_by_hostile_tone:
        logger.info(
            f"Kind labels suppressed by hostile tone on "
            f"{context.repo}#{context.issue_number}"
        )


async def apply_duplicate_actions(
    context: GovernanceExecutionContext, plan: DuplicatePlan | None
) -> None:
    """Add the duplicate label and comment only when the label is newly added."""
    if plan is None:
        raise ValueError("Duplicate action plan is required.")

    if not plan.should_process_signal:
        return

    decision = plan.decision
    if plan.comment_publication is None:
        logger.info(
            f"Duplicate detection skipped for {context.repo}#{context.issue_number}: "
            f"original={decision.resolved_original_issue_number}, "
            f"has_similarity_score={decision.has_similarity_score}, "
            f"has_valid_original_issue={decision.has_valid_original_issue}, "
            f"used_fallback={decision.used_fallback_original_issue}"
        )
        return

    if not await context.add_label_if_missing(plan.label):
        return

    await context.create_comment(plan.comment_publication.comment_body)
    logger.info(
        f"Marked {context.repo}#{context.issue_number} as possible duplicate of "
        f"#{plan.comment_publication.original_issue_number}"
    )


async def apply_tone_actions(
    context: GovernanceExecutionContext, plan: TonePlan | None
) -> None:
    if plan is None:
        raise ValueError("Tone action plan is required.")

    for label in plan.labels_to_add:
        await context.add_label_if_missing(label)


async def apply_question_response_actions(
    context: GovernanceExecutionContext, plan: QuestionPlan | None
) -> None:
    """Publish the question response unless the bot already answered."""
    if plan is None:
        raise ValueError("Question response action plan is required.")

    publication = plan.comment_publication
    if publication is None:
        return

    metrics_snapshot = None
    if context.question_response_metrics is not None:
        context.question_response_metrics.increment(publication.response_source)
        metrics_snapshot = context.question_response_metrics.snapshot()

    logger.info(
        f"Question response source for {context.repo}#{context.issue_number}: "
        f"{publication.response_source.value} "
        f"(used_repository_context={publication.used_repository_context}, "
        f"metrics={metrics_snapshot})"
    )

    has_existing_comment = await context.history_gateway.has_issue_comment_with_prefix(
        context.repo, context.issue_number, publication.comment_prefix, context.bot_login
    )
    if has_existing_comment:
        logger.debug(
            f"Question response already posted on {context.repo}#{context.issue_number}, "
            f"skipping"
        )
        return

    await context.create_comment(publication.comment_body)


async def apply_curation_actions(
    context: GovernanceExecutionContext, plan: CurationPlan | None
) -> None:
    if plan is None:
        raise ValueError("Curation action plan is required.")

    for label in plan.labels_to_add:
        await context.add_label_if_missing(label)


async def _run_step(
    context: GovernanceExecutionContext,
    name: str,
    step: Callable[[], Awaitable[None]],
) -> None:
    started = time.perf_counter()
    logger.debug(f"Governance step '{name}' started for {context.repo}#{context.issue_number}")
    try:
        await step()
    except Exception:
        logger.exception(
            f"Governance step '{name}' failed for {context.repo}#{context.issue_number}"
        )
        raise
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug(
        f"Governance step '{name}' completed for {context.repo}#{context.issue_number} "
        f"in {elapsed_ms:.1f}ms"
    )


async def apply_action_plan(
    context: GovernanceExecutionContext, plan: ActionPlan
) -> GovernanceResult:
    """Apply every sub-plan strictly in order.

    Order: classification, duplicate, tone, question, curation. Gateway
    failures are logged and re-raised.

    Args:
        context: Execution context for this request
        plan: Action plan built for the same issue

    Returns:
        Applied action count and the effective tone
    """
    await _run_step(
        context,
        "classification",
        lambda: apply_classification_actions(context, plan.classification),
    )
    await _run_step(context, "duplicate", lambda: apply_duplicate_actions(context, plan.duplicate))
    await _run_step(context, "tone", lambda: apply_tone_actions(context, plan.tone))
    await _run_step(
        context, "question", lambda: apply_question_response_actions(context, plan.question)
    )
    await _run_step(context, "curation", lambda: apply_curation_actions(context, plan.curation))

    return GovernanceResult(
        actions_applied_count=context.actions_applied_count,
        effective_tone=plan.effective_tone,
    )
