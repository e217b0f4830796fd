"""Tests for governance execution."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from issue_triage.ai.models import AiAnalysis
from issue_triage.triage.action_plan import ActionPlanBuilder, IssueSnapshot, TonePlan
from issue_triage.triage.execution import (
    GovernanceExecutionContext,
    apply_action_plan,
    apply_curation_actions,
    apply_duplicate_actions,
    apply_question_response_actions,
    apply_tone_actions,
)
from issue_triage.triage.metrics import InMemoryQuestionResponseMetrics
from issue_triage.triage.ports import RecentIssueSummary
from issue_triage.triage.question_policy import QuestionResponseSource


def _context(
    governance_gateway: AsyncMock,
    history_gateway: AsyncMock,
    labels: tuple[str, ...] = (),
    metrics: InMemoryQuestionResponseMetrics | None = None,
) -> GovernanceExecutionContext:
    return GovernanceExecutionContext(
        repo="acme/widgets",
        issue_number=42,
        labels=labels,
        governance_gateway=governance_gateway,
        history_gateway=history_gateway,
        bot_login="triage-bot[bot]",
        question_response_metrics=metrics,
    )


class TestGovernanceExecutionContext:
    """Test the label mirror and action counting."""

    @pytest.mark.asyncio
    async def test_add_label_is_idempotent(
        self, governance_gateway: AsyncMock, history_gateway: AsyncMock
    ) -> None:
        """Test a label is added once and the mirror is updated."""
        context = _context(governance_gateway, history_gateway)

        assert await context.add_label_if_missing("kind/bug") is True
        assert await context.add_label_if_missing("kind/bug") is False

        governance_gateway.add_labels.assert_awaited_once_with(
            "acme/widgets", 42, ["kind/bug"]
        )
        assert context.has_label("kind/bug")
        assert context.actions_applied_count == 1

    @pytest.mark.asyncio
    async def test_remove_label_only_when_present(
        self, governance_gateway: AsyncMock, history_gateway: AsyncMock
    ) -> None:
        """Test removing an absent label does not reach the gateway."""
        context = _context(governance_gateway, history_gateway, labels=("kind/feature",))

        assert await context.remove_label_if_present("kind/bug") is False
        assert await context.remove_label_if_present("kind/feature") is True

        governance_gateway.remove_label.assert_awaited_once_with(
            "acme/widgets", 42, "kind/feature"
        )
        assert context.labels == frozenset()
        assert context.actions_applied_count == 1

    @pytest.mark.asyncio
    async def test_failed_add_does_not_update_mirror(
        self, governance_gateway: AsyncMock, history_gateway: AsyncMock
    ) -> None:
        """Test a gateway failure propagates and leaves state unchanged."""
        governance_gateway.add_labels.side_effect = RuntimeError("GitHub down")
        context = _context(governance_gateway, history_gateway)

        with pytest.raises(RuntimeError, match="GitHub down"):
            await context.add_label_if_missing("kind/bug")

        assert not context.has_label("kind/bug")
        assert context.actions_applied_count == 0


class TestApplyActionPlan:
    """Test apply_action_plan and the individual appliers."""

    @pytest.mark.asyncio
    async def test_steps_apply_in_order(
        self,
        governance_gateway: AsyncMock,
        history_gateway: AsyncMock,
        canonical_analysis: dict[str, Any],
    ) -> None:
        """Test classification, duplicate, question and curation order."""
        analysis = AiAnalysis.model_validate(
            {
                **canonical_analysis,
                "classification": {"type": "question", "confidence": 0.9, "reasoning": "?"},
                "duplicateDetection": {
                    "isDuplicate": True,
                    "originalIssueNumber": 12,
                    "similarityScore": 0.7,
                },
                "labelRecommendations": {
                    "documentation": {"shouldApply": True, "confidence": 0.95},
                },
                "suggestedResponse": "- Set PROXY_URL in the config",
            }
        )
        snapshot = IssueSnapshot(
            number=42,
            title="How do I set a proxy?",
            body="Requests time out behind our proxy.",
            labels=("kind/bug",),
        )
        plan = ActionPlanBuilder().build(snapshot, analysis)
        metrics = InMemoryQuestionResponseMetrics()
        context = _context(governance_gateway, history_gateway, snapshot.labels, metrics)

        result = await apply_action_plan(context, plan)

        assert [call[0] for call in governance_gateway.method_calls] == [
            "remove_label",
            "add_labels",
            "create_comment",
            "add_labels",
        ]
        governance_gateway.remove_label.assert_awaited_once_with(
            "acme/widgets", 42, "kind/bug"
        )
        governance_gateway.create_comment.assert_awaited_once_with(
            "acme/widgets",
            42,
            "AI Triage: Suggested guidance\n\n- Set PROXY_URL in the config",
        )
        history_gateway.has_issue_comment_with_prefix.assert_awaited_once_with(
            "acme/widgets", 42, "AI Triage: Suggested guidance", "triage-bot[bot]"
        )
        assert result.actions_applied_count == 4
        assert metrics.snapshot() == {
            "ai_suggested_response": 1,
            "fallback_checklist": 0,
            "total": 1,
        }

    @pytest.mark.asyncio
    async def test_duplicate_comment_only_when_label_is_new(
        self,
        governance_gateway: AsyncMock,
        history_gateway: AsyncMock,
        canonical_analysis: dict[str, Any],
    ) -> None:
        """Test an existing duplicate label suppresses the duplicate comment."""
        analysis = AiAnalysis.model_validate(
            {
                **canonical_analysis,
                "duplicateDetection": {
                    "isDuplicate": True,
                    "originalIssueNumber": 12,
                    "similarityScore": 0.9,
                },
            }
        )
        snapshot = IssueSnapshot(
            number=42, title="Crash on save", body="Trace", labels=("triage/duplicate",)
        )
        plan = ActionPlanBuilder().build(snapshot, analysis)
        context = _context(governance_gateway, history_gateway, snapshot.labels)

        await apply_duplicate_actions(context, plan.duplicate)

        governance_gateway.add_labels.assert_not_awaited()
        governance_gateway.create_comment.assert_not_awaited()

        fresh_context = _context(governance_gateway, history_gateway)
        await apply_duplicate_actions(fresh_context, plan.duplicate)

        governance_gateway.add_labels.assert_awaited_once_with(
            "acme/widgets", 42, ["triage/duplicate"]
        )
        governance_gateway.create_comment.assert_awaited_once_with(
            "acme/widgets", 42, "AI Triage: Possible duplicate of #12 (Similarity: 90%)."
        )

    @pytest.mark.asyncio
    async def test_existing_question_comment_is_not_repeated(
        self,
        governance_gateway: AsyncMock,
        history_gateway: AsyncMock,
        canonical_analysis: dict[str, Any],
    ) -> None:
        """Test the bot does not answer twice, but the source is still counted."""
        history_gateway.has_issue_comment_with_prefix.return_value = True
        snapshot = IssueSnapshot(number=42, title="How to reset?", body="Lost access")
        plan = ActionPlanBuilder().build(
            snapshot, AiAnalysis.model_validate(canonical_analysis)
        )
        metrics = InMemoryQuestionResponseMetrics()
        context = _context(governance_gateway, history_gateway, metrics=metrics)

        await apply_question_response_actions(context, plan.question)

        history_gateway.has_issue_comment_with_prefix.assert_awaited_once_with(
            "acme/widgets", 42, "AI Triage: Suggested setup checklist", "triage-bot[bot]"
        )
        governance_gateway.create_comment.assert_not_awaited()
        assert metrics.snapshot()["fallback_checklist"] == 1

    @pytest.mark.asyncio
    async def test_tone_and_curation_skip_present_labels(
        self, governance_gateway: AsyncMock, history_gateway: AsyncMock
    ) -> None:
        """Test labels already on the issue are not added again."""
        context = _context(governance_gateway, history_gateway, labels=("triage/monitor",))

        await apply_tone_actions(context, TonePlan(labels_to_add=["triage/monitor"]))

        governance_gateway.add_labels.assert_not_awaited()
        assert context.actions_applied_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "applier,message",
        [
            (apply_tone_actions, "Tone action plan is required."),
            (apply_curation_actions, "Curation action plan is required."),
            (apply_duplicate_actions, "Duplicate action plan is required."),
            (apply_question_response_actions, "Question response action plan is required."),
        ],
    )
    async def test_missing_plan(
        self,
        governance_gateway: AsyncMock,
        history_gateway: AsyncMock,
        applier: Any,
        message: str,
    ) -> None:
        """Test appliers reject a missing sub-plan."""
        context = _context(governance_gateway, history_gateway)

        with pytest.raises(ValueError, match=message):
            await applier(context, None)

    @pytest.mark.asyncio
    async def test_gateway_failure_stops_later_steps(
        self,
        governance_gateway: AsyncMock,
        history_gateway: AsyncMock,
        canonical_analysis: dict[str, Any],
    ) -> None:
        """Test a failing step re-raises and later steps do not run."""
        governance_gateway.add_labels.side_effect = RuntimeError("rate limited")
        analysis = AiAnalysis.model_validate(
            {
                **canonical_analysis,
                "sentiment": {"tone": "hostile", "confidence": 0.5, "reasoning": "Rude"},
            }
        )
        snapshot = IssueSnapshot(
            number=42,
            title="Crash on save",
            body="Trace",
            recent_issues=(RecentIssueSummary(number=40, title="Other"),),
        )
        plan = ActionPlanBuilder().build(snapshot, analysis)
        context = _context(governance_gateway, history_gateway)

        with pytest.raises(RuntimeError, match="rate limited"):
            await apply_action_plan(context, plan)

        assert governance_gateway.add_labels.await_count == 1
        history_gateway.has_issue_comment_with_prefix.assert_not_awaited()


class TestInMemoryQuestionResponseMetrics:
    """Test question response counters."""

    def test_counts(self) -> None:
        """Test increments per source and total."""
        metrics = InMemoryQuestionResponseMetrics()
        metrics.increment(QuestionResponseSource.AI_SUGGESTED_RESPONSE)
        metrics.increment(QuestionResponseSource.FALLBACK_CHECKLIST)
        metrics.increment(QuestionResponseSource.FALLBACK_CHECKLIST)

        assert metrics.snapshot() == {
            "ai_suggested_response": 1,
            "fallback_checklist": 2,
            "total": 3,
        }
