"""Tests for issue value objects, integrity validation and the webhook gate."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from issue_triage.triage.entity import Issue
from issue_triage.triage.value_objects import (
    IssueCreatedAt,
    IssueId,
    IssueNumber,
    RepositoryFullName,
)
from issue_triage.triage.webhook import (
    WebhookSkipReason,
    apply_webhook_governance_actions,
    build_validation_comment,
    decide_webhook_processing,
    decide_webhook_workflow,
)

VALID_TITLE = "Crash when saving settings"
VALID_BODY = "Saving the settings page raises a 500 error every time."
ERROR_LABELS = ["triage/needs-info", "triage/invalid"]


def _issue(title: str | None, body: str | None, author: str | None = "octocat") -> Issue:
    issue_id = IssueId(RepositoryFullName.create("acme/widgets"), IssueNumber.create(7))
    return Issue.create(id=issue_id, title=title, description=body, author=author)


class TestValueObjects:
    """Test identity value objects."""

    def test_issue_number_from_unknown(self) -> None:
        """Test issue numbers from webhook input."""
        assert IssueNumber.from_unknown(5) == IssueNumber(5)
        assert IssueNumber.from_unknown(" #12 ") == IssueNumber(12)
        assert IssueNumber.from_unknown("see #8") == IssueNumber(8)
        assert IssueNumber.from_unknown(0) is None
        assert IssueNumber.from_unknown(True) is None
        assert IssueNumber.from_unknown("abc") is None
        assert IssueNumber.from_unknown(None) is None
        assert IssueNumber.from_unknown("#0 and #5") is None
        assert IssueNumber.from_unknown("#" + "9" * 5000) is None

    def test_issue_number_create_rejects_invalid(self) -> None:
        """Test create raises on non-positive values."""
        with pytest.raises(ValueError, match='Invalid issue number: "0"'):
            IssueNumber.create(0)

    def test_repository_full_name(self) -> None:
        """Test owner/repo parsing."""
        repository = RepositoryFullName.create(" acme/widgets ")

        assert repository.owner == "acme"
        assert repository.repo == "widgets"
        assert str(repository) == "acme/widgets"
        assert RepositoryFullName.from_unknown("acme") is None
        assert RepositoryFullName.from_unknown("acme/widgets/extra") is None
        assert RepositoryFullName.from_unknown("acme/ ") is None
        assert RepositoryFullName.from_unknown(42) is None

        with pytest.raises(ValueError, match="Invalid repository full name"):
            RepositoryFullName.create("/widgets")

    def test_issue_id(self) -> None:
        """Test the composite issue identifier."""
        issue_id = IssueId(RepositoryFullName.create("acme/widgets"), IssueNumber(7))

        assert issue_id.value == "acme/widgets#7"
        assert str(issue_id) == "acme/widgets#7"

    def test_created_at(self) -> None:
        """Test ISO timestamps and invalid dates."""
        created = IssueCreatedAt.create("2024-01-15T10:30:00Z")

        assert created.value == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        with pytest.raises(ValueError, match="Invalid issue createdAt date"):
            IssueCreatedAt.create("yesterday")


class TestIntegrityValidation:
    """Test Issue.validate_integrity."""

    def test_valid_issue(self) -> None:
        """Test a complete issue passes."""
        result = _issue(VALID_TITLE, VALID_BODY).validate_integrity()

        assert result.is_valid is True
        assert result.errors == []

    def test_missing_fields(self) -> None:
        """Test missing title, body and author in detection order."""
        result = _issue("   ", None, None).validate_integrity()

        assert result.is_valid is False
        assert result.errors == [
            "Title is required",
            "Description is required",
            "Author is required",
        ]

    def test_short_fields(self) -> None:
        """Test minimum lengths apply to trimmed text."""
        result = _issue("  Short  ", "Too short body").validate_integrity()

        assert result.errors == [
            "Title is too short (min 10 chars)",
            "Description is too short (min 30 chars) to be useful",
        ]

    def test_spam_reported_once(self) -> None:
        """Test several spam matches produce one error."""
        result = _issue(
            "FREE MONEY at the casino", "Work from home and get free money today!!!"
        ).validate_integrity()

        assert result.errors == ["Content contains spam keywords"]

    def test_validation_comment(self) -> None:
        """Test the validation comment lists each error."""
        assert build_validation_comment(["Title is required", "Author is required"]) == (
            "Issue validation failed. Please fix the following items:\n"
            "- Title is required\n"
            "- Author is required"
        )


class TestWebhookGate:
    """Test decide_webhook_processing and decide_webhook_workflow."""

    def test_unsupported_action(self) -> None:
        """Test actions other than opened and edited are skipped."""
        decision = decide_webhook_processing("closed", "acme/widgets", 7)

        assert decision.should_skip_processing is True
        assert decision.reason == WebhookSkipReason.UNSUPPORTED_ACTION

    def test_malformed_identity(self) -> None:
        """Test a bad repository name or issue number is skipped."""
        assert (
            decide_webhook_processing("opened", "widgets", 7).reason
            == WebhookSkipReason.MALFORMED_ISSUE_IDENTITY
        )
        assert (
            decide_webhook_processing("opened", "acme/widgets", "n/a").reason
            == WebhookSkipReason.MALFORMED_ISSUE_IDENTITY
        )

    def test_oversized_issue_number_is_malformed(self) -> None:
        """Test an issue number with too many digits is skipped."""
        decision = decide_webhook_processing("opened", "acme/widgets", "9" * 5000)

        assert decision.should_skip_processing is True
        assert decision.reason == WebhookSkipReason.MALFORMED_ISSUE_IDENTITY

    def test_valid_issue_clears_error_labels(self) -> None:
        """Test a valid issue removes present error labels and logs validation."""
        decision = decide_webhook_workflow(
            action="edited",
            repository_full_name="acme/widgets",
            issue_number="7",
            title=VALID_TITLE,
            body=VALID_BODY,
            author="octocat",
            labels=["triage/invalid", "area/ui"],
            governance_error_labels=ERROR_LABELS,
        )

        assert decision.should_skip_processing is False
        assert decision.should_run_ai_triage is True
        assert decision.identity is not None
        assert decision.identity.number == 7
        assert decision.governance_plan is not None
        assert [
            (action.type, action.label) for action in decision.governance_plan.actions
        ] == [("remove_label", "triage/invalid"), ("log_validated_issue", None)]

    def test_invalid_issue_is_flagged(self) -> None:
        """Test an invalid issue gets the needs-info label and a comment."""
        decision = decide_webhook_workflow(
            action="opened",
            repository_full_name="acme/widgets",
            issue_number=7,
            title="Help",
            body=VALID_BODY,
            author="octocat",
            labels=[],
            governance_error_labels=ERROR_LABELS,
        )

        assert decision.should_run_ai_triage is False
        plan = decision.governance_plan
        assert plan is not None
        assert [action.type for action in plan.actions] == ["add_label", "create_comment"]
        assert plan.actions[0].label == "triage/needs-info"
        assert plan.actions[1].body is not None
        assert "- Title is too short (min 10 chars)" in plan.actions[1].body

    def test_invalid_issue_already_flagged(self) -> None:
        """Test an issue with the needs-info label is not flagged again."""
        decision = decide_webhook_workflow(
            action="edited",
            repository_full_name="acme/widgets",
            issue_number=7,
            title="Help",
            body=VALID_BODY,
            author="octocat",
            labels=["triage/needs-info"],
            governance_error_labels=ERROR_LABELS,
        )

        assert decision.governance_plan is not None
        assert decision.governance_plan.actions == []
        assert decision.should_run_ai_triage is False

    @pytest.mark.asyncio
    async def test_apply_governance_actions_in_order(
        self, governance_gateway: AsyncMock
    ) -> None:
        """Test plan actions reach the gateway in order."""
        decision = decide_webhook_workflow(
            action="opened",
            repository_full_name="acme/widgets",
            issue_number=7,
            title="",
            body="",
            author="octocat",
            labels=[],
        )
        assert decision.identity is not None
        assert decision.governance_plan is not None

        await apply_webhook_governance_actions(
            governance_gateway, decision.identity, decision.governance_plan
        )

        governance_gateway.add_labels.assert_awaited_once_with(
            "acme/widgets", 7, ["triage/needs-info"]
        )
        governance_gateway.create_comment.assert_awaited_once()
        assert [call[0] for call in governance_gateway.method_calls] == [
            "add_labels",
            "create_comment",
        ]
