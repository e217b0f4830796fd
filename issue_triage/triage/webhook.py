"""Pre-AI webhook gate: action support, identity, integrity and governance plan."""

import logging
from collections.abc import Collection
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from .constants import NEEDS_INFO_LABEL, SUPPORTED_WEBHOOK_ACTIONS, VALIDATION_COMMENT_HEADER
from .entity import Issue, IssueIntegrityValidationResult
from .ports import GovernanceGateway
from .value_objects import IssueId, IssueNumber, RepositoryFullName

logger = logging.getLogger(__name__)


class WebhookSkipReason(str, Enum):
    """Why a webhook event was not processed."""

    UNSUPPORTED_ACTION = "unsupported_action"
    MALFORMED_ISSUE_IDENTITY = "malformed_issue_identity"


@dataclass(frozen=True)
class IssueWebhookIdentity:
    repository: RepositoryFullName
    issue_number: IssueNumber

    @property
    def issue_id(self) -> IssueId:
        return IssueId(self.repository, self.issue_number)

    @property
    def repo(self) -> str:
        return self.repository.value

    @property
    def number(self) -> int:
        return self.issue_number.value


@dataclass(frozen=True)
class WebhookProcessingDecision:
    should_skip_processing: bool
    reason: WebhookSkipReason | None = None
    identity: IssueWebhookIdentity | None = None


@dataclass(frozen=True)
class GovernanceAction:
    """Single instruction in a webhook governance plan."""

    type: Literal["add_label", "remove_label", "create_comment", "log_validated_issue"]
    label: str | None = None
    body: str | None = None


@dataclass(frozen=True)
class GovernanceDecision:
    should_add_needs_info_label: bool
    should_create_validation_comment: bool
    labels_to_remove: list[str]
    should_log_validated_issue: bool
    should_run_ai_triage: bool
    validation_errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class WebhookGovernancePlan:
    """Ordered governance actions and whether AI triage should follow."""

    actions: list[GovernanceAction]
    should_run_ai_triage: bool
    validation: IssueIntegrityValidationResult


@dataclass(frozen=True)
class WebhookWorkflowDecision:
    should_skip_processing: bool
    should_run_ai_triage: bool
    reason: WebhookSkipReason | None = None
    identity: IssueWebhookIdentity | None = None
    governance_plan: WebhookGovernancePlan | None = None


def is_webhook_action_supported(action: Any) -> bool:
    return action in SUPPORTED_WEBHOOK_ACTIONS


def parse_issue_webhook_identity(
    repository_full_name: Any, issue_number: Any
) -> IssueWebhookIdentity | None:
    repository = RepositoryFullName.from_unknown(repository_full_name)
    number = IssueNumber.from_unknown(issue_number)
    if repository is None or number is None:
        return None
    return IssueWebhookIdentity(repository=repository, issue_number=number)


def decide_webhook_processing(
    action: Any, repository_full_name: Any, issue_number: Any
) -> WebhookProcessingDecision:
    """Gate an event on its action verb, then on a well-formed identity."""
    if not is_webhook_action_supported(action):
        return WebhookProcessingDecision(
            should_skip_processing=True, reason=WebhookSkipReason.UNSUPPORTED_ACTION
        )

    identity = parse_issue_webhook_identity(repository_full_name, issue_number)
    if identity is None:
        return WebhookProcessingDecision(
            should_skip_processing=True,
            reason=WebhookSkipReason.MALFORMED_ISSUE_IDENTITY,
        )

    return WebhookProcessingDecision(should_skip_processing=False, identity=identity)


def build_validation_comment(errors: list[str]) -> str:
    lines = "\n".join(f"- {error}" for error in errors)
    return f"{VALIDATION_COMMENT_HEADER}\n{lines}"


def decide_governance_actions(
    validation: IssueIntegrityValidationResult,
    existing_labels: Collection[str],
    governance_error_labels: Collection[str],
    needs_info_label: str = NEEDS_INFO_LABEL,
) -> GovernanceDecision:
    """Decide label and comment actions from the integrity validation result.

    An invalid issue is flagged once: when the needs-info label is already
    present nothing is repeated.
    """
    if not validation.is_valid:
        should_flag = needs_info_label not in existing_labels
        return GovernanceDecision(
            should_add_needs_info_label=should_flag,
            should_create_validation_comment=should_flag,
            labels_to_remove=[],
            should_log_validated_issue=False,
            should_run_ai_triage=False,
            validation_errors=list(validation.errors),
        )

    return GovernanceDecision(
        should_add_needs_info_label=False,
        should_create_validation_comment=False,
        labels_to_remove=[
            label for label in governance_error_labels if label in existing_labels
        ],
        should_log_validated_issue=True,
        should_run_ai_triage=True,
    )


def build_webhook_governance_plan(
    issue: Issue,
    existing_labels: Collection[str],
    governance_error_labels: Collection[str],
    needs_info_label: str = NEEDS_INFO_LABEL,
) -> WebhookGovernancePlan:
    validation = issue.validate_integrity()
    decision = decide_governance_actions(
        validation, existing_labels, governance_error_labels, needs_info_label
    )

    actions: list[GovernanceAction] = []
    if decision.should_add_needs_info_label:
        actions.append(GovernanceAction(type="add_label", label=needs_info_label))
    if decision.should_create_validation_comment:
        actions.append(
            GovernanceAction(
                type="create_comment",
                body=build_validation_comment(decision.validation_errors),
            )
        )
    for label in decision.labels_to_remove:
        actions.append(GovernanceAction(type="remove_label", label=label))
    if decision.should_log_validated_issue:
        actions.append(GovernanceAction(type="log_validated_issue"))

    return WebhookGovernancePlan(
        actions=actions,
        should_run_ai_triage=decision.should_run_ai_triage,
        validation=validation,
    )


def decide_webhook_workflow(
    action: Any,
    repository_full_name: Any,
    issue_number: Any,
    title: str | None,
    body: str | None,
    author: str | None,
    labels: Collection[str],
    governance_error_labels: Collection[str] = (),
    needs_info_label: str = NEEDS_INFO_LABEL,
) -> WebhookWorkflowDecision:
    """Decide everything that happens before AI triage for one webhook event.

    Args:
        action: Webhook action verb
        repository_full_name: Raw ``owner/repo`` value from the payload
        issue_number: Raw issue number from the payload
        title: Issue title
        body: Issue body
        author: Issue author login
        labels: Labels currently on the issue
        governance_error_labels: Labels to clear once the issue is valid
        needs_info_label: Label marking issues that need more information

    Returns:
        Workflow decision with the governance plan when processing continues
    """
    processing = decide_webhook_processing(action, repository_full_name, issue_number)
    if processing.should_skip_processing or processing.identity is None:
        return WebhookWorkflowDecision(
            should_skip_processing=True,
            should_run_ai_triage=False,
            reason=processing.reason,
        )

    issue = Issue.create(
        id=processing.identity.issue_id,
        title=title,
        description=body,
        author=author,
    )
    plan = build_webhook_governance_plan(
        issue, labels, governance_error_labels, needs_info_label
    )
    return WebhookWorkflowDecision(
        should_skip_processing=False,
        should_run_ai_triage=plan.should_run_ai_triage,
        identity=processing.identity,
        governance_plan=plan,
    )


async def apply_webhook_governance_actions(
    gateway: GovernanceGateway,
    identity: IssueWebhookIdentity,
    plan: WebhookGovernancePlan,
) -> None:
    """Execute the governance plan in order. Gateway failures propagate."""
    for action in plan.actions:
        if action.type == "add_label" and action.label:
            await gateway.add_labels(identity.repo, identity.number, [action.label])
        elif action.type == "remove_label" and action.label:
            await gateway.remove_label(identity.repo, identity.number, action.label)
        elif action.type == "create_comment" and action.body:
            await gateway.create_comment(identity.repo, identity.number, action.body)
        elif action.type == "log_validated_issue":
            await gateway.log_validated_issue(identity.repo, identity.number)
        logger.debug(f"Applied webhook governance action {action.type} on {identity.issue_id}")
