"""Use cases: AI triage of one issue and processing of an issue webhook event."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from ..ai.models import AiAnalysis, Tone
from ..ai.normalizer import normalize_ai_analysis
from ..ai.prompts import ISSUE_TRIAGE_SYSTEM_PROMPT, build_issue_triage_user_prompt
from ..config import TriageSettings
from .action_plan import ActionPlanBuilder, IssueSnapshot
from .execution import GovernanceExecutionContext, apply_action_plan
from .ports import (
    GovernanceGateway,
    IssueHistoryGateway,
    LlmGateway,
    QuestionResponseMetrics,
    RecentIssueSummary,
    RepositoryContextGateway,
)
from .webhook import (
    WebhookSkipReason,
    apply_webhook_governance_actions,
    decide_webhook_workflow,
    is_webhook_action_supported,
)

logger = logging.getLogger(__name__)


class AiTriageStatus(str, Enum):
    COMPLETED = "completed"
    SKIPPED = "skipped"


class AiTriageSkipReason(str, Enum):
    UNSUPPORTED_ACTION = "unsupported_action"
    AI_UNAVAILABLE = "ai_unavailable"


@dataclass(frozen=True)
class AiTriageInput:
    """Issue to triage, as received from the webhook."""

    action: str
    repo: str
    issue_number: int
    title: str
    body: str
    labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class AiTriageResult:
    status: AiTriageStatus
    reason: AiTriageSkipReason | None = None
    actions_applied_count: int = 0
    effective_tone: Tone | None = None

    @classmethod
    def skipped(cls, reason: AiTriageSkipReason) -> "AiTriageResult":
        return cls(status=AiTriageStatus.SKIPPED, reason=reason)


class IssueAiTriageRunner:
    """Runs AI triage for one issue and applies the resulting actions.

    Any failure after the action check is logged and reported as a skipped
    ``ai_unavailable`` result so the contributor is never blocked.
    """

    def __init__(
        self,
        llm_gateway: LlmGateway,
        history_gateway: IssueHistoryGateway,
        governance_gateway: GovernanceGateway,
        repository_context_gateway: RepositoryContextGateway | None = None,
        question_response_metrics: QuestionResponseMetrics | None = None,
        settings: TriageSettings | None = None,
    ):
        """Initialize the runner.

        Args:
            llm_gateway: Model gateway producing raw analysis text
            history_gateway: Recent issues and existing comment lookups
            governance_gateway: Label and comment actions
            repository_context_gateway: README lookup for grounding
            question_response_metrics: Shared question response counters
            settings: Triage thresholds and labels
        """
        self.llm_gateway = llm_gateway
        self.history_gateway = history_gateway
        self.governance_gateway = governance_gateway
        self.repository_context_gateway = repository_context_gateway
        self.question_response_metrics = question_response_metrics
        self.settings = settings or TriageSettings()
        self.plan_builder = ActionPlanBuilder(self.settings)

    async def _load_repository_readme(self, repo: str) -> str | None:
        if self.repository_context_gateway is None:
            return None
        try:
            return await self.repository_context_gateway.get_repository_readme(repo)
        except Exception as e:
            logger.warning(
                f"Could not load repository context for {repo}, continuing without it: {e}"
            )
            return None

    async def _analyze(
        self,
        triage_input: AiTriageInput,
        recent_issues: Sequence[RecentIssueSummary],
        repository_readme: str | None,
    ) -> AiAnalysis | None:
        user_prompt = build_issue_triage_user_prompt(
            issue_title=triage_input.title,
            issue_body=triage_input.body,
            recent_issues=recent_issues,
            repository_readme=repository_readme,
        )
        raw_text = await self.llm_gateway.generate(user_prompt, ISSUE_TRIAGE_SYSTEM_PROMPT)
        analysis = normalize_ai_analysis(raw_text, triage_input.issue_number)
        if analysis is None:
            logger.error(
                f"Failed parsing AI response for {triage_input.repo}#"
                f"{triage_input.issue_number}, applying fail-open policy: {raw_text!r}"
            )
        return analysis

    async def run(self, triage_input: AiTriageInput) -> AiTriageResult:
        """Triage one issue.

        Args:
            triage_input: Issue to triage

        Returns:
            Completed result with the applied action count, or a skipped result
        """
        if not is_webhook_action_supported(triage_input.action):
            return AiTriageResult.skipped(AiTriageSkipReason.UNSUPPORTED_ACTION)

        try:
            recent_issues = await self.history_gateway.find_recent_issues(
                triage_input.repo, self.settings.recent_issues_limit
            )
            repository_readme = await self._load_repository_readme(triage_input.repo)

            analysis = await self._analyze(triage_input, recent_issues, repository_readme)
            if analysis is None:
                return AiTriageResult.skipped(AiTriageSkipReason.AI_UNAVAILABLE)

            logger.debug(
                f"Normalized AI analysis for {triage_input.repo}#{triage_input.issue_number}: "
                f"type={analysis.classification.type.value} "
                f"confidence={analysis.classification.confidence} "
                f"duplicate={analysis.duplicate_detection.is_duplicate} "
                f"tone={analysis.sentiment.tone.value}"
            )

            snapshot = IssueSnapshot(
                number=triage_input.issue_number,
                title=triage_input.title,
                body=triage_input.body,
                action=triage_input.action,
                labels=tuple(triage_input.labels),
                recent_issues=tuple(recent_issues),
                repository_readme=repository_readme,
            )
            plan = self.plan_builder.build(snapshot, analysis)
            context = GovernanceExecutionContext(
                repo=triage_input.repo,
                issue_number=triage_input.issue_number,
                labels=triage_input.labels,
                governance_gateway=self.governance_gateway,
                history_gateway=self.history_gateway,
                bot_login=self.settings.bot_login,
                question_response_metrics=self.question_response_metrics,
            )
            result = await apply_action_plan(context, plan)
        except Exception:
            logger.exception(
                f"AI triage failed for {triage_input.repo}#{triage_input.issue_number}, "
                f"applying fail-open policy"
            )
            return AiTriageResult.skipped(AiTriageSkipReason.AI_UNAVAILABLE)

        logger.info(
            f"AI triage completed for {triage_input.repo}#{triage_input.issue_number}: "
            f"{result.actions_applied_count} actions applied"
        )
        return AiTriageResult(
            status=AiTriageStatus.COMPLETED,
            actions_applied_count=result.actions_applied_count,
            effective_tone=result.effective_tone,
        )


@dataclass(frozen=True)
class ProcessIssueWebhookCommand:
    """Issue webhook event reduced to what governance needs."""

    action: str
    repository_full_name: str
    issue_number: int | str
    title: str | None
    body: str | None
    author: str | None
    labels: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class WebhookProcessingResult:
    skipped: bool
    reason: WebhookSkipReason | None = None
    validation_errors: list[str] = field(default_factory=list)
    ai_result: AiTriageResult | None = None


class IssueWebhookProcessor:
    """Processes issue webhook events: integrity governance, then AI triage."""

    def __init__(
        self,
        governance_gateway: GovernanceGateway,
        ai_triage_runner: IssueAiTriageRunner | None = None,
        settings: TriageSettings | None = None,
    ):
        self.governance_gateway = governance_gateway
        self.ai_triage_runner = ai_triage_runner
        self.settings = settings or TriageSettings()

    async def process(self, command: ProcessIssueWebhookCommand) -> WebhookProcessingResult:
        """Process one webhook event.

        Governance gateway failures propagate to the caller. AI triage
        failures are reported in ``ai_result``.
        """
        decision = decide_webhook_workflow(
            action=command.action,
            repository_full_name=command.repository_full_name,
            issue_number=command.issue_number,
            title=command.title,
            body=command.body,
            author=command.author,
            labels=command.labels,
            governance_error_labels=self.settings.governance_error_labels,
            needs_info_label=self.settings.needs_info_label,
        )
        if (
            decision.should_skip_processing
            or decision.identity is None
            or decision.governance_plan is None
        ):
            logger.info(
                f"Skipping webhook event for {command.repository_full_name}#"
                f"{command.issue_number}: {decision.reason.value if decision.reason else 'unknown'}"
            )
            return WebhookProcessingResult(skipped=True, reason=decision.reason)

        identity = decision.identity
        plan = decision.governance_plan
        await apply_webhook_governance_actions(self.governance_gateway, identity, plan)

        if not plan.validation.is_valid:
            logger.info(
                f"Issue {identity.issue_id} failed validation: "
                f"{', '.join(plan.validation.errors)}"
            )

        ai_result = None
        if decision.should_run_ai_triage and self.ai_triage_runner is not None:
            ai_result = await self.ai_triage_runner.run(
                AiTriageInput(
                    action=command.action,
                    repo=identity.repo,
                    issue_number=identity.number,
                    title=command.title or "",
                    body=command.body or "",
                    labels=tuple(
                        label
                        for label in command.labels
                        if label not in self.settings.governance_error_labels
                    ),
                )
            )

        return WebhookProcessingResult(
            skipped=False,
            validation_errors=list(plan.validation.errors),
            ai_result=ai_result,
        )
