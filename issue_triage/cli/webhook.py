"""CLI command for processing a GitHub ``issues`` webhook event file."""

import asyncio
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ..ai.llm import PydanticAiLlmGateway
from ..config import TriageSettings, validate_model_string
from ..github_client.client import GitHubClient
from ..github_client.gateways import (
    GitHubGovernanceGateway,
    GitHubIssueHistoryGateway,
    GitHubRepositoryContextGateway,
)
from ..github_client.models import IssueWebhookPayload
from ..triage.metrics import InMemoryQuestionResponseMetrics
from ..triage.ports import GovernanceGateway
from ..triage.use_cases import (
    IssueAiTriageRunner,
    IssueWebhookProcessor,
    WebhookProcessingResult,
)
from .options import BOT_LOGIN_OPTION, DRY_RUN_OPTION, MODEL_OPTION, TOKEN_OPTION

console = Console()


class DryRunGovernanceGateway:
    """Governance gateway that prints actions instead of applying them."""

    def __init__(self, output: Console):
        self.output = output

    async def add_labels(self, repo: str, issue_number: int, labels: list[str]) -> None:
        self.output.print(
            f"Would add labels {', '.join(labels)} to {repo}#{issue_number}",
            markup=False,
        )

    async def remove_label(self, repo: str, issue_number: int, label: str) -> None:
        self.output.print(
            f"Would remove label {label} from {repo}#{issue_number}", markup=False
        )

    async def create_comment(self, repo: str, issue_number: int, body: str) -> None:
        self.output.print(f"Would comment on {repo}#{issue_number}:")
        self.output.print(body, markup=False)

    async def log_validated_issue(self, repo: str, issue_number: int) -> None:
        self.output.print(f"Issue {repo}#{issue_number} passed integrity validation")


def _print_result(
    result: WebhookProcessingResult, metrics: InMemoryQuestionResponseMetrics
) -> None:
    if result.skipped:
        reason = result.reason.value if result.reason else "unknown"
        console.print(f"⏭️  [yellow]Event skipped: {reason}[/yellow]")
        return

    if result.validation_errors:
        console.print("⚠️  [yellow]Issue failed integrity validation:[/yellow]")
        for error in result.validation_errors:
            console.print(f"  • {error}")
        return

    ai_result = result.ai_result
    if ai_result is None:
        console.print("✅ [green]Governance applied, AI triage not run[/green]")
        return
    if ai_result.reason is not None:
        console.print(
            f"⏭️  [yellow]AI triage skipped: {ai_result.reason.value}[/yellow]"
        )
        return

    tone = ai_result.effective_tone.value if ai_result.effective_tone else "unknown"
    console.print(
        f"✅ [green]AI triage completed: {ai_result.actions_applied_count} "
        f"action(s) applied, tone {tone}[/green]"
    )
    counts = metrics.snapshot()
    if counts["total"]:
        console.print(
            f"[blue]Question responses: {counts['ai_suggested_response']} AI, "
            f"{counts['fallback_checklist']} fallback[/blue]"
        )


def webhook(
    event_file: Path = typer.Argument(..., help="JSON file with the issues event"),
    dry_run: bool = DRY_RUN_OPTION,
    model: str | None = MODEL_OPTION,
    bot_login: str | None = BOT_LOGIN_OPTION,
    token: str | None = TOKEN_OPTION,
) -> None:
    """Process a GitHub issues webhook event.

    Validates the issue, applies governance labels and comments, then runs
    AI triage. Recent issues and the README are always read from GitHub, so
    a token is needed even with --dry-run.

    Examples:
        # Preview the actions for a saved event payload
        uv run issue-triage webhook event.json --dry-run

        # Apply triage with a specific model
        uv run issue-triage webhook event.json --model openai:gpt-4o-mini
    """
    if not event_file.exists():
        console.print(f"❌ [red]Error: File {event_file} does not exist[/red]")
        raise typer.Exit(1)

    try:
        payload = IssueWebhookPayload.model_validate_json(
            event_file.read_text(encoding="utf-8")
        )
    except ValidationError as e:
        console.print(
            f"❌ [red]Error: Invalid issues event payload: {escape(str(e))}[/red]"
        )
        raise typer.Exit(1)

    try:
        settings = TriageSettings.from_env()
        overrides: dict[str, str] = {}
        if model:
            validate_model_string(model)
            overrides["model"] = model
        if bot_login:
            overrides["bot_login"] = bot_login
        if overrides:
            settings = settings.model_copy(update=overrides)
        client = GitHubClient(token)
    except ValueError as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    governance_gateway: GovernanceGateway
    if dry_run:
        console.print("🔍 [blue]Dry run: governance actions will only be printed[/blue]")
        governance_gateway = DryRunGovernanceGateway(console)
    else:
        governance_gateway = GitHubGovernanceGateway(client)

    console.print(f"[blue]Using model: {settings.model}[/blue]")
    metrics = InMemoryQuestionResponseMetrics()
    runner = IssueAiTriageRunner(
        llm_gateway=PydanticAiLlmGateway(
            settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout_seconds=settings.timeout_seconds,
        ),
        history_gateway=GitHubIssueHistoryGateway(client),
        governance_gateway=governance_gateway,
        repository_context_gateway=GitHubRepositoryContextGateway(client),
        question_response_metrics=metrics,
        settings=settings,
    )
    processor = IssueWebhookProcessor(
        governance_gateway=governance_gateway,
        ai_triage_runner=runner,
        settings=settings,
    )

    try:
        result = asyncio.run(processor.process(payload.to_command()))
    except Exception as e:
        console.print(
            f"❌ [red]Error: Webhook processing failed: {escape(str(e))}[/red]"
        )
        raise typer.Exit(1)

    _print_result(result, metrics)
