"""Shared CLI option definitions so shorthand flags stay consistent."""

import typer

ISSUE_NUMBER_OPTION = typer.Option(
    ...,
    "--issue-number",
    "-i",
    help="Number of the issue the analysis belongs to",
)

DRY_RUN_OPTION = typer.Option(
    False, "--dry-run", "-d", help="Print governance actions without applying them"
)

MODEL_OPTION = typer.Option(
    None,
    "--model",
    "-m",
    help="AI model to use (e.g., 'openai:gpt-4o-mini'). Defaults to TRIAGE_MODEL.",
)

BOT_LOGIN_OPTION = typer.Option(
    None,
    "--bot-login",
    help="Login the triage bot comments as. Defaults to GITHUB_BOT_LOGIN.",
)

TOKEN_OPTION = typer.Option(
    None, "--token", help="GitHub token. Defaults to GITHUB_TOKEN."
)
