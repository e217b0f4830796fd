"""CLI command for normalizing a raw AI analysis response."""

from pathlib import Path

import typer
from rich.console import Console

from ..ai.normalizer import normalize_ai_analysis
from .options import ISSUE_NUMBER_OPTION

console = Console()


def normalize(
    file: Path = typer.Argument(..., help="File holding the raw model response"),
    issue_number: int = ISSUE_NUMBER_OPTION,
) -> None:
    """Normalize a raw AI response into the canonical analysis JSON.

    Accepts the canonical shape as well as the structured and legacy shapes
    some models produce. Exits with code 1 when nothing usable is found.

    Examples:
        uv run issue-triage normalize response.json --issue-number 42
    """
    if not file.exists():
        console.print(f"❌ [red]Error: File {file} does not exist[/red]")
        raise typer.Exit(1)

    raw_text = file.read_text(encoding="utf-8")
    analysis = normalize_ai_analysis(raw_text, issue_number)
    if analysis is None:
        console.print(
            f"❌ [red]Error: No usable analysis found in {file} "
            f"for issue #{issue_number}[/red]"
        )
        raise typer.Exit(1)

    typer.echo(analysis.model_dump_json(by_alias=True, indent=2))
