"""Main CLI entry point."""

import typer
from dotenv import load_dotenv
from rich.console import Console

from .normalize import normalize
from .webhook import webhook

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="issue-triage",
    help="AI triage and governance for GitHub issue events",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


app.command(name="normalize", context_settings={"help_option_names": ["-h", "--help"]})(
    normalize
)
app.command(name="webhook", context_settings={"help_option_names": ["-h", "--help"]})(
    webhook
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from issue_triage import __version__

    console.print(f"Issue Triage v{__version__}")


if __name__ == "__main__":
    app()
