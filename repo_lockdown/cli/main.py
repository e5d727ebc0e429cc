"""Main CLI entry point."""

import typer
from dotenv import load_dotenv
from rich.console import Console

from .config import check_config
from .run import handle_event, sweep

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="repo-lockdown",
    help="Close and lock issues and pull requests",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


app.command(name="sweep", context_settings={"help_option_names": ["-h", "--help"]})(
    sweep
)
app.command(
    name="handle-event", context_settings={"help_option_names": ["-h", "--help"]}
)(handle_event)
app.command(
    name="check-config", context_settings={"help_option_names": ["-h", "--help"]}
)(check_config)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from repo_lockdown import __version__

    console.print(f"Repo Lockdown v{__version__}")


if __name__ == "__main__":
    app()
