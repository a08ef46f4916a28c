"""Main CLI entry point."""

import typer
from rich.console import Console

from .report import group, project
from .whoami import whoami

app = typer.Typer(
    name="gitlab-issue-report",
    help="Tool to get issues of a GitLab project or group",
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


# All commands including main command support -h shorthand via context_settings


app.command(name="project", context_settings={"help_option_names": ["-h", "--help"]})(
    project
)
app.command(name="group", context_settings={"help_option_names": ["-h", "--help"]})(
    group
)
app.command(name="whoami", context_settings={"help_option_names": ["-h", "--help"]})(
    whoami
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from gitlab_issue_report import __version__

    console.print(f"GitLab Issue Report v{__version__}")


if __name__ == "__main__":
    app()
