"""CLI command showing the authenticated GitLab user."""

import typer
from rich.console import Console
from rich.markup import escape

from ..config import GitLabConfig, resolve_api_timeout
from ..gitlab_client.client import GitLabClient
from ..gitlab_client.models import GitLabUser
from .report import report_failure

console = Console(highlight=False)


def display_user_info(user: GitLabUser) -> None:
    """Print the user's username, full name, email and ID."""
    console.print(f"Username: {escape(user.username)}")
    console.print(f"Full Name: {escape(user.name)}")
    console.print(f"Email: {escape(user.email or '')}")
    console.print(f"User ID: {user.id}")


def whoami() -> None:
    """Display information about the authenticated GitLab user."""
    try:
        config = GitLabConfig()
        config.validate()
        client = GitLabClient(
            token=config.token,
            url=config.uri,
            timeout=resolve_api_timeout(None, config),
        )
        user = client.get_current_user()
    except Exception as e:
        report_failure(e)
        raise typer.Exit(1)

    display_user_info(user)
