"""Standardized CLI option definitions shared by the project and group commands.

Keeping the definitions in one place keeps long names and shorthands
consistent across commands.
"""

import typer

# Scope options
PROJECT_ID_OPTION = typer.Option(
    None,
    "--project-id",
    "-p",
    help="Project ID to get issues from (auto-detected from git if not set)",
)

GROUP_ID_OPTION = typer.Option(
    None, "--group-id", "-g", help="Group ID to get issues from (required)"
)

# Filter options
INTERVAL_OPTION = typer.Option(
    None,
    "--interval",
    "-i",
    help=(
        "Date interval, relative 'YYYY/MM/DD hh:mm:ss' (e.g. '/-1/ ::' for last "
        "month) or absolute 'START..END' (e.g. '2024-01-01..2024-03-31')"
    ),
)

CREATED_OPTION = typer.Option(
    False, "--created", help="Apply --interval to the creation date"
)

UPDATED_OPTION = typer.Option(
    False,
    "--updated",
    help="Apply --interval to the update date (the default when neither is set)",
)

STATE_OPTION = typer.Option(
    "", "--state", "-s", help="Filter by state: opened, closed, all (default: all)"
)

MINE_OPTION = typer.Option(
    False, "--mine", "-m", help="Only issues assigned to the current user"
)

# Output options
FORMAT_OPTION = typer.Option(
    "plain", "--format", "-f", help="Output format: plain, table, markdown"
)

NO_HEADER_OPTION = typer.Option(
    False, "--no-header", help="Omit the header lines in plain output"
)

# Logging options
LOG_LEVEL_OPTION = typer.Option(
    "warning", "--log-level", help="Log level: debug, info, warning, error"
)

DEBUG_OPTION = typer.Option(
    False, "--debug", "-d", help="Enable debug logging (overrides --log-level)"
)

VERBOSE_OPTION = typer.Option(
    False, "--verbose", "-v", help="Enable info logging (overrides --log-level)"
)

# Connection options
API_TIMEOUT_OPTION = typer.Option(
    None,
    "--api-timeout",
    help=(
        "Timeout per GitLab API request, e.g. 30s or 2m "
        "(defaults to GITLAB_API_TIMEOUT or 30s)"
    ),
)
