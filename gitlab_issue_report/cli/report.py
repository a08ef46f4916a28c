"""CLI commands for reporting on the issues of a GitLab project or group."""

import logging
import sys
from datetime import datetime

import requests
import typer
from gitlab.exceptions import GitlabError
from rich.console import Console
from rich.markup import escape

from ..config import GitLabConfig, ReportSettings, resolve_api_timeout
from ..errors import ReportError
from ..gitlab_client.client import GitLabClient
from ..gitlab_client.metadata import MetadataResolver
from ..gitlab_client.search import (
    IssueFetcher,
    build_issue_directives,
    find_project_by_remote,
)
from ..render.renderers import get_renderer
from ..utils.date_parser import parse_interval
from ..utils.git_remote import find_git_repository, get_remote_origin
from ..utils.log_setup import init_logging
from .options import (
    API_TIMEOUT_OPTION,
    CREATED_OPTION,
    DEBUG_OPTION,
    FORMAT_OPTION,
    GROUP_ID_OPTION,
    INTERVAL_OPTION,
    LOG_LEVEL_OPTION,
    MINE_OPTION,
    NO_HEADER_OPTION,
    PROJECT_ID_OPTION,
    STATE_OPTION,
    UPDATED_OPTION,
    VERBOSE_OPTION,
)
from .validation import reconcile_log_level, validate_report_options

logger = logging.getLogger(__name__)

err_console = Console(stderr=True, soft_wrap=True)


def _prepare(
    log_level: str,
    debug: bool,
    verbose: bool,
    state: str,
    output_format: str,
    created: bool,
    updated: bool,
    interval: str | None,
    mine: bool,
    no_header: bool,
    api_timeout: str | None,
) -> tuple[GitLabConfig, ReportSettings, datetime | None, datetime | None]:
    """Set up logging, read configuration and validate options.

    Nothing here talks to GitLab, so bad input fails before any request.
    """
    init_logging(reconcile_log_level(log_level, debug, verbose))

    config = GitLabConfig()
    timeout = resolve_api_timeout(api_timeout, config)
    settings = validate_report_options(
        state=state,
        output_format=output_format,
        created=created,
        updated=updated,
        interval=interval,
        api_timeout=timeout,
        mine=mine,
        print_header=not no_header,
    )
    begin, end = parse_interval(settings.interval)
    config.validate()
    return config, settings, begin, end


def _create_client(config: GitLabConfig, settings: ReportSettings) -> GitLabClient:
    return GitLabClient(
        token=config.token, url=config.uri, timeout=settings.api_timeout
    )


def detect_project_id(client: GitLabClient) -> int:
    """Find the project ID from the origin remote of the enclosing git repo."""
    repository = find_git_repository()
    remote_origin = get_remote_origin(repository)
    project = find_project_by_remote(client, remote_origin)
    return project.id


def run_report(
    client: GitLabClient,
    settings: ReportSettings,
    begin: datetime | None = None,
    end: datetime | None = None,
    project_id: int = 0,
    group_id: int = 0,
) -> None:
    """Fetch, annotate and render the issues of one project or group.

    Raises:
        ReportError: On scope, fetch or render failures
    """
    directives = build_issue_directives(
        project_id,
        group_id,
        begin,
        end,
        settings,
        username_lookup=lambda: client.get_current_user().username,
    )
    issues = IssueFetcher(client).fetch_issues(directives)

    resolver = MetadataResolver(client)
    if project_id:
        context = resolver.build_project_context(project_id)
    else:
        context = resolver.build_group_context(group_id, issues)

    renderer = get_renderer(settings.output_format, print_header=settings.print_header)
    renderer.render_with_context(issues, sys.stdout, context)


def report_failure(error: Exception) -> None:
    """Print an error to stderr in the style used by every command."""
    if isinstance(error, (ReportError, ValueError)):
        err_console.print(f"❌ Error: {escape(str(error))}")
    elif isinstance(error, GitlabError):
        err_console.print(f"❌ GitLab API error: {escape(str(error))}")
    elif isinstance(error, requests.RequestException):
        err_console.print(f"❌ Network error: {escape(str(error))}")
        err_console.print("Please check GITLAB_URI and your network connection.")
    else:
        err_console.print(f"❌ Unexpected error: {escape(str(error))}")
        err_console.print("Please check your GitLab token and network connection.")


def project(
    project_id: int | None = PROJECT_ID_OPTION,
    interval: str | None = INTERVAL_OPTION,
    created: bool = CREATED_OPTION,
    updated: bool = UPDATED_OPTION,
    state: str = STATE_OPTION,
    output_format: str = FORMAT_OPTION,
    mine: bool = MINE_OPTION,
    no_header: bool = NO_HEADER_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    debug: bool = DEBUG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    api_timeout: str | None = API_TIMEOUT_OPTION,
) -> None:
    """Get issues of a GitLab project.

    Without --project-id the project is detected from the 'origin' remote of
    the git repository containing the current directory.

    Examples:
        gitlab-issue-report project -p 1234 --state opened
        gitlab-issue-report project --interval '/-1/ ::' --created -f markdown
        gitlab-issue-report project -i 2024-01-01..2024-03-31 --mine
    """
    try:
        config, settings, begin, end = _prepare(
            log_level,
            debug,
            verbose,
            state,
            output_format,
            created,
            updated,
            interval,
            mine,
            no_header,
            api_timeout,
        )
        client = _create_client(config, settings)
        if not project_id:
            project_id = detect_project_id(client)
        run_report(client, settings, begin, end, project_id=project_id)
    except Exception as e:
        logger.debug("project report failed", exc_info=True)
        report_failure(e)
        raise typer.Exit(1)


def group(
    group_id: int | None = GROUP_ID_OPTION,
    interval: str | None = INTERVAL_OPTION,
    created: bool = CREATED_OPTION,
    updated: bool = UPDATED_OPTION,
    state: str = STATE_OPTION,
    output_format: str = FORMAT_OPTION,
    mine: bool = MINE_OPTION,
    no_header: bool = NO_HEADER_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    debug: bool = DEBUG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    api_timeout: str | None = API_TIMEOUT_OPTION,
) -> None:
    """Get issues of a GitLab group.

    Issues from every project in the group are listed with a leading
    Project column.

    Examples:
        gitlab-issue-report group -g 42 --state opened -f table
        gitlab-issue-report group --group-id 42 -i '/-1/ ::' --updated
    """
    if not group_id:
        err_console.print(
            "❌ Error: Group ID is required. Please provide it with --group-id."
        )
        raise typer.Exit(1)

    try:
        config, settings, begin, end = _prepare(
            log_level,
            debug,
            verbose,
            state,
            output_format,
            created,
            updated,
            interval,
            mine,
            no_header,
            api_timeout,
        )
        client = _create_client(config, settings)
        run_report(client, settings, begin, end, group_id=group_id)
    except Exception as e:
        logger.debug("group report failed", exc_info=True)
        report_failure(e)
        raise typer.Exit(1)
