"""Validation of report options before any GitLab request is made."""

import logging
from datetime import timedelta

from ..config import IssueState, OutputFormat, ReportSettings
from ..errors import (
    CreatedUpdatedConflictError,
    IntervalRequiredError,
    InvalidFormatValueError,
    InvalidStateValueError,
    NonPositiveTimeoutError,
)
from ..utils.date_parser import format_duration

logger = logging.getLogger(__name__)

MIN_RECOMMENDED_TIMEOUT = timedelta(seconds=5)
MAX_RECOMMENDED_TIMEOUT = timedelta(minutes=5)

VALID_STATES = {state.value for state in IssueState}
VALID_FORMATS = {output_format.value for output_format in OutputFormat}


def reconcile_log_level(log_level: str, debug: bool, verbose: bool) -> str:
    """Apply --debug / --verbose on top of --log-level (debug wins)."""
    if debug:
        return "debug"
    if verbose:
        return "info"
    return log_level


def validate_state(state: str | None) -> IssueState:
    """Validate --state; empty means all states."""
    if not state:
        return IssueState.ALL
    if state not in VALID_STATES:
        raise InvalidStateValueError(
            f"invalid --state value: {state} (must be opened, closed, or all)"
        )
    return IssueState(state)


def validate_format(output_format: str | None) -> OutputFormat:
    """Validate --format; empty means plain."""
    if not output_format:
        return OutputFormat.PLAIN
    if output_format not in VALID_FORMATS:
        raise InvalidFormatValueError(
            f"invalid --format value: {output_format} "
            f"(must be plain, table, or markdown)"
        )
    return OutputFormat(output_format)


def validate_date_filters(created: bool, updated: bool, interval: str | None) -> None:
    """Check the --created / --updated / --interval combination."""
    if (created or updated) and not interval:
        raise IntervalRequiredError(
            "--created or --updated requires --interval to be set"
        )
    if created and updated:
        raise CreatedUpdatedConflictError(
            "--created and --updated cannot be used together"
        )


def validate_api_timeout(api_timeout: timedelta) -> None:
    """Reject non-positive timeouts and warn about unusual ones."""
    if api_timeout <= timedelta(0):
        raise NonPositiveTimeoutError(
            f"--api-timeout must be positive (got {format_duration(api_timeout)})"
        )
    if api_timeout < MIN_RECOMMENDED_TIMEOUT:
        logger.warning(
            "--api-timeout is very short (%s), may cause false timeouts",
            format_duration(api_timeout),
        )
    if api_timeout > MAX_RECOMMENDED_TIMEOUT:
        logger.warning(
            "--api-timeout is very long (%s), consider using a shorter timeout",
            format_duration(api_timeout),
        )


def validate_report_options(
    state: str | None,
    output_format: str | None,
    created: bool,
    updated: bool,
    interval: str | None,
    api_timeout: timedelta,
    mine: bool = False,
    print_header: bool = True,
) -> ReportSettings:
    """Validate raw option values and build the report settings.

    Checks run in a fixed order: state, format, date filters, timeout.

    Raises:
        ReportValidationError: The first rule that fails
    """
    issue_state = validate_state(state)
    report_format = validate_format(output_format)
    validate_date_filters(created, updated, interval)
    validate_api_timeout(api_timeout)

    return ReportSettings(
        state=issue_state,
        output_format=report_format,
        created=created,
        updated=updated,
        interval=interval or None,
        mine=mine,
        print_header=print_header,
        api_timeout=api_timeout,
    )
