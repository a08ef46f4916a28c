"""Configuration for GitLab access and report options."""

import logging
import os
from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError
from .utils.date_parser import format_duration, parse_duration

logger = logging.getLogger(__name__)

DEFAULT_GITLAB_URI = "https://gitlab.com"
DEFAULT_API_TIMEOUT = timedelta(seconds=30)


class IssueState(str, Enum):
    """Issue state filter values accepted by --state."""

    OPENED = "opened"
    CLOSED = "closed"
    ALL = "all"


class OutputFormat(str, Enum):
    """Report output formats accepted by --format."""

    PLAIN = "plain"
    TABLE = "table"
    MARKDOWN = "markdown"


class DateField(str, Enum):
    """Issue timestamp an --interval is applied to."""

    CREATED = "created"
    UPDATED = "updated"


# Interval given without --created/--updated filters on the update date
DEFAULT_DATE_FILTER = DateField.UPDATED


class GitLabConfig:
    """Configuration class for GitLab API access."""

    def __init__(self) -> None:
        """Initialize GitLab configuration from environment variables."""
        self.token: str | None = os.getenv("GITLAB_TOKEN") or None
        self.uri: str = os.getenv("GITLAB_URI") or DEFAULT_GITLAB_URI
        self.api_timeout_env: str | None = os.getenv("GITLAB_API_TIMEOUT") or None

    def is_configured(self) -> bool:
        """Check if a GitLab token is available."""
        return self.token is not None

    def validate(self) -> None:
        """Validate configuration and raise error if invalid."""
        if not self.token:
            raise ConfigurationError(
                "GITLAB_TOKEN environment variable is not set. "
                "Create a personal access token with read_api scope."
            )


def resolve_api_timeout(flag_value: str | None, config: GitLabConfig) -> timedelta:
    """Pick the API timeout from the flag, then GITLAB_API_TIMEOUT, then default.

    An explicit --api-timeout that does not parse is an error. An unparsable
    environment value only logs a warning and the default is used.

    Raises:
        ValueError: If ``flag_value`` is not a valid duration
    """
    if flag_value is not None:
        try:
            return parse_duration(flag_value)
        except ValueError as e:
            raise ValueError(f"Invalid --api-timeout: {e}") from e

    if config.api_timeout_env:
        try:
            timeout = parse_duration(config.api_timeout_env)
        except ValueError:
            logger.warning(
                "Invalid GITLAB_API_TIMEOUT value '%s', using default %s",
                config.api_timeout_env,
                format_duration(DEFAULT_API_TIMEOUT),
            )
        else:
            logger.debug("Using API timeout from environment: %s", timeout)
            return timeout

    return DEFAULT_API_TIMEOUT


class ReportSettings(BaseModel):
    """Validated report options shared by the query builder and renderers."""

    model_config = ConfigDict(frozen=True)

    state: IssueState = Field(IssueState.ALL, description="Issue state filter")
    output_format: OutputFormat = Field(
        OutputFormat.PLAIN, description="Report output format"
    )
    created: bool = Field(False, description="Apply the interval to created_at")
    updated: bool = Field(False, description="Apply the interval to updated_at")
    interval: str | None = Field(None, description="Raw --interval value")
    mine: bool = Field(False, description="Only issues assigned to current user")
    print_header: bool = Field(True, description="Print column header (plain)")
    api_timeout: timedelta = Field(
        DEFAULT_API_TIMEOUT, description="Per-request API timeout"
    )
