"""Exception types raised by the report pipeline."""


class ReportError(Exception):
    """Base class for all gitlab-issue-report errors."""


class ConfigurationError(ReportError):
    """Required configuration is missing or unusable."""


class ReportValidationError(ReportError, ValueError):
    """An invalid option value or option combination was supplied."""


class InvalidStateValueError(ReportValidationError):
    """--state is not one of opened, closed or all."""


class InvalidFormatValueError(ReportValidationError):
    """--format is not one of plain, table or markdown."""


class IntervalRequiredError(ReportValidationError):
    """--created or --updated was given without --interval."""


class CreatedUpdatedConflictError(ReportValidationError):
    """--created and --updated were both given."""


class NonPositiveTimeoutError(ReportValidationError):
    """The API timeout is zero or negative."""


class ScopeError(ReportError, ValueError):
    """The issue query does not target exactly one project or group."""


class MissingScopeIDError(ScopeError):
    """Neither a project ID nor a group ID was set."""


class ConflictingScopeIDError(ScopeError):
    """Both a project ID and a group ID were set."""


class IssueFetchError(ReportError):
    """Listing issues failed part way through pagination."""

    def __init__(self, scope: str, scope_id: int, page: int, cause: Exception):
        self.scope = scope
        self.scope_id = scope_id
        self.page = page
        self.cause = cause
        super().__init__(
            f"failed to list {scope} issues for {scope} {scope_id} "
            f"(page {page}): {cause}"
        )


class MetadataError(ReportError):
    """A project or group path could not be resolved."""


class ProjectDiscoveryError(ReportError):
    """The GitLab project could not be derived from the local git checkout."""


class RenderError(ReportError):
    """Writing the rendered report failed."""
