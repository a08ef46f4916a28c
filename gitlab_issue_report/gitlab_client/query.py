"""Issue query state and the filter directives that build it."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from ..config import IssueState
from ..errors import (
    ConflictingScopeIDError,
    CreatedUpdatedConflictError,
    MissingScopeIDError,
)
from ..utils.date_parser import format_datetime_for_gitlab


class IssueQuery(BaseModel):
    """Accumulated filters for one issue listing.

    Zero IDs and None dates mean "not set". A query is built by applying
    directives to ``IssueQuery()`` and is frozen, so it cannot change while
    pages are being fetched.
    """

    model_config = ConfigDict(frozen=True)

    project_id: int = 0
    group_id: int = 0
    state: IssueState = IssueState.ALL
    created_after: datetime | None = None
    created_before: datetime | None = None
    updated_after: datetime | None = None
    updated_before: datetime | None = None
    assignee_username: str | None = None

    @property
    def has_created_range(self) -> bool:
        return self.created_after is not None or self.created_before is not None

    @property
    def has_updated_range(self) -> bool:
        return self.updated_after is not None or self.updated_before is not None

    def validate_scope(self) -> None:
        """Check that exactly one scope is set and date ranges do not clash.

        Raises:
            MissingScopeIDError: If neither project nor group ID is set
            ConflictingScopeIDError: If both are set
            CreatedUpdatedConflictError: If both date ranges are set
        """
        if not self.project_id and not self.group_id:
            raise MissingScopeIDError(
                "validation failed: project ID or group ID must be set"
            )
        if self.project_id and self.group_id:
            raise ConflictingScopeIDError(
                "validation failed: project ID and group ID cannot be set "
                "at the same time"
            )
        if self.has_created_range and self.has_updated_range:
            raise CreatedUpdatedConflictError(
                "validation failed: created and updated date filters cannot "
                "be combined"
            )

    def to_params(self) -> dict[str, Any]:
        """Build the GitLab query parameters shared by every page request."""
        params: dict[str, Any] = {}
        if self.state is not IssueState.ALL:
            params["state"] = self.state.value
        date_fields = (
            "created_after",
            "created_before",
            "updated_after",
            "updated_before",
        )
        for name in date_fields:
            value = getattr(self, name)
            if value is not None:
                params[name] = format_datetime_for_gitlab(value)
        if self.assignee_username:
            params["assignee_username"] = self.assignee_username
        return params


class _Directive(BaseModel):
    model_config = ConfigDict(frozen=True)

    def apply(self, query: IssueQuery) -> IssueQuery:
        raise NotImplementedError


class ProjectScope(_Directive):
    """List the issues of one project."""

    kind: Literal["project_scope"] = "project_scope"
    project_id: int

    def apply(self, query: IssueQuery) -> IssueQuery:
        return query.model_copy(update={"project_id": self.project_id})


class GroupScope(_Directive):
    """List the issues of every project in a group."""

    kind: Literal["group_scope"] = "group_scope"
    group_id: int

    def apply(self, query: IssueQuery) -> IssueQuery:
        return query.model_copy(update={"group_id": self.group_id})


class CreatedBetween(_Directive):
    """Restrict to issues created inside [after, before]."""

    kind: Literal["created_between"] = "created_between"
    after: datetime | None = None
    before: datetime | None = None

    def apply(self, query: IssueQuery) -> IssueQuery:
        return query.model_copy(
            update={"created_after": self.after, "created_before": self.before}
        )


class UpdatedBetween(_Directive):
    """Restrict to issues updated inside [after, before]."""

    kind: Literal["updated_between"] = "updated_between"
    after: datetime | None = None
    before: datetime | None = None

    def apply(self, query: IssueQuery) -> IssueQuery:
        return query.model_copy(
            update={"updated_after": self.after, "updated_before": self.before}
        )


class StateFilter(_Directive):
    """Restrict to opened or closed issues."""

    kind: Literal["state"] = "state"
    state: IssueState

    def apply(self, query: IssueQuery) -> IssueQuery:
        return query.model_copy(update={"state": self.state})


class AssigneeFilter(_Directive):
    """Restrict to issues assigned to a user."""

    kind: Literal["assignee"] = "assignee"
    username: str

    def apply(self, query: IssueQuery) -> IssueQuery:
        return query.model_copy(update={"assignee_username": self.username})


IssueDirective = (
    ProjectScope
    | GroupScope
    | CreatedBetween
    | UpdatedBetween
    | StateFilter
    | AssigneeFilter
)


def build_query(directives: list[IssueDirective]) -> IssueQuery:
    """Apply directives in order to an empty query."""
    query = IssueQuery()
    for directive in directives:
        query = directive.apply(query)
    return query
