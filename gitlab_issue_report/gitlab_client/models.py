"""Pydantic models for GitLab data structures.

These models keep only the fields of GitLab's REST API v4 responses that the
report uses.
API Reference: https://docs.gitlab.com/ee/api/issues.html
"""

from datetime import datetime

from pydantic import BaseModel, Field


class GitLabUser(BaseModel):
    """GitLab user model for the authenticated account.

    Maps to GitLab REST API User object.
    API Reference: https://docs.gitlab.com/ee/api/users.html
    """

    id: int = Field(..., description="Unique user identifier (integer)")
    username: str = Field(..., description="GitLab username (string)")
    name: str = Field("", description="Display name (string)")
    email: str | None = Field(
        None, description="Primary email, only visible to the user themself"
    )


class GitLabProject(BaseModel):
    """GitLab project model used when detecting the project from git.

    Maps to GitLab REST API Project object.
    API Reference: https://docs.gitlab.com/ee/api/projects.html
    """

    id: int = Field(..., description="Unique project identifier (integer)")
    name: str = Field(..., description="Project name (string)")
    path_with_namespace: str = Field(
        "", description="Full project path, e.g. 'group/project'"
    )
    ssh_url_to_repo: str | None = Field(None, description="SSH clone URL")
    http_url_to_repo: str | None = Field(None, description="HTTP(S) clone URL")


class GitLabIssue(BaseModel):
    """GitLab issue model representing project issues.

    Maps to GitLab REST API Issue object.
    API Reference: https://docs.gitlab.com/ee/api/issues.html
    """

    id: int = Field(..., description="Global issue identifier (integer)")
    iid: int = Field(0, description="Issue number within its project (integer)")
    project_id: int = Field(..., description="Identifier of the owning project")
    title: str = Field(..., description="Short description/title of the issue")
    state: str = Field(..., description="Current state: 'opened' or 'closed'")
    created_at: datetime = Field(
        ..., description="Timestamp of issue creation (ISO 8601)"
    )
    updated_at: datetime = Field(
        ..., description="Timestamp of last issue update (ISO 8601)"
    )
    web_url: str | None = Field(None, description="Link to the issue in GitLab")


class IssuePage(BaseModel):
    """One page of an issue listing."""

    issues: list[GitLabIssue] = Field(
        default_factory=list, description="Issues returned on this page"
    )
    next_page: int = Field(
        0, description="Next page number from X-Next-Page, 0 on the last page"
    )


class ResolvedPath(BaseModel):
    """Outcome of resolving a project ID to its path.

    Failed lookups are kept with ``path`` unset so that every project in a
    report still has a row label.
    """

    id: int = Field(..., description="Project identifier")
    path: str | None = Field(None, description="Resolved path with namespace")
    error: str | None = Field(None, description="Lookup failure, if any")

    @property
    def resolved(self) -> bool:
        return self.path is not None

    @property
    def label(self) -> str:
        """Path to display, or the ``ID:<n>`` placeholder."""
        return self.path if self.path is not None else placeholder_label(self.id)


def placeholder_label(object_id: int) -> str:
    """Label used for projects or groups whose path is unknown."""
    return f"ID:{object_id}"
