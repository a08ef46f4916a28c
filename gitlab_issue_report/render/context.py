"""Scope annotations attached to a rendered report."""

from typing import Literal

from pydantic import BaseModel, Field

from ..gitlab_client.models import ResolvedPath, placeholder_label


class ProjectContext(BaseModel):
    """Report covers the issues of a single project."""

    source: Literal["project"] = "project"
    project_path: str = Field(..., description="e.g. 'namespace/project'")


class GroupContext(BaseModel):
    """Report covers a group, so issues may come from many projects."""

    source: Literal["group"] = "group"
    group_path: str = Field(..., description="e.g. 'namespace/group'")
    project_paths: dict[int, ResolvedPath] = Field(
        default_factory=dict, description="Project ID to resolved path"
    )

    def project_label(self, project_id: int) -> str:
        """Display label for a project, ``ID:<n>`` when unresolved."""
        entry = self.project_paths.get(project_id)
        if entry is None:
            return placeholder_label(project_id)
        return entry.label


RenderContext = ProjectContext | GroupContext
