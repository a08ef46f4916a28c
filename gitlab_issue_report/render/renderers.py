"""Plain text, table and Markdown renderers for issue reports."""

import re
from datetime import datetime
from typing import TextIO

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..config import OutputFormat
from ..errors import RenderError
from ..gitlab_client.models import GitLabIssue
from .context import GroupContext, ProjectContext, RenderContext

# Title display widths for plain and table output
MAX_TITLE_LENGTH = 70
MAX_TITLE_LENGTH_WITH_PROJECT = 30

PROJECT_COLUMN_WIDTH = 40
DATE_FORMAT = "%Y-%m-%d"
REPORT_TITLE = "# GitLab Issues Report"

# Wide enough that rich never wraps a row of truncated titles
TABLE_CONSOLE_WIDTH = 240

_UNESCAPED_PIPE = re.compile(r"(?<!\\)\|")


def truncate(text: str, width: int) -> str:
    """Cut ``text`` to ``width`` characters; width <= 0 disables truncation."""
    if width > 0 and len(text) > width:
        return text[:width]
    return text


def escape_markdown(text: str) -> str:
    """Escape a title for use inside a Markdown table cell.

    Pipes already escaped as ``\\|`` are left alone.
    """
    text = _UNESCAPED_PIPE.sub(r"\\|", text)
    return text.replace("\n", " ").replace("\r", " ")


def format_date(value: datetime) -> str:
    return value.strftime(DATE_FORMAT)


class IssueRenderer:
    """Base class for report renderers.

    Subclasses implement :meth:`_write`; write failures are raised as
    RenderError so a report is either written completely or reported as
    failed.
    """

    def render(self, issues: list[GitLabIssue], writer: TextIO) -> None:
        """Render issues without a project or group annotation."""
        self.render_with_context(issues, writer, None)

    def render_with_context(
        self,
        issues: list[GitLabIssue],
        writer: TextIO,
        context: RenderContext | None,
    ) -> None:
        """Render issues annotated with the project or group they belong to."""
        try:
            self._write(issues, writer, context)
        except OSError as e:
            raise RenderError(f"failed to render issues: {e}") from e

    def _write(
        self,
        issues: list[GitLabIssue],
        writer: TextIO,
        context: RenderContext | None,
    ) -> None:
        raise NotImplementedError


def _context_line(context: RenderContext | None) -> str | None:
    if isinstance(context, ProjectContext):
        return f"Project: {context.project_path}"
    if isinstance(context, GroupContext):
        return f"Group: {context.group_path}"
    return None


class PlainRenderer(IssueRenderer):
    """Fixed-width plain text columns."""

    def __init__(self, print_header: bool = True):
        self.print_header = print_header

    def _write(
        self,
        issues: list[GitLabIssue],
        writer: TextIO,
        context: RenderContext | None,
    ) -> None:
        with_project = isinstance(context, GroupContext)
        title_width = MAX_TITLE_LENGTH_WITH_PROJECT if with_project else MAX_TITLE_LENGTH

        if self.print_header:
            context_line = _context_line(context)
            if context_line:
                writer.write(f"{context_line}\n\n")
            header = (
                f"{'Title':<{title_width}} {'State':>10} "
                f"{'Created At':<12} {'Updated At':<12}"
            )
            if with_project:
                header = f"{'Project':<{PROJECT_COLUMN_WIDTH}} {header}"
            writer.write(header.rstrip() + "\n")

        for issue in issues:
            row = (
                f"{truncate(issue.title, title_width):<{title_width}} "
                f"{issue.state:>10} "
                f"{format_date(issue.created_at):<12} "
                f"{format_date(issue.updated_at):<12}"
            )
            if isinstance(context, GroupContext):
                project = truncate(
                    context.project_label(issue.project_id), PROJECT_COLUMN_WIDTH
                )
                row = f"{project:<{PROJECT_COLUMN_WIDTH}} {row}"
            writer.write(row.rstrip() + "\n")


class TableRenderer(IssueRenderer):
    """Boxed table drawn with rich."""

    def _write(
        self,
        issues: list[GitLabIssue],
        writer: TextIO,
        context: RenderContext | None,
    ) -> None:
        with_project = isinstance(context, GroupContext)
        title_width = MAX_TITLE_LENGTH_WITH_PROJECT if with_project else MAX_TITLE_LENGTH

        context_line = _context_line(context)
        if context_line:
            writer.write(f"{context_line}\n\n")

        table = Table(box=box.ASCII, show_header=True)
        if with_project:
            table.add_column("Project", no_wrap=True)
        table.add_column("Title", no_wrap=True)
        table.add_column("State", no_wrap=True)
        table.add_column("Created At", no_wrap=True)
        table.add_column("Updated At", no_wrap=True)

        for issue in issues:
            row = [
                Text(truncate(issue.title, title_width)),
                Text(issue.state),
                Text(format_date(issue.created_at)),
                Text(format_date(issue.updated_at)),
            ]
            if isinstance(context, GroupContext):
                row.insert(0, Text(context.project_label(issue.project_id)))
            table.add_row(*row)

        console = Console(
            file=writer,
            width=TABLE_CONSOLE_WIDTH,
            color_system=None,
            force_terminal=False,
            highlight=False,
        )
        console.print(table)


class MarkdownRenderer(IssueRenderer):
    """GitHub-flavoured Markdown table; titles are escaped, never truncated."""

    def _write(
        self,
        issues: list[GitLabIssue],
        writer: TextIO,
        context: RenderContext | None,
    ) -> None:
        title = REPORT_TITLE
        context_line = _context_line(context)
        if context_line:
            title = f"{title} - {context_line}"
        writer.write(f"{title}\n\n")

        if not issues:
            writer.write("No issues found.\n")
            return

        with_project = isinstance(context, GroupContext)
        if with_project:
            writer.write("| Project | Title | State | Created At | Updated At |\n")
            writer.write("|---------|-------|-------|------------|------------|\n")
        else:
            writer.write("| Title | State | Created At | Updated At |\n")
            writer.write("|-------|-------|------------|------------|\n")

        for issue in issues:
            cells = [
                escape_markdown(issue.title),
                issue.state,
                format_date(issue.created_at),
                format_date(issue.updated_at),
            ]
            if isinstance(context, GroupContext):
                cells.insert(0, context.project_label(issue.project_id))
            writer.write("| " + " | ".join(cells) + " |\n")


def get_renderer(
    output_format: OutputFormat, print_header: bool = True
) -> IssueRenderer:
    """Return the renderer for an output format."""
    if output_format is OutputFormat.MARKDOWN:
        return MarkdownRenderer()
    if output_format is OutputFormat.TABLE:
        return TableRenderer()
    return PlainRenderer(print_header=print_header)
