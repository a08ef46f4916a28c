"""GitLab issue reporting tool."""

__version__ = "0.1.0"
