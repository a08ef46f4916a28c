"""Helpers for locating the local git checkout and its origin remote."""

import configparser
import logging
from pathlib import Path

from ..errors import ProjectDiscoveryError

logger = logging.getLogger(__name__)


def find_git_repository(start: Path | None = None) -> Path:
    """Walk up from ``start`` to the first directory containing a ``.git`` dir.

    Args:
        start: Directory to start from (defaults to the current directory)

    Returns:
        Path of the repository root

    Raises:
        ProjectDiscoveryError: If no git repository is found
    """
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        logger.debug("Looking for .git in %s", candidate)
        if (candidate / ".git").is_dir():
            return candidate
    raise ProjectDiscoveryError(f"git repository not found from {current}")


def get_remote_origin(repository: Path) -> str:
    """Read the ``origin`` remote URL from a repository's ``.git/config``."""
    config_path = repository / ".git" / "config"
    parser = configparser.ConfigParser(strict=False, interpolation=None)
    try:
        with config_path.open(encoding="utf-8") as f:
            parser.read_file(f)
    except (OSError, configparser.Error) as e:
        raise ProjectDiscoveryError(f"failed to read {config_path}: {e}") from e

    url = parser.get('remote "origin"', "url", fallback="").strip()
    if not url:
        raise ProjectDiscoveryError(f"no remote 'origin' url in {config_path}")
    logger.debug("Remote origin url: %s", url)
    return url


def project_name_from_remote(remote_url: str) -> str:
    """Extract the repository name from a clone URL.

    Example:
        >>> project_name_from_remote("git@gitlab.com:group/my-project.git")
        "my-project"
    """
    name = remote_url.rstrip("/").rsplit("/", 1)[-1]
    name = name.rsplit(":", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name


def normalize_remote_url(remote_url: str) -> str:
    """Normalize a clone URL for comparison (case, trailing slash and .git)."""
    url = remote_url.strip().rstrip("/").lower()
    if url.endswith(".git"):
        url = url[: -len(".git")]
    return url
