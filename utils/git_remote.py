"""Resolve the current repository's owner/name from its origin remote."""

import logging
import re
import subprocess
from pathlib import Path

from utils.errors import (
    GitCommandTimeoutError,
    MissingOriginRemoteError,
    NotAGitRepositoryError,
    UnparseableRemoteError,
)

logger = logging.getLogger(__name__)

# git@github.com:owner/repo.git
_SCP_RE = re.compile(r"^(?:[\w.-]+@)?[\w.-]+:(?!//)(?P<path>[^\\]+)$")
# https://github.com/owner/repo(.git), ssh://git@github.com:22/owner/repo
_URL_RE = re.compile(r"^(?:https?|ssh|git)://(?:[^@/]+@)?[^/]+/(?P<path>.+)$")


def _run_git(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            ["git", *args], cwd=cwd, capture_output=True, text=True, timeout=30
        )
    except FileNotFoundError as e:
        raise NotAGitRepositoryError("git executable not found") from e
    except subprocess.TimeoutExpired as e:
        raise GitCommandTimeoutError(f"git {' '.join(args)} timed out after {e.timeout}s") from e


def parse_remote_url(url: str) -> tuple[str, str]:
    """
    Split a remote URL into (owner, name).
    
    Examples:
        "git@github.com:owner/repo.git" -> ("owner", "repo")
        "https://github.com/owner/repo" -> ("owner", "repo")
    
    Raises:
        UnparseableRemoteError: If the URL has no owner/name path
    """
    url = url.strip()
    match = _URL_RE.match(url) or _SCP_RE.match(url)
    if not match:
        raise UnparseableRemoteError(f"Not a recognised remote URL: {url}")
    
    path = match.group("path").strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    
    parts = path.split("/")
    if len(parts) != 2 or not all(parts):
        raise UnparseableRemoteError(f"Invalid repository path in remote URL: {url}")
    return parts[0], parts[1]


def resolve_repository(cwd: Path) -> str:
    """
    Return "owner/name" for the repository containing cwd.
    
    Raises:
        NotAGitRepositoryError: cwd is not inside a git work tree
        MissingOriginRemoteError: the repository has no origin remote
        UnparseableRemoteError: origin's URL is not owner/name shaped
    """
    toplevel = _run_git(["rev-parse", "--show-toplevel"], cwd)
    if toplevel.returncode != 0:
        raise NotAGitRepositoryError(f"Not in a git repository: {cwd}")
    
    root = Path(toplevel.stdout.strip())
    remote = _run_git(["remote", "get-url", "origin"], root)
    if remote.returncode != 0 or not remote.stdout.strip():
        raise MissingOriginRemoteError(f"No 'origin' remote found in {root}")
    
    owner, name = parse_remote_url(remote.stdout)
    logger.debug(f"Resolved {root} to {owner}/{name}")
    return f"{owner}/{name}"
