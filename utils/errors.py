"""Exception hierarchy for pr-picker.

Every fatal condition the CLI reports derives from PRPickerError, so the
entrypoint can catch one type and turn it into a message and exit code.
Empty results and a cancelled selection are normal outcomes, not errors.
"""

from typing import Optional


class PRPickerError(Exception):
    """Base class for all fatal pr-picker errors."""


class AuthError(PRPickerError):
    """Raised when the GitHub token is missing or rejected."""


class ScopeResolutionError(PRPickerError):
    """Raised when the current repository scope cannot be determined."""


class NotAGitRepositoryError(ScopeResolutionError):
    """Raised when the working directory is not inside a git repository."""


class MissingOriginRemoteError(ScopeResolutionError):
    """Raised when the repository has no 'origin' remote."""


class UnparseableRemoteError(ScopeResolutionError):
    """Raised when the origin URL cannot be split into owner and name."""


class GitCommandTimeoutError(ScopeResolutionError):
    """Raised when a git command used for scope lookup does not finish."""


class RemoteQueryError(PRPickerError):
    """Raised when the GitHub API call fails or returns an error payload."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ArtifactWriteError(PRPickerError):
    """Raised when a preview artifact cannot be written."""


class SelectorUnavailableError(PRPickerError):
    """Raised when the interactive selector binary cannot be launched."""
