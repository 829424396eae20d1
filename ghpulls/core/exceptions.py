from typing import Any


class GhPullsError(Exception):
    """Base exception for the ghpulls client."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class GitHubConnectionError(GhPullsError):
    """The request never produced an HTTP response."""

    pass


class GitHubError(GhPullsError):
    """GitHub answered with an error status."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, details)


class GitHubApiError(GitHubError):
    """Any error status without a more specific mapping."""

    pass


class GitHubAuthenticationError(GitHubError):
    """GitHub authentication failed."""

    pass


class GitHubForbiddenError(GitHubError):
    """Token is valid but lacks access to the resource."""

    pass


class GitHubRateLimitError(GitHubError):
    """GitHub API rate limit exceeded."""

    def __init__(
        self, reset_at: int, message: str = "Rate limit exceeded", status_code: int = 403
    ) -> None:
        self.reset_at = reset_at
        super().__init__(message, {"reset_at": reset_at}, status_code=status_code)


class GitHubNotFoundError(GitHubError):
    """Requested GitHub resource not found."""

    pass


class GitHubValidationError(GitHubError):
    """GitHub rejected the payload (422)."""

    @property
    def errors(self) -> list[dict[str, Any]]:
        errors = self.details.get("errors", [])
        return errors if isinstance(errors, list) else []


class PullRequestNotMergeableError(GitHubError):
    """The pull request cannot be merged in its current state (405)."""

    pass


class PullRequestMismatchError(GitHubError):
    """The head sha given for the merge does not match the pull request (409)."""

    pass
