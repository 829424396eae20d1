"""Endpoint paths for the pull request resources of a repository."""

from ghpulls.services.github.repository import RepositoryRef


def _check_number(value: int, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{label} must be a positive integer")
    return value


def pull_requests(repo: RepositoryRef) -> str:
    return f"{repo.path}/pulls"


def pull_request(repo: RepositoryRef, number: int) -> str:
    return f"{repo.path}/pulls/{_check_number(number, 'number')}"


def pull_request_merge(repo: RepositoryRef, number: int) -> str:
    return f"{pull_request(repo, number)}/merge"


def pull_request_commits(repo: RepositoryRef, number: int) -> str:
    return f"{pull_request(repo, number)}/commits"


def pull_request_files(repo: RepositoryRef, number: int) -> str:
    return f"{pull_request(repo, number)}/files"


def pull_request_review_comments(repo: RepositoryRef, number: int) -> str:
    return f"{pull_request(repo, number)}/comments"


def repository_review_comments(repo: RepositoryRef) -> str:
    return f"{repo.path}/pulls/comments"


def review_comment(repo: RepositoryRef, comment_id: int) -> str:
    return f"{repo.path}/pulls/comments/{_check_number(comment_id, 'comment_id')}"
