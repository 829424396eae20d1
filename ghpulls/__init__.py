"""Pull requests client for the GitHub REST API, awaitable and reactive."""

from ghpulls.client import GitHubClient, ObservableGitHubClient
from ghpulls.services.github import ById, ByName, Connection, Observable, RepositoryRef
from ghpulls.services.pulls import ObservablePullRequestsClient, PullRequestsClient

__all__ = [
    "ById",
    "ByName",
    "Connection",
    "GitHubClient",
    "Observable",
    "ObservableGitHubClient",
    "ObservablePullRequestsClient",
    "PullRequestsClient",
    "RepositoryRef",
]
