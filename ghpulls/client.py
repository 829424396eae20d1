"""Entry points bundling a Connection with the pull requests clients."""

from types import TracebackType
from typing import Self

from ghpulls.services.github.connection import Connection
from ghpulls.services.pulls.client import PullRequestsClient
from ghpulls.services.pulls.observable import ObservablePullRequestsClient


class _BaseClient:
    def __init__(self, token: str | None = None, connection: Connection | None = None) -> None:
        self.connection = connection or Connection(token=token)

    async def close(self) -> None:
        await self.connection.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


class GitHubClient(_BaseClient):
    """Awaitable GitHub client: ``await client.pull_request.get(...)``."""

    def __init__(self, token: str | None = None, connection: Connection | None = None) -> None:
        super().__init__(token, connection)
        self.pull_request = PullRequestsClient(self.connection)


class ObservableGitHubClient(_BaseClient):
    """Reactive GitHub client: ``async for pr in client.pull_request.files(...)``."""

    def __init__(self, token: str | None = None, connection: Connection | None = None) -> None:
        super().__init__(token, connection)
        self.pull_request = ObservablePullRequestsClient(self.connection)
