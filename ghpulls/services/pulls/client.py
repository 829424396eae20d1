"""Pull requests API client."""

from collections.abc import AsyncIterator

import structlog

from ghpulls.core.exceptions import (
    GitHubApiError,
    GitHubNotFoundError,
    PullRequestMismatchError,
    PullRequestNotMergeableError,
)
from ghpulls.services.github import urls
from ghpulls.services.github.connection import Connection, expect_object, parse_each
from ghpulls.services.github.models import (
    ApiOptions,
    MergePullRequest,
    NewPullRequest,
    PullRequest,
    PullRequestCommit,
    PullRequestFile,
    PullRequestMerge,
    PullRequestRequest,
    PullRequestUpdate,
)
from ghpulls.services.github.repository import ById, ByName, RepositoryRef
from ghpulls.services.pulls.review_comments import PullRequestReviewCommentsClient

logger = structlog.get_logger()


class PullRequestsClient:
    """
    Client for the pull requests API.

    Every operation is offered twice: addressed by ``owner``/``name`` and
    addressed by ``repository_id`` (the ``*_by_repository_id`` variants).
    Both forms normalise into a RepositoryRef and share one request builder.
    List operations read every page and return a new list in server order.
    """

    def __init__(self, connection: Connection) -> None:
        self.connection = connection
        self.comment = PullRequestReviewCommentsClient(connection)

    # -------------------------------------------------------------------------
    # Shared request builders
    # -------------------------------------------------------------------------

    async def _get(self, repo: RepositoryRef, number: int) -> PullRequest:
        data = await self.connection.get(urls.pull_request(repo, number))
        return PullRequest.model_validate(expect_object(data))

    def _iter_all_for_repository(
        self,
        repo: RepositoryRef,
        request: PullRequestRequest | None,
        options: ApiOptions | None,
    ) -> AsyncIterator[PullRequest]:
        request = request or PullRequestRequest()
        items = self.connection.get_all(
            urls.pull_requests(repo), params=request.to_params(), options=options
        )
        return parse_each(PullRequest, items)

    async def _create(self, repo: RepositoryRef, new_pull_request: NewPullRequest) -> PullRequest:
        data = await self.connection.post(
            urls.pull_requests(repo), json=new_pull_request.to_payload()
        )
        created = PullRequest.model_validate(expect_object(data))
        logger.info(
            "Pull request created",
            repository=str(repo),
            pr_number=created.number,
            head=new_pull_request.head,
            base=new_pull_request.base,
        )
        return created

    async def _update(
        self, repo: RepositoryRef, number: int, update: PullRequestUpdate
    ) -> PullRequest:
        data = await self.connection.patch(
            urls.pull_request(repo, number), json=update.to_payload()
        )
        return PullRequest.model_validate(expect_object(data))

    async def _merge(
        self, repo: RepositoryRef, number: int, merge: MergePullRequest
    ) -> PullRequestMerge:
        try:
            data = await self.connection.put(
                urls.pull_request_merge(repo, number), json=merge.to_payload()
            )
        except GitHubApiError as e:
            if e.status_code == 405:
                raise PullRequestNotMergeableError(e.message, e.details, status_code=405) from e
            if e.status_code == 409:
                raise PullRequestMismatchError(e.message, e.details, status_code=409) from e
            raise

        result = PullRequestMerge.model_validate(expect_object(data))
        logger.info(
            "Pull request merged",
            repository=str(repo),
            pr_number=number,
            merged=result.merged,
            sha=result.sha,
        )
        return result

    async def _merged(self, repo: RepositoryRef, number: int) -> bool:
        try:
            await self.connection.get(urls.pull_request_merge(repo, number))
        except GitHubNotFoundError:
            return False
        return True

    def _iter_commits(self, repo: RepositoryRef, number: int) -> AsyncIterator[PullRequestCommit]:
        items = self.connection.get_all(urls.pull_request_commits(repo, number))
        return parse_each(PullRequestCommit, items)

    def _iter_files(self, repo: RepositoryRef, number: int) -> AsyncIterator[PullRequestFile]:
        items = self.connection.get_all(urls.pull_request_files(repo, number))
        return parse_each(PullRequestFile, items)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def get(self, owner: str, name: str, number: int) -> PullRequest:
        """Fetch a single pull request."""
        return await self._get(ByName(owner, name), number)

    async def get_by_repository_id(self, repository_id: int, number: int) -> PullRequest:
        return await self._get(ById(repository_id), number)

    async def get_all_for_repository(
        self,
        owner: str,
        name: str,
        request: PullRequestRequest | None = None,
        options: ApiOptions | None = None,
    ) -> list[PullRequest]:
        """
        List pull requests of a repository.

        Args:
            owner: Repository owner.
            name: Repository name.
            request: State, branch and sort filters. Defaults to open pull
                requests, newest first.
            options: Pagination controls. Defaults to every page.

        Returns:
            Pull requests in the order GitHub returned them.
        """
        items = self._iter_all_for_repository(ByName(owner, name), request, options)
        return [pr async for pr in items]

    async def get_all_for_repository_by_id(
        self,
        repository_id: int,
        request: PullRequestRequest | None = None,
        options: ApiOptions | None = None,
    ) -> list[PullRequest]:
        items = self._iter_all_for_repository(ById(repository_id), request, options)
        return [pr async for pr in items]

    async def create(
        self, owner: str, name: str, new_pull_request: NewPullRequest
    ) -> PullRequest:
        """Open a pull request."""
        return await self._create(ByName(owner, name), new_pull_request)

    async def create_by_repository_id(
        self, repository_id: int, new_pull_request: NewPullRequest
    ) -> PullRequest:
        return await self._create(ById(repository_id), new_pull_request)

    async def update(
        self, owner: str, name: str, number: int, pull_request_update: PullRequestUpdate
    ) -> PullRequest:
        """Edit title, body, state or base branch of a pull request."""
        return await self._update(ByName(owner, name), number, pull_request_update)

    async def update_by_repository_id(
        self, repository_id: int, number: int, pull_request_update: PullRequestUpdate
    ) -> PullRequest:
        return await self._update(ById(repository_id), number, pull_request_update)

    async def merge(
        self, owner: str, name: str, number: int, merge_pull_request: MergePullRequest
    ) -> PullRequestMerge:
        """
        Merge a pull request.

        Raises:
            PullRequestNotMergeableError: GitHub refused the merge (405).
            PullRequestMismatchError: ``sha`` does not match the head (409).
        """
        return await self._merge(ByName(owner, name), number, merge_pull_request)

    async def merge_by_repository_id(
        self, repository_id: int, number: int, merge_pull_request: MergePullRequest
    ) -> PullRequestMerge:
        return await self._merge(ById(repository_id), number, merge_pull_request)

    async def merged(self, owner: str, name: str, number: int) -> bool:
        """Return whether the pull request has been merged."""
        return await self._merged(ByName(owner, name), number)

    async def merged_by_repository_id(self, repository_id: int, number: int) -> bool:
        return await self._merged(ById(repository_id), number)

    async def commits(self, owner: str, name: str, number: int) -> list[PullRequestCommit]:
        """List commits of a pull request."""
        return [c async for c in self._iter_commits(ByName(owner, name), number)]

    async def commits_by_repository_id(
        self, repository_id: int, number: int
    ) -> list[PullRequestCommit]:
        return [c async for c in self._iter_commits(ById(repository_id), number)]

    async def files(self, owner: str, name: str, number: int) -> list[PullRequestFile]:
        """List files changed by a pull request."""
        return [f async for f in self._iter_files(ByName(owner, name), number)]

    async def files_by_repository_id(
        self, repository_id: int, number: int
    ) -> list[PullRequestFile]:
        return [f async for f in self._iter_files(ById(repository_id), number)]
