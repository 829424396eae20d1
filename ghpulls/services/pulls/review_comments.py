"""Review comments on pull request diffs."""

from collections.abc import AsyncIterator

import structlog

from ghpulls.services.github import urls
from ghpulls.services.github.connection import Connection, expect_object, parse_each
from ghpulls.services.github.models import (
    ApiOptions,
    PullRequestReviewComment,
    PullRequestReviewCommentCreate,
    PullRequestReviewCommentEdit,
    PullRequestReviewCommentReplyCreate,
    PullRequestReviewCommentRequest,
)
from ghpulls.services.github.repository import ById, ByName, RepositoryRef

logger = structlog.get_logger()


class PullRequestReviewCommentsClient:
    """Client for the pull request review comments API."""

    def __init__(self, connection: Connection) -> None:
        self.connection = connection

    # -------------------------------------------------------------------------
    # Shared request builders
    # -------------------------------------------------------------------------

    def _iter_all(
        self, repo: RepositoryRef, number: int, options: ApiOptions | None
    ) -> AsyncIterator[PullRequestReviewComment]:
        endpoint = urls.pull_request_review_comments(repo, number)
        return parse_each(
            PullRequestReviewComment, self.connection.get_all(endpoint, options=options)
        )

    def _iter_all_for_repository(
        self,
        repo: RepositoryRef,
        request: PullRequestReviewCommentRequest | None,
        options: ApiOptions | None,
    ) -> AsyncIterator[PullRequestReviewComment]:
        request = request or PullRequestReviewCommentRequest()
        endpoint = urls.repository_review_comments(repo)
        return parse_each(
            PullRequestReviewComment,
            self.connection.get_all(endpoint, params=request.to_params(), options=options),
        )

    async def _get_comment(self, repo: RepositoryRef, comment_id: int) -> PullRequestReviewComment:
        data = await self.connection.get(urls.review_comment(repo, comment_id))
        return PullRequestReviewComment.model_validate(expect_object(data))

    async def _create(
        self,
        repo: RepositoryRef,
        number: int,
        comment: PullRequestReviewCommentCreate | PullRequestReviewCommentReplyCreate,
    ) -> PullRequestReviewComment:
        data = await self.connection.post(
            urls.pull_request_review_comments(repo, number),
            json=comment.to_payload(),
        )
        created = PullRequestReviewComment.model_validate(expect_object(data))
        logger.info(
            "Review comment created",
            repository=str(repo),
            pr_number=number,
            comment_id=created.id,
        )
        return created

    async def _edit(
        self, repo: RepositoryRef, comment_id: int, comment: PullRequestReviewCommentEdit
    ) -> PullRequestReviewComment:
        data = await self.connection.patch(
            urls.review_comment(repo, comment_id), json=comment.to_payload()
        )
        return PullRequestReviewComment.model_validate(expect_object(data))

    async def _delete(self, repo: RepositoryRef, comment_id: int) -> None:
        await self.connection.delete(urls.review_comment(repo, comment_id))
        logger.info("Review comment deleted", repository=str(repo), comment_id=comment_id)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def get_all(
        self, owner: str, name: str, number: int, options: ApiOptions | None = None
    ) -> list[PullRequestReviewComment]:
        """List review comments on a pull request."""
        return [c async for c in self._iter_all(ByName(owner, name), number, options)]

    async def get_all_by_repository_id(
        self, repository_id: int, number: int, options: ApiOptions | None = None
    ) -> list[PullRequestReviewComment]:
        return [c async for c in self._iter_all(ById(repository_id), number, options)]

    async def get_all_for_repository(
        self,
        owner: str,
        name: str,
        request: PullRequestReviewCommentRequest | None = None,
        options: ApiOptions | None = None,
    ) -> list[PullRequestReviewComment]:
        """List review comments on every pull request of a repository."""
        repo = ByName(owner, name)
        return [c async for c in self._iter_all_for_repository(repo, request, options)]

    async def get_all_for_repository_by_id(
        self,
        repository_id: int,
        request: PullRequestReviewCommentRequest | None = None,
        options: ApiOptions | None = None,
    ) -> list[PullRequestReviewComment]:
        repo = ById(repository_id)
        return [c async for c in self._iter_all_for_repository(repo, request, options)]

    async def get_comment(
        self, owner: str, name: str, comment_id: int
    ) -> PullRequestReviewComment:
        return await self._get_comment(ByName(owner, name), comment_id)

    async def get_comment_by_repository_id(
        self, repository_id: int, comment_id: int
    ) -> PullRequestReviewComment:
        return await self._get_comment(ById(repository_id), comment_id)

    async def create(
        self, owner: str, name: str, number: int, comment: PullRequestReviewCommentCreate
    ) -> PullRequestReviewComment:
        """Comment on a line of the pull request diff."""
        return await self._create(ByName(owner, name), number, comment)

    async def create_by_repository_id(
        self, repository_id: int, number: int, comment: PullRequestReviewCommentCreate
    ) -> PullRequestReviewComment:
        return await self._create(ById(repository_id), number, comment)

    async def create_reply(
        self, owner: str, name: str, number: int, reply: PullRequestReviewCommentReplyCreate
    ) -> PullRequestReviewComment:
        """Reply to an existing review comment."""
        return await self._create(ByName(owner, name), number, reply)

    async def create_reply_by_repository_id(
        self, repository_id: int, number: int, reply: PullRequestReviewCommentReplyCreate
    ) -> PullRequestReviewComment:
        return await self._create(ById(repository_id), number, reply)

    async def edit(
        self, owner: str, name: str, comment_id: int, comment: PullRequestReviewCommentEdit
    ) -> PullRequestReviewComment:
        return await self._edit(ByName(owner, name), comment_id, comment)

    async def edit_by_repository_id(
        self, repository_id: int, comment_id: int, comment: PullRequestReviewCommentEdit
    ) -> PullRequestReviewComment:
        return await self._edit(ById(repository_id), comment_id, comment)

    async def delete(self, owner: str, name: str, comment_id: int) -> None:
        await self._delete(ByName(owner, name), comment_id)

    async def delete_by_repository_id(self, repository_id: int, comment_id: int) -> None:
        await self._delete(ById(repository_id), comment_id)
