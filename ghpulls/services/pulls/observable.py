"""
Reactive surface of the pull requests API.

Each method returns a cold Observable. Single-result operations emit one
item then complete. List operations stream pull requests page by page, so
the first items arrive before the last page is fetched and a consumer that
stops early stops the pagination.
"""

from ghpulls.services.github.connection import Connection
from ghpulls.services.github.models import (
    ApiOptions,
    MergePullRequest,
    NewPullRequest,
    PullRequest,
    PullRequestCommit,
    PullRequestFile,
    PullRequestMerge,
    PullRequestRequest,
    PullRequestReviewComment,
    PullRequestReviewCommentCreate,
    PullRequestReviewCommentEdit,
    PullRequestReviewCommentReplyCreate,
    PullRequestReviewCommentRequest,
    PullRequestUpdate,
)
from ghpulls.services.github.observable import Observable
from ghpulls.services.github.repository import ById, ByName, RepositoryRef
from ghpulls.services.pulls.client import PullRequestsClient
from ghpulls.services.pulls.review_comments import PullRequestReviewCommentsClient


class ObservablePullRequestReviewCommentsClient:
    """Review comments API returning Observables."""

    def __init__(self, client: PullRequestReviewCommentsClient) -> None:
        self._client = client

    def _all(
        self, repo: RepositoryRef, number: int, options: ApiOptions | None
    ) -> Observable[PullRequestReviewComment]:
        return Observable.from_async_iterable(
            lambda: self._client._iter_all(repo, number, options)
        )

    def _all_for_repository(
        self,
        repo: RepositoryRef,
        request: PullRequestReviewCommentRequest | None,
        options: ApiOptions | None,
    ) -> Observable[PullRequestReviewComment]:
        return Observable.from_async_iterable(
            lambda: self._client._iter_all_for_repository(repo, request, options)
        )

    def get_all(
        self, owner: str, name: str, number: int, options: ApiOptions | None = None
    ) -> Observable[PullRequestReviewComment]:
        return self._all(ByName(owner, name), number, options)

    def get_all_by_repository_id(
        self, repository_id: int, number: int, options: ApiOptions | None = None
    ) -> Observable[PullRequestReviewComment]:
        return self._all(ById(repository_id), number, options)

    def get_all_for_repository(
        self,
        owner: str,
        name: str,
        request: PullRequestReviewCommentRequest | None = None,
        options: ApiOptions | None = None,
    ) -> Observable[PullRequestReviewComment]:
        return self._all_for_repository(ByName(owner, name), request, options)

    def get_all_for_repository_by_id(
        self,
        repository_id: int,
        request: PullRequestReviewCommentRequest | None = None,
        options: ApiOptions | None = None,
    ) -> Observable[PullRequestReviewComment]:
        return self._all_for_repository(ById(repository_id), request, options)

    def get_comment(
        self, owner: str, name: str, comment_id: int
    ) -> Observable[PullRequestReviewComment]:
        repo = ByName(owner, name)
        return Observable.from_coroutine(lambda: self._client._get_comment(repo, comment_id))

    def get_comment_by_repository_id(
        self, repository_id: int, comment_id: int
    ) -> Observable[PullRequestReviewComment]:
        repo = ById(repository_id)
        return Observable.from_coroutine(lambda: self._client._get_comment(repo, comment_id))

    def create(
        self, owner: str, name: str, number: int, comment: PullRequestReviewCommentCreate
    ) -> Observable[PullRequestReviewComment]:
        repo = ByName(owner, name)
        return Observable.from_coroutine(lambda: self._client._create(repo, number, comment))

    def create_by_repository_id(
        self, repository_id: int, number: int, comment: PullRequestReviewCommentCreate
    ) -> Observable[PullRequestReviewComment]:
        repo = ById(repository_id)
        return Observable.from_coroutine(lambda: self._client._create(repo, number, comment))

    def create_reply(
        self, owner: str, name: str, number: int, reply: PullRequestReviewCommentReplyCreate
    ) -> Observable[PullRequestReviewComment]:
        repo = ByName(owner, name)
        return Observable.from_coroutine(lambda: self._client._create(repo, number, reply))

    def create_reply_by_repository_id(
        self, repository_id: int, number: int, reply: PullRequestReviewCommentReplyCreate
    ) -> Observable[PullRequestReviewComment]:
        repo = ById(repository_id)
        return Observable.from_coroutine(lambda: self._client._create(repo, number, reply))

    def edit(
        self, owner: str, name: str, comment_id: int, comment: PullRequestReviewCommentEdit
    ) -> Observable[PullRequestReviewComment]:
        repo = ByName(owner, name)
        return Observable.from_coroutine(lambda: self._client._edit(repo, comment_id, comment))

    def edit_by_repository_id(
        self, repository_id: int, comment_id: int, comment: PullRequestReviewCommentEdit
    ) -> Observable[PullRequestReviewComment]:
        repo = ById(repository_id)
        return Observable.from_coroutine(lambda: self._client._edit(repo, comment_id, comment))

    def delete(self, owner: str, name: str, comment_id: int) -> Observable[None]:
        repo = ByName(owner, name)
        return Observable.from_coroutine(lambda: self._client._delete(repo, comment_id))

    def delete_by_repository_id(self, repository_id: int, comment_id: int) -> Observable[None]:
        repo = ById(repository_id)
        return Observable.from_coroutine(lambda: self._client._delete(repo, comment_id))


class ObservablePullRequestsClient:
    """
    Pull requests API returning Observables.

    Wraps a PullRequestsClient; both share the same request builders and the
    same Connection, so the two surfaces send identical requests.
    """

    def __init__(
        self,
        connection: Connection | None = None,
        *,
        client: PullRequestsClient | None = None,
    ) -> None:
        if client is None:
            if connection is None:
                raise ValueError("Either connection or client is required")
            client = PullRequestsClient(connection)
        self._client = client
        self.comment = ObservablePullRequestReviewCommentsClient(client.comment)

    def _single_get(self, repo: RepositoryRef, number: int) -> Observable[PullRequest]:
        return Observable.from_coroutine(lambda: self._client._get(repo, number))

    def _all_for_repository(
        self,
        repo: RepositoryRef,
        request: PullRequestRequest | None,
        options: ApiOptions | None,
    ) -> Observable[PullRequest]:
        return Observable.from_async_iterable(
            lambda: self._client._iter_all_for_repository(repo, request, options)
        )

    def get(self, owner: str, name: str, number: int) -> Observable[PullRequest]:
        return self._single_get(ByName(owner, name), number)

    def get_by_repository_id(self, repository_id: int, number: int) -> Observable[PullRequest]:
        return self._single_get(ById(repository_id), number)

    def get_all_for_repository(
        self,
        owner: str,
        name: str,
        request: PullRequestRequest | None = None,
        options: ApiOptions | None = None,
    ) -> Observable[PullRequest]:
        """Stream pull requests of a repository in server order."""
        return self._all_for_repository(ByName(owner, name), request, options)

    def get_all_for_repository_by_id(
        self,
        repository_id: int,
        request: PullRequestRequest | None = None,
        options: ApiOptions | None = None,
    ) -> Observable[PullRequest]:
        return self._all_for_repository(ById(repository_id), request, options)

    def create(
        self, owner: str, name: str, new_pull_request: NewPullRequest
    ) -> Observable[PullRequest]:
        repo = ByName(owner, name)
        return Observable.from_coroutine(lambda: self._client._create(repo, new_pull_request))

    def create_by_repository_id(
        self, repository_id: int, new_pull_request: NewPullRequest
    ) -> Observable[PullRequest]:
        repo = ById(repository_id)
        return Observable.from_coroutine(lambda: self._client._create(repo, new_pull_request))

    def update(
        self, owner: str, name: str, number: int, pull_request_update: PullRequestUpdate
    ) -> Observable[PullRequest]:
        repo = ByName(owner, name)
        return Observable.from_coroutine(
            lambda: self._client._update(repo, number, pull_request_update)
        )

    def update_by_repository_id(
        self, repository_id: int, number: int, pull_request_update: PullRequestUpdate
    ) -> Observable[PullRequest]:
        repo = ById(repository_id)
        return Observable.from_coroutine(
            lambda: self._client._update(repo, number, pull_request_update)
        )

    def merge(
        self, owner: str, name: str, number: int, merge_pull_request: MergePullRequest
    ) -> Observable[PullRequestMerge]:
        repo = ByName(owner, name)
        return Observable.from_coroutine(
            lambda: self._client._merge(repo, number, merge_pull_request)
        )

    def merge_by_repository_id(
        self, repository_id: int, number: int, merge_pull_request: MergePullRequest
    ) -> Observable[PullRequestMerge]:
        repo = ById(repository_id)
        return Observable.from_coroutine(
            lambda: self._client._merge(repo, number, merge_pull_request)
        )

    def merged(self, owner: str, name: str, number: int) -> Observable[bool]:
        repo = ByName(owner, name)
        return Observable.from_coroutine(lambda: self._client._merged(repo, number))

    def merged_by_repository_id(self, repository_id: int, number: int) -> Observable[bool]:
        repo = ById(repository_id)
        return Observable.from_coroutine(lambda: self._client._merged(repo, number))

    def commits(self, owner: str, name: str, number: int) -> Observable[PullRequestCommit]:
        repo = ByName(owner, name)
        return Observable.from_async_iterable(lambda: self._client._iter_commits(repo, number))

    def commits_by_repository_id(
        self, repository_id: int, number: int
    ) -> Observable[PullRequestCommit]:
        repo = ById(repository_id)
        return Observable.from_async_iterable(lambda: self._client._iter_commits(repo, number))

    def files(self, owner: str, name: str, number: int) -> Observable[PullRequestFile]:
        repo = ByName(owner, name)
        return Observable.from_async_iterable(lambda: self._client._iter_files(repo, number))

    def files_by_repository_id(
        self, repository_id: int, number: int
    ) -> Observable[PullRequestFile]:
        repo = ById(repository_id)
        return Observable.from_async_iterable(lambda: self._client._iter_files(repo, number))
