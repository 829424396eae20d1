from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class ItemState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ItemStateFilter(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"


class PullRequestSort(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    POPULARITY = "popularity"
    LONG_RUNNING = "long-running"


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class MergeMethod(str, Enum):
    MERGE = "merge"
    SQUASH = "squash"
    REBASE = "rebase"


class _Resource(BaseModel):
    """Base for models parsed from GitHub responses."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class _Payload(BaseModel):
    """Base for request bodies and query filters."""

    model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_default=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True, mode="json")


# =============================================================================
# Resources
# =============================================================================


class User(_Resource):
    """GitHub user information."""

    login: str
    id: int
    avatar_url: str | None = None
    html_url: str | None = None
    type: str | None = None


class Repository(_Resource):
    """GitHub repository information."""

    id: int
    name: str
    full_name: str
    owner: User
    html_url: str
    default_branch: str = "main"
    private: bool = False


class GitReference(_Resource):
    """The head or base side of a pull request."""

    label: str | None = None
    ref: str
    sha: str
    user: User | None = None
    repo: Repository | None = None


class PullRequest(_Resource):
    """Pull request information from GitHub."""

    id: int
    number: int
    state: ItemState
    title: str
    body: str | None = None
    url: str | None = None
    html_url: str
    diff_url: str | None = None
    patch_url: str | None = None
    user: User
    head: GitReference
    base: GitReference
    draft: bool = False
    locked: bool = False
    merged: bool | None = None
    mergeable: bool | None = None
    mergeable_state: str | None = None
    merged_by: User | None = None
    merge_commit_sha: str | None = None
    comments: int | None = None
    review_comments: int | None = None
    commits: int | None = None
    additions: int | None = None
    deletions: int | None = None
    changed_files: int | None = None
    created_at: datetime
    updated_at: datetime
    closed_at: datetime | None = None
    merged_at: datetime | None = None

    @property
    def head_sha(self) -> str:
        return self.head.sha

    @property
    def base_sha(self) -> str:
        return self.base.sha

    @property
    def head_ref(self) -> str:
        return self.head.ref

    @property
    def base_ref(self) -> str:
        return self.base.ref


class CommitAuthor(_Resource):
    name: str | None = None
    email: str | None = None
    date: datetime | None = None


class CommitDetails(_Resource):
    message: str
    author: CommitAuthor | None = None
    committer: CommitAuthor | None = None
    comment_count: int = 0


class CommitParent(_Resource):
    sha: str
    url: str | None = None


class PullRequestCommit(_Resource):
    """A commit contained in a pull request."""

    sha: str
    url: str | None = None
    html_url: str | None = None
    commit: CommitDetails
    author: User | None = None
    committer: User | None = None
    parents: list[CommitParent] = Field(default_factory=list)


class PullRequestFile(_Resource):
    """A file changed in a pull request."""

    sha: str | None = None
    filename: str
    status: FileStatus
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: str | None = None
    previous_filename: str | None = None
    blob_url: str | None = None
    raw_url: str | None = None
    contents_url: str | None = None


class PullRequestMerge(_Resource):
    """Result of merging a pull request."""

    sha: str | None = None
    merged: bool
    message: str


class PullRequestReviewComment(_Resource):
    """A review comment attached to a line of a pull request diff."""

    id: int
    body: str
    path: str
    position: int | None = None
    original_position: int | None = None
    line: int | None = None
    original_line: int | None = None
    side: Literal["LEFT", "RIGHT"] | None = None
    commit_id: str
    original_commit_id: str | None = None
    diff_hunk: str | None = None
    user: User | None = None
    in_reply_to_id: int | None = None
    pull_request_review_id: int | None = None
    html_url: str | None = None
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Request payloads
# =============================================================================


class NewPullRequest(_Payload):
    """Body for opening a pull request."""

    title: str = Field(..., min_length=1)
    head: str = Field(..., min_length=1)
    base: str = Field(..., min_length=1)
    body: str | None = None
    draft: bool | None = None
    maintainer_can_modify: bool | None = None


class PullRequestUpdate(_Payload):
    """Body for editing a pull request. Unset fields are left untouched."""

    title: str | None = None
    body: str | None = None
    state: ItemState | None = None
    base: str | None = None
    maintainer_can_modify: bool | None = None


class MergePullRequest(_Payload):
    """Body for merging a pull request."""

    commit_title: str | None = None
    commit_message: str | None = None
    sha: str | None = None
    merge_method: MergeMethod | None = None


class PullRequestRequest(_Payload):
    """Filter and sort criteria for listing pull requests."""

    state: ItemStateFilter = ItemStateFilter.OPEN
    head: str | None = None
    base: str | None = None
    sort_by: PullRequestSort = PullRequestSort.CREATED
    sort_direction: SortDirection = SortDirection.DESCENDING

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {
            "state": self.state,
            "sort": self.sort_by,
            "direction": self.sort_direction,
        }
        if self.head:
            params["head"] = self.head
        if self.base:
            params["base"] = self.base
        return params


class PullRequestReviewCommentCreate(_Payload):
    """Body for a new review comment on a pull request diff."""

    body: str = Field(..., min_length=1)
    commit_id: str
    path: str
    line: int | None = None
    side: Literal["LEFT", "RIGHT"] | None = None
    start_line: int | None = None
    start_side: Literal["LEFT", "RIGHT"] | None = None
    position: int | None = None


class PullRequestReviewCommentReplyCreate(_Payload):
    """Body for replying to an existing review comment."""

    body: str = Field(..., min_length=1)
    in_reply_to: int


class PullRequestReviewCommentEdit(_Payload):
    body: str = Field(..., min_length=1)


class PullRequestReviewCommentRequest(_Payload):
    """Sort criteria for listing every review comment in a repository."""

    sort_by: Literal["created", "updated"] = "created"
    sort_direction: SortDirection | None = None
    since: datetime | None = None

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"sort": self.sort_by}
        if self.sort_direction:
            params["direction"] = self.sort_direction
        if self.since:
            params["since"] = self.since.isoformat()
        return params


class ApiOptions(_Payload):
    """Pagination controls for list endpoints."""

    start_page: int | None = Field(default=None, ge=1)
    page_size: int | None = Field(default=None, ge=1, le=100)
    page_count: int | None = Field(default=None, ge=1)
