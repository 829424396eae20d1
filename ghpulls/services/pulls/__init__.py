from ghpulls.services.pulls.client import PullRequestsClient
from ghpulls.services.pulls.observable import (
    ObservablePullRequestReviewCommentsClient,
    ObservablePullRequestsClient,
)
from ghpulls.services.pulls.review_comments import PullRequestReviewCommentsClient

__all__ = [
    "ObservablePullRequestReviewCommentsClient",
    "ObservablePullRequestsClient",
    "PullRequestReviewCommentsClient",
    "PullRequestsClient",
]
