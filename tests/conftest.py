"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator, Callable, Iterable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from ghpulls.services.github.connection import Connection

pytest_plugins = ("pytest_asyncio",)


# =============================================================================
# Payload Fixtures
# =============================================================================


def build_pull_request_payload(number: int = 1, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": 10_000 + number,
        "number": number,
        "state": "open",
        "title": f"Test PR {number}",
        "body": "Test body",
        "html_url": f"https://github.com/owner/repo/pull/{number}",
        "diff_url": f"https://github.com/owner/repo/pull/{number}.diff",
        "user": {"login": "testuser", "id": 1},
        "head": {"ref": "feature-branch", "sha": "abc123", "label": "owner:feature-branch"},
        "base": {"ref": "main", "sha": "def456", "label": "owner:main"},
        "draft": False,
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-02T00:00:00Z",
        "merged_at": None,
    }
    payload.update(overrides)
    return payload


def build_review_comment_payload(comment_id: int = 1, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": comment_id,
        "body": "Consider adding a docstring here.",
        "path": "src/main.py",
        "line": 10,
        "side": "RIGHT",
        "commit_id": "abc123",
        "user": {"login": "reviewer", "id": 2},
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def pull_request_payload() -> Callable[..., dict[str, Any]]:
    """Factory for GitHub pull request JSON."""
    return build_pull_request_payload


@pytest.fixture
def review_comment_payload() -> Callable[..., dict[str, Any]]:
    """Factory for GitHub review comment JSON."""
    return build_review_comment_payload


# =============================================================================
# Mock Fixtures
# =============================================================================


def paginated(items: Iterable[Any]) -> Callable[..., AsyncIterator[Any]]:
    """Side effect for ``Connection.get_all`` yielding ``items`` lazily."""
    items = list(items)

    def get_all(*args: Any, **kwargs: Any) -> AsyncIterator[Any]:
        async def generate() -> AsyncIterator[Any]:
            for item in items:
                yield item

        return generate()

    return get_all


def failing(error: Exception) -> Callable[..., AsyncIterator[Any]]:
    """Side effect for ``Connection.get_all`` failing on the first page."""

    def get_all(*args: Any, **kwargs: Any) -> AsyncIterator[Any]:
        async def generate() -> AsyncIterator[Any]:
            raise error
            yield  # pragma: no cover

        return generate()

    return get_all


@pytest.fixture
def mock_connection() -> MagicMock:
    connection = MagicMock(spec=Connection)
    connection.get = AsyncMock()
    connection.post = AsyncMock()
    connection.patch = AsyncMock()
    connection.put = AsyncMock()
    connection.delete = AsyncMock()
    connection.close = AsyncMock()
    connection.get_all = MagicMock(side_effect=paginated([]))
    return connection
