import json
from collections.abc import AsyncGenerator, Callable
from unittest.mock import patch

import httpx
import pytest
from pydantic import BaseModel

from ghpulls.core.exceptions import (
    GitHubApiError,
    GitHubAuthenticationError,
    GitHubConnectionError,
    GitHubError,
    GitHubForbiddenError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubValidationError,
)
from ghpulls.services.github.connection import Connection, _parse_next_link, parse_each
from ghpulls.services.github.models import ApiOptions

API = "https://api.github.com"


class Item(BaseModel):
    n: int


def make_connection(handler: Callable[[httpx.Request], httpx.Response]) -> Connection:
    return Connection(token="test-token", base_url=API, transport=httpx.MockTransport(handler))


def paged_handler(
    pages: dict[int, list[int]], seen: list[httpx.URL]
) -> Callable[[httpx.Request], httpx.Response]:
    """Serve ``pages`` of ``{"n": i}`` items with GitHub style Link headers."""
    last = max(pages)

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        page = int(request.url.params.get("page", "1"))
        headers = {}
        if page < last:
            per_page = request.url.params["per_page"]
            headers["Link"] = (
                f'<{API}/repos/o/n/pulls?per_page={per_page}&page={page + 1}>; rel="next", '
                f'<{API}/repos/o/n/pulls?per_page={per_page}&page={last}>; rel="last"'
            )
        return httpx.Response(200, json=[{"n": i} for i in pages[page]], headers=headers)

    return handler


class TestConnectionRequests:
    """Tests for single requests."""

    @pytest.mark.asyncio
    async def test_sends_auth_and_api_headers(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"id": 1})

        async with make_connection(handler) as connection:
            data = await connection.get("/repos/o/n/pulls/1")

        assert data == {"id": 1}
        request = captured[0]
        assert request.url == f"{API}/repos/o/n/pulls/1"
        assert request.headers["Authorization"] == "Bearer test-token"
        assert request.headers["Accept"] == "application/vnd.github+json"
        assert "X-GitHub-Api-Version" in request.headers

    @pytest.mark.asyncio
    async def test_anonymous_connection_has_no_authorization(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={})

        connection = Connection(token="", base_url=API, transport=httpx.MockTransport(handler))
        await connection.get("/rate_limit")
        await connection.close()

        assert "Authorization" not in captured[0].headers

    @pytest.mark.asyncio
    async def test_json_body_and_empty_response(self) -> None:
        bodies: list[bytes] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(request.content)
            return httpx.Response(204)

        connection = make_connection(handler)
        result = await connection.put("/repos/o/n/pulls/1/merge", json={"merge_method": "squash"})

        assert result is None
        assert json.loads(bodies[0]) == {"merge_method": "squash"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status_code", "body", "headers", "expected"),
        [
            (401, {"message": "Bad credentials"}, {}, GitHubAuthenticationError),
            (
                403,
                {"message": "API rate limit exceeded"},
                {"X-RateLimit-Reset": "1700000000"},
                GitHubRateLimitError,
            ),
            (403, {"message": "Forbidden"}, {"X-RateLimit-Remaining": "0"}, GitHubRateLimitError),
            (429, {"message": "Too many requests"}, {}, GitHubRateLimitError),
            (
                403,
                {"message": "Resource not accessible"},
                {"X-RateLimit-Remaining": "42"},
                GitHubForbiddenError,
            ),
            (404, {"message": "Not Found"}, {}, GitHubNotFoundError),
            (
                422,
                {"message": "Validation Failed", "errors": [{"code": "invalid"}]},
                {},
                GitHubValidationError,
            ),
            (405, {"message": "Pull Request is not mergeable"}, {}, GitHubApiError),
            (500, {"message": "Server Error"}, {}, GitHubApiError),
        ],
    )
    async def test_error_mapping(
        self,
        status_code: int,
        body: dict,
        headers: dict[str, str],
        expected: type[GitHubError],
    ) -> None:
        connection = make_connection(
            lambda request: httpx.Response(status_code, json=body, headers=headers)
        )

        with pytest.raises(expected) as exc_info:
            await connection.get("/repos/o/n/pulls/1")

        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_rate_limit_carries_reset(self) -> None:
        connection = make_connection(
            lambda request: httpx.Response(
                403,
                json={"message": "API rate limit exceeded"},
                headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"},
            )
        )

        with pytest.raises(GitHubRateLimitError) as exc_info:
            await connection.get("/repos/o/n/pulls")

        assert exc_info.value.reset_at == 1700000000

    @pytest.mark.asyncio
    async def test_malformed_rate_limit_headers_are_ignored(self) -> None:
        connection = make_connection(
            lambda request: httpx.Response(
                200,
                json={"id": 1},
                headers={"X-RateLimit-Remaining": "n/a", "X-RateLimit-Reset": "soon"},
            )
        )

        with patch("ghpulls.services.github.connection.record_github_api_call") as mock_record:
            data = await connection.get("/repos/o/n/pulls/1")

        assert data == {"id": 1}
        kwargs = mock_record.call_args.kwargs
        assert kwargs["rate_limit_remaining"] is None
        assert kwargs["rate_limit_reset"] is None

    @pytest.mark.asyncio
    async def test_injected_client_is_left_open(self) -> None:
        http_client = httpx.AsyncClient(
            base_url=API, transport=httpx.MockTransport(lambda r: httpx.Response(200, json={}))
        )

        async with Connection(token="t", client=http_client) as connection:
            await connection.get("/rate_limit")

        assert not http_client.is_closed
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self) -> None:
        connection = make_connection(lambda request: httpx.Response(200, json={}))
        await connection.get("/rate_limit")
        http_client = connection._client

        await connection.close()

        assert http_client is not None and http_client.is_closed
        assert connection._client is None

    @pytest.mark.asyncio
    async def test_validation_errors_exposed(self) -> None:
        connection = make_connection(
            lambda request: httpx.Response(
                422,
                json={
                    "message": "Validation Failed",
                    "errors": [{"field": "head", "code": "invalid"}],
                },
            )
        )

        with pytest.raises(GitHubValidationError) as exc_info:
            await connection.post("/repos/o/n/pulls", json={})

        assert exc_info.value.errors == [{"field": "head", "code": "invalid"}]
        assert exc_info.value.message == "Validation Failed"

    @pytest.mark.asyncio
    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        connection = make_connection(handler)

        with pytest.raises(GitHubConnectionError) as exc_info:
            await connection.get("/repos/o/n/pulls/1")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


class TestConnectionPagination:
    """Tests for Link header pagination."""

    @pytest.mark.asyncio
    async def test_follows_next_links(self) -> None:
        seen: list[httpx.URL] = []
        connection = make_connection(paged_handler({1: [1, 2], 2: [3, 4], 3: [5]}, seen))

        items = [item async for item in connection.get_all("/repos/o/n/pulls", {"state": "open"})]

        assert [item["n"] for item in items] == [1, 2, 3, 4, 5]
        assert len(seen) == 3
        assert seen[0].params["state"] == "open"
        assert seen[0].params["per_page"] == "100"

    @pytest.mark.asyncio
    async def test_applies_api_options(self) -> None:
        seen: list[httpx.URL] = []
        connection = make_connection(paged_handler({1: [1], 2: [2], 3: [3], 4: [4]}, seen))
        options = ApiOptions(page_size=1, start_page=2, page_count=2)

        items = [item async for item in connection.get_all("/repos/o/n/pulls", options=options)]

        assert [item["n"] for item in items] == [2, 3]
        assert seen[0].params["per_page"] == "1"
        assert seen[0].params["page"] == "2"
        assert len(seen) == 2

    @pytest.mark.asyncio
    async def test_is_lazy_and_stops_early(self) -> None:
        seen: list[httpx.URL] = []
        connection = make_connection(paged_handler({1: [1, 2], 2: [3, 4]}, seen))

        stream = connection.get_all("/repos/o/n/pulls")
        assert seen == []

        async for item in stream:
            if item["n"] == 2:
                break
        await stream.aclose()

        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_error_on_later_page_after_items(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("page") == "2":
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(
                200,
                json=[{"n": 1}],
                headers={"Link": f'<{API}/repos/o/n/pulls?page=2>; rel="next"'},
            )

        connection = make_connection(handler)
        received: list[int] = []

        with pytest.raises(GitHubNotFoundError):
            async for item in connection.get_all("/repos/o/n/pulls"):
                received.append(item["n"])

        assert received == [1]

    @pytest.mark.asyncio
    async def test_rejects_non_list_pages(self) -> None:
        connection = make_connection(lambda request: httpx.Response(200, json={"oops": True}))

        with pytest.raises(GitHubError, match="Unexpected response format"):
            [item async for item in connection.get_all("/repos/o/n/pulls")]


class TestParseEach:
    @pytest.mark.asyncio
    async def test_closes_source_when_consumer_stops(self) -> None:
        closed = False

        async def source() -> AsyncGenerator[dict, None]:
            nonlocal closed
            try:
                for n in (1, 2, 3):
                    yield {"n": n}
            finally:
                closed = True

        stream = parse_each(Item, source())
        async for item in stream:
            assert item.n == 1
            break
        await stream.aclose()

        assert closed


class TestConnectionHelpers:
    def test_parse_next_link(self) -> None:
        header = (
            '<https://api.github.com/repositories/1/pulls?page=2>; rel="next", '
            '<https://api.github.com/repositories/1/pulls?page=9>; rel="last"'
        )

        assert _parse_next_link(header) == "https://api.github.com/repositories/1/pulls?page=2"
        assert _parse_next_link('<https://x/?page=1>; rel="prev"') is None
        assert _parse_next_link("") is None

    @pytest.mark.parametrize(
        ("endpoint", "expected"),
        [
            ("/repos/owner/repo/pulls/123", "pulls"),
            ("/repos/owner/repo/pulls/123/files", "pulls_files"),
            ("/repositories/42/pulls/7/commits", "pulls_commits"),
            (f"{API}/repositories/42/pulls?page=2", "pulls"),
            ("/repos/o/n/pulls/comments/5", "pulls_comments"),
            ("/", "unknown"),
        ],
    )
    def test_extract_endpoint_name(self, endpoint: str, expected: str) -> None:
        assert Connection(token="t")._extract_endpoint_name(endpoint) == expected
