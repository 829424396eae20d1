"""HTTP connection to the GitHub REST API with metrics instrumentation."""

import re
import time
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing
from types import TracebackType
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel

from ghpulls.core.config import settings
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
from ghpulls.core.metrics import record_github_api_call, record_github_page
from ghpulls.services.github.models import ApiOptions

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

_NEXT_LINK = re.compile(r'<([^>]+)>;\s*rel="next"')


class Connection:
    """Issues authenticated requests and turns error statuses into exceptions."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if token is None and settings.github_token is not None:
            token = settings.github_token.get_secret_value()
        self.token = token
        self.base_url = base_url or settings.github_api_url
        self._transport = transport
        self._client: httpx.AsyncClient | None = client
        # A client passed in by the caller stays open on close()
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": settings.github_api_version,
                "User-Agent": settings.user_agent,
            }
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=settings.request_timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this connection created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "Connection":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _extract_endpoint_name(self, endpoint: str) -> str:
        """
        Extract a normalized endpoint name for metrics.

        Converts:
            /repos/owner/repo/pulls/123 -> pulls
            /repositories/42/pulls/123/files -> pulls_files
            https://api.github.com/repositories/42/pulls?page=2 -> pulls
        """
        path = httpx.URL(endpoint).path
        parts = [p for p in path.strip("/").split("/") if p]

        if len(parts) >= 3 and parts[0] == "repos":
            parts = parts[3:]
        elif len(parts) >= 2 and parts[0] == "repositories":
            parts = parts[2:]

        # Filter out numeric parts (IDs)
        parts = [p for p in parts if not p.isdigit()]

        return "_".join(parts) if parts else "unknown"

    def _raise_for_status(self, response: httpx.Response, endpoint: str) -> None:
        status_code = response.status_code
        if status_code < 400:
            return

        body = _safe_json(response)
        message = body.get("message") if isinstance(body, dict) else None
        details: dict[str, Any] = {"response": body if body is not None else response.text}

        if status_code == 401:
            raise GitHubAuthenticationError(
                message or "Invalid GitHub token", details, status_code=status_code
            )

        if status_code == 429 or (
            status_code == 403
            and (
                "rate limit" in response.text.lower()
                or response.headers.get("X-RateLimit-Remaining") == "0"
            )
        ):
            reset_at = _int_header(response, "X-RateLimit-Reset") or 0
            raise GitHubRateLimitError(reset_at=reset_at, status_code=status_code)

        if status_code == 403:
            raise GitHubForbiddenError(message or "Access forbidden", details, status_code=403)

        if status_code == 404:
            raise GitHubNotFoundError(
                f"Resource not found: {endpoint}", details, status_code=404
            )

        if status_code == 422:
            if isinstance(body, dict):
                details["errors"] = body.get("errors", [])
            raise GitHubValidationError(
                message or "Validation failed", details, status_code=422
            )

        raise GitHubApiError(
            message or f"GitHub API error: {status_code}",
            details,
            status_code=status_code,
        )

    async def send(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and return the raw response, raising on error statuses."""
        client = await self._get_client()
        endpoint_name = self._extract_endpoint_name(endpoint)

        logger.debug("GitHub API request", method=method, endpoint=endpoint)

        start_time = time.perf_counter()
        status_code = 0
        rate_limit_remaining: int | None = None
        rate_limit_reset: int | None = None

        try:
            try:
                response = await client.request(method, endpoint, **kwargs)
            except httpx.HTTPError as e:
                logger.warning(
                    "GitHub API request failed", method=method, endpoint=endpoint, error=str(e)
                )
                raise GitHubConnectionError(
                    f"Request to {endpoint} failed: {e}", {"method": method}
                ) from e

            status_code = response.status_code

            # Extract rate limit headers
            rate_limit_remaining = _int_header(response, "X-RateLimit-Remaining")
            rate_limit_reset = _int_header(response, "X-RateLimit-Reset")

            self._raise_for_status(response, endpoint)
            return response

        finally:
            # Always record metrics
            duration_seconds = time.perf_counter() - start_time
            record_github_api_call(
                endpoint=endpoint_name,
                method=method,
                status_code=status_code,
                duration_seconds=duration_seconds,
                rate_limit_remaining=rate_limit_remaining,
                rate_limit_reset=rate_limit_reset,
            )

    async def request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make an authenticated request and decode the JSON body."""
        response = await self.send(method, endpoint, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, json: dict[str, Any] | None = None) -> Any:
        return await self.request("POST", endpoint, json=json)

    async def patch(self, endpoint: str, json: dict[str, Any] | None = None) -> Any:
        return await self.request("PATCH", endpoint, json=json)

    async def put(self, endpoint: str, json: dict[str, Any] | None = None) -> Any:
        return await self.request("PUT", endpoint, json=json)

    async def delete(self, endpoint: str) -> None:
        await self.request("DELETE", endpoint)

    async def get_all(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        options: ApiOptions | None = None,
    ) -> AsyncGenerator[Any, None]:
        """
        Fetch a paginated collection, yielding items as each page arrives.

        Follows the ``Link: rel="next"`` header until the last page, or until
        ``options.page_count`` pages have been read. Nothing is requested
        before the first item is awaited.

        Args:
            endpoint: API path of the collection.
            params: Filter query parameters for the first page.
            options: Page size, start page and page cap.

        Yields:
            Decoded JSON items in server order.
        """
        options = options or ApiOptions()
        page_params = dict(params or {})
        page_params["per_page"] = options.page_size or settings.default_page_size
        if options.start_page:
            page_params["page"] = options.start_page

        next_url: str | None = endpoint
        current_params: dict[str, Any] | None = page_params
        pages = 0
        endpoint_name = self._extract_endpoint_name(endpoint)

        while next_url:
            if options.page_count and pages >= options.page_count:
                break

            response = await self.send("GET", next_url, params=current_params)
            pages += 1
            record_github_page(endpoint_name)

            data = response.json() if response.content else []
            if not isinstance(data, list):
                raise GitHubError(
                    "Unexpected response format",
                    details={"endpoint": endpoint, "page": pages},
                    status_code=response.status_code,
                )

            for item in data:
                yield item

            next_url = _parse_next_link(response.headers.get("Link", ""))
            # The next link already carries every query parameter
            current_params = None

        logger.debug("GitHub pagination finished", endpoint=endpoint, pages=pages)


def _parse_next_link(link_header: str) -> str | None:
    """Return the ``rel="next"`` URL of a Link header, if any."""
    if not link_header:
        return None

    # Link header format: <url>; rel="next", <url>; rel="last"
    for part in link_header.split(","):
        match = _NEXT_LINK.match(part.strip())
        if match:
            return match.group(1)

    return None


def _int_header(response: httpx.Response, name: str) -> int | None:
    value = response.headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.debug("Ignoring malformed header", header=name, value=value)
        return None


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def expect_object(data: Any) -> dict[str, Any]:
    """Return ``data`` if it is a JSON object, else raise."""
    if not isinstance(data, dict):
        raise GitHubError("Unexpected response format")
    return data


async def parse_each(
    model: type[ModelT], items: AsyncGenerator[Any, None]
) -> AsyncIterator[ModelT]:
    """Validate each item of a paginated stream into ``model``."""
    async with aclosing(items) as stream:
        async for item in stream:
            yield model.model_validate(item)
