"""
Prometheus metrics for ghpulls.

Only the GitHub API calls issued by the Connection are instrumented.
"""

import time

from prometheus_client import Counter, Gauge, Histogram

# =============================================================================
# GitHub API Metrics
# =============================================================================

GITHUB_API_REQUESTS_TOTAL = Counter(
    "ghpulls_github_api_requests_total",
    "Total number of GitHub API requests",
    ["endpoint", "method", "status_code"],
)

GITHUB_API_DURATION_SECONDS = Histogram(
    "ghpulls_github_api_duration_seconds",
    "GitHub API request duration in seconds",
    ["endpoint", "method"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

GITHUB_API_PAGES_TOTAL = Counter(
    "ghpulls_github_api_pages_total",
    "Total number of result pages fetched by paginated requests",
    ["endpoint"],
)

GITHUB_RATE_LIMIT_REMAINING = Gauge(
    "ghpulls_github_rate_limit_remaining",
    "Remaining GitHub API rate limit",
)

GITHUB_RATE_LIMIT_RESET_SECONDS = Gauge(
    "ghpulls_github_rate_limit_reset_seconds",
    "Seconds until GitHub rate limit resets",
)


# =============================================================================
# Helper Functions
# =============================================================================


def record_github_api_call(
    endpoint: str,
    method: str,
    status_code: int,
    duration_seconds: float,
    rate_limit_remaining: int | None = None,
    rate_limit_reset: int | None = None,
) -> None:
    """
    Record metrics for a GitHub API call.

    Args:
        endpoint: API endpoint (e.g., "pulls", "pulls_files")
        method: HTTP method
        status_code: Response status code (0 when no response arrived)
        duration_seconds: Request duration
        rate_limit_remaining: Remaining rate limit (if available)
        rate_limit_reset: Rate limit reset timestamp (if available)
    """
    GITHUB_API_REQUESTS_TOTAL.labels(
        endpoint=endpoint,
        method=method,
        status_code=str(status_code),
    ).inc()

    GITHUB_API_DURATION_SECONDS.labels(
        endpoint=endpoint,
        method=method,
    ).observe(duration_seconds)

    if rate_limit_remaining is not None:
        GITHUB_RATE_LIMIT_REMAINING.set(rate_limit_remaining)

    if rate_limit_reset is not None:
        reset_in_seconds = max(0, rate_limit_reset - int(time.time()))
        GITHUB_RATE_LIMIT_RESET_SECONDS.set(reset_in_seconds)


def record_github_page(endpoint: str) -> None:
    """Count one page of a paginated GitHub response."""
    GITHUB_API_PAGES_TOTAL.labels(endpoint=endpoint).inc()
