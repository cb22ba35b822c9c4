"""
Shared HTTP plumbing for upstream calls.
"""

from typing import Dict, Optional

import httpx


class UpstreamError(ConnectionError):
    """An upstream service answered with a non-success status or was unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


def make_client(
    user_agent: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    headers: Optional[Dict[str, str]] = None
) -> httpx.AsyncClient:
    """
    Build an AsyncClient that follows redirects and identifies itself.

    `transport` is only set by tests (httpx.MockTransport).
    """
    merged = {'User-Agent': user_agent}
    if headers:
        merged.update(headers)
    return httpx.AsyncClient(headers=merged, follow_redirects=True, transport=transport)


def raise_for_upstream(response: httpx.Response, label: str):
    """Raise UpstreamError for any non-2xx response."""
    if not response.is_success:
        raise UpstreamError(
            f"{label} error: {response.status_code}",
            status_code=response.status_code,
            url=str(response.request.url)
        )
