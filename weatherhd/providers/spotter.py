"""
SpotterNetwork proxy.

Positions are fetched by POSTing JSON to the SpotterNetwork API; the
upstream status and body are handed back to the caller unchanged.
"""

from typing import Any, Dict, Optional, Tuple

import httpx

from ..upstream import UpstreamError, make_client


SPOTTER_BASE = 'https://www.spotternetwork.org'


async def spotter_post(
    endpoint: str,
    body: Optional[Dict[str, Any]],
    user_agent: str,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> Tuple[int, Any]:
    """
    POST `body` to a SpotterNetwork endpoint.

    Returns:
        (status_code, data) where data is the decoded JSON body, or
        {'raw': text} when the body is not JSON
    """
    async with make_client(user_agent, transport) as client:
        try:
            response = await client.post(f"{SPOTTER_BASE}{endpoint}", json=body or {})
        except httpx.HTTPError as e:
            raise UpstreamError(f"SpotterNetwork request failed: {e}") from e

    try:
        data = response.json()
    except ValueError:
        data = {'raw': response.text}
    return response.status_code, data
