"""
NWS Atom feed client

Fetches the event-specific active-alert Atom feeds from api.weather.gov.
Reference: https://www.weather.gov/documentation/services-web-api
"""

import asyncio
import logging
from typing import List, Optional, Sequence

import httpx

from ..upstream import UpstreamError, make_client

logger = logging.getLogger(__name__)


# one feed per warning type, queried together
ALERT_ATOM_URLS = [
    'https://api.weather.gov/alerts/active.atom?event=Tornado+Warning',
    'https://api.weather.gov/alerts/active.atom?event=Severe+Thunderstorm+Warning',
    'https://api.weather.gov/alerts/active.atom?event=Flash+Flood+Warning',
]

ATOM_ACCEPT = 'application/atom+xml'


class FeedError(UpstreamError):
    """An alert feed could not be fetched."""


class AtomFeedClient:
    """
    Client for fetching NWS Atom feeds.

    All feeds of a batch are requested concurrently and the batch fails as
    a whole: a single bad response raises FeedError and no partial list is
    returned.
    """

    def __init__(self, user_agent: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.user_agent = user_agent
        self.transport = transport

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> str:
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise FeedError(f"Failed to fetch {url}: {e}", url=url) from e

        if not response.is_success:
            raise FeedError(
                f"NWS alerts error: {response.status_code}",
                status_code=response.status_code,
                url=url
            )
        return response.text

    async def fetch_all(self, urls: Sequence[str]) -> List[str]:
        """
        Fetch every feed and return the bodies in the order of `urls`.

        The first failure cancels the feeds still in flight.

        Raises:
            FeedError: If any feed fails
        """
        if not urls:
            return []

        headers = {'Accept': ATOM_ACCEPT}
        async with make_client(self.user_agent, self.transport, headers) as client:
            tasks = [asyncio.ensure_future(self._fetch(client, url)) for url in urls]
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        for task in tasks:
            if task in done and task.exception() is not None:
                raise task.exception()

        logger.debug("fetched %d alert feeds", len(tasks))
        return [task.result() for task in tasks]
