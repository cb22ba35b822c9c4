"""
Alert aggregation and geofiltering.

Turns the raw Atom documents of several feeds into one bounded list of
alerts relevant to a state and a point.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from ..cache import TTLCache, fetch_through
from ..geo import point_in_polygon
from .atom import AlertEntry, parse_atom
from .feed import AtomFeedClient

logger = logging.getLogger(__name__)


MAX_ALERTS = 50

ALL_STATES = 'ALL'

# full names checked in alert text, the home state and its neighbours
STATE_NAMES = {
    'GA': 'GEORGIA',
    'AL': 'ALABAMA',
    'FL': 'FLORIDA',
    'SC': 'SOUTH CAROLINA',
    'NC': 'NORTH CAROLINA',
}


def dedupe(entries: Iterable[AlertEntry]) -> List[AlertEntry]:
    """Keep the first entry for every id; entries without an id are dropped."""
    seen = set()
    result = []
    for entry in entries:
        if not entry.id or entry.id in seen:
            continue
        seen.add(entry.id)
        result.append(entry)
    return result


def matches_state(entry: AlertEntry, state: str) -> bool:
    """
    Heuristic test whether an alert concerns `state`.

    Matches a UGC code prefix, the code as a delimited token in the area
    description, summary or title, or the state's full name.
    """
    if any(code.startswith(state) for code in entry.ugc):
        return True

    text = f"{entry.area_desc or ''} {entry.summary or ''} {entry.title or ''}".upper()
    tokens = (f' {state}', f'({state})', f'{state}-', f'{state},')
    if any(token in text for token in tokens):
        return True

    full_name = STATE_NAMES.get(state)
    return bool(full_name and full_name in text)


def _timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def aggregate_alerts(
    documents: Sequence[str],
    state: str,
    lat: float,
    lon: float,
    feeds: Optional[int] = None,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Merge, dedupe, filter and cap the alerts found in `documents`.

    Args:
        documents: Raw Atom feed bodies
        state: 2-letter state code, or 'ALL' to skip the state filter
        lat, lon: Point used for the polygon filter
        feeds: Number of feeds requested (defaults to len(documents))
        now: Timestamp for fetchedAt

    Returns:
        Alert result dict ready for JSON serialization
    """
    merged: List[AlertEntry] = []
    for xml in documents:
        merged.extend(parse_atom(xml))

    unique = dedupe(merged)
    items = unique
    after_state = len(items)

    if state and state != ALL_STATES:
        items = [entry for entry in unique if matches_state(entry, state)]
        after_state = len(items)
        # never let the heuristic empty the list
        if not items:
            logger.info("state filter %s matched none of %d alerts, keeping all", state, len(unique))
            items = unique

    poly_hits = [entry for entry in items if entry.polygon and point_in_polygon(lat, lon, entry.polygon)]
    after_poly = len(poly_hits)
    if poly_hits:
        items = poly_hits

    items = items[:MAX_ALERTS]

    logger.debug(
        "alerts %s: fetched=%d deduped=%d after_state=%d after_poly=%d returned=%d",
        state, len(merged), len(unique), after_state, after_poly, len(items)
    )

    return {
        'state': state,
        'point': {'lat': lat, 'lon': lon},
        'count': len(items),
        'items': [entry.to_dict() for entry in items],
        'fetchedAt': _timestamp(now),
        'debug': {
            'fetched': len(merged),
            'deduped': len(unique),
            'afterState': after_state,
            'afterPoly': after_poly,
            'feeds': len(documents) if feeds is None else feeds
        }
    }


def alerts_cache_key(state: str, lat: float, lon: float, urls: Sequence[str]) -> str:
    return f"alerts:{state}:{lat:.2f},{lon:.2f}:{'|'.join(urls)}"


class AlertService:
    """
    Cached alert lookups.

    Fetches all configured feeds, aggregates them for the requested state
    and point, and keeps the result in the shared response cache.
    """

    def __init__(
        self,
        feed_client: AtomFeedClient,
        cache: TTLCache,
        urls: Sequence[str],
        ttl: float,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        self.feed_client = feed_client
        self.cache = cache
        self.urls = list(urls)
        self.ttl = ttl
        self._clock = clock

    async def get_alerts(self, state: str, lat: float, lon: float, nocache: bool = False) -> Dict[str, Any]:
        """
        Alerts for `state` around (lat, lon).

        Raises:
            FeedError: If any feed fails to load
        """
        async def fetch():
            documents = await self.feed_client.fetch_all(self.urls)
            return aggregate_alerts(documents, state, lat, lon, feeds=len(self.urls), now=self._clock())

        key = alerts_cache_key(state, lat, lon, self.urls)
        return await fetch_through(self.cache, key, self.ttl, fetch, bypass=nocache)
