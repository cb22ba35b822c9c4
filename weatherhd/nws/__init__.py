"""
NWS Alert Feed Client

Fetches, parses and geofilters active alerts from NWS Atom feeds.
"""

from .atom import AlertEntry, parse_atom
from .alerts import AlertService, aggregate_alerts, matches_state
from .feed import ALERT_ATOM_URLS, AtomFeedClient, FeedError
from .geocode import decode_geocodes

__all__ = [
    'AlertEntry', 'parse_atom', 'decode_geocodes',
    'AtomFeedClient', 'FeedError', 'ALERT_ATOM_URLS',
    'AlertService', 'aggregate_alerts', 'matches_state'
]
