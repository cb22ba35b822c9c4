"""
Shared fixtures: Atom feed builders, a controllable clock, mock transports.
"""

import os
import sys

import httpx
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


FEED_HEAD = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<feed xmlns="http://www.w3.org/2005/Atom" '
    'xmlns:cap="urn:oasis:names:tc:emergency:cap:1.2">\n'
    '<id>https://api.weather.gov/alerts/active.atom</id>\n'
    '<title>Current watches, warnings, and advisories</title>\n'
)
FEED_TAIL = '</feed>\n'


def build_entry(
    id='urn:oid:2.49.0.1.840.0.test.001.1',
    title='Tornado Warning',
    summary='A tornado warning is in effect.',
    event='Tornado Warning',
    severity='Extreme',
    area_desc=None,
    ugc=None,
    fips6=None,
    polygon=None,
    updated='2026-10-19T12:00:00-04:00'
):
    """Render one NWS style Atom entry; pass None to leave a field out."""
    parts = ['<entry>']
    if id is not None:
        parts.append(f'<id>{id}</id>')
    if updated is not None:
        parts.append(f'<updated>{updated}</updated>')
    if title is not None:
        parts.append(f'<title>{title}</title>')
    if id is not None:
        parts.append(f'<link rel="alternate" href="https://api.weather.gov/alerts/{id}"/>')
    if summary is not None:
        parts.append(f'<summary>{summary}</summary>')
    if event is not None:
        parts.append(f'<cap:event>{event}</cap:event>')
    parts.append('<cap:effective>2026-10-19T12:00:00-04:00</cap:effective>')
    parts.append('<cap:expires>2026-10-19T12:45:00-04:00</cap:expires>')
    if severity is not None:
        parts.append(f'<cap:severity>{severity}</cap:severity>')
    if area_desc is not None:
        parts.append(f'<cap:areaDesc>{area_desc}</cap:areaDesc>')
    if polygon is not None:
        parts.append(f'<cap:polygon>{polygon}</cap:polygon>')
    if ugc or fips6:
        parts.append('<cap:geocode>')
        if fips6:
            parts.append(f'<valueName>FIPS6</valueName><value>{" ".join(fips6)}</value>')
        if ugc:
            parts.append(f'<valueName>UGC</valueName><value>{" ".join(ugc)}</value>')
        parts.append('</cap:geocode>')
    parts.append('</entry>')
    return '\n'.join(parts)


def build_feed(*entries):
    return FEED_HEAD + '\n'.join(entries) + FEED_TAIL


# box around downtown Atlanta
ATLANTA_POLYGON = '33.70,-84.45 33.80,-84.45 33.80,-84.30 33.70,-84.30 33.70,-84.45'


class FakeClock:
    """Monotonic clock stand-in that only moves when told to."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def feed_transport():
    """
    MockTransport serving canned bodies per URL.

    Returns (transport, routes, calls): fill `routes` with
    url -> body, status code or callable(request) returning a Response;
    `calls` records every request.
    """
    routes = {}
    calls = []

    def handler(request):
        calls.append(request)
        reply = routes.get(str(request.url))
        if reply is None:
            return httpx.Response(404, text='not found')
        if isinstance(reply, int):
            return httpx.Response(reply, text='upstream error')
        if callable(reply):
            return reply(request)
        return httpx.Response(200, text=reply, headers={'Content-Type': 'application/atom+xml'})

    return httpx.MockTransport(handler), routes, calls


FORECAST = {
    'timezone': 'America/New_York',
    'current_weather': {'temperature': 71.2, 'windspeed': 5.1, 'winddirection': 220, 'weathercode': 2,
                        'time': '2026-10-19T12:00'},
    'daily': {'temperature_2m_max': [75.0], 'temperature_2m_min': [58.1], 'sunrise': ['2026-10-19T07:45'],
              'sunset': ['2026-10-19T19:03'], 'precipitation_sum': [0.0], 'weathercode': [3]},
    'hourly': {'time': ['2026-10-19T12:00'], 'temperature_2m': [71.2], 'apparent_temperature': [70.0],
               'relativehumidity_2m': [55], 'precipitation': [0.0], 'weathercode': [2]},
}

AIR = {
    'timezone': 'America/New_York',
    'hourly': {'time': ['2026-10-19T12:00', '2026-10-19T13:00'], 'us_aqi': [42, 55],
               'pm2_5': [8.1, 9.0], 'pm10': [12.0, 13.5]},
}
