"""
Flask routes for WeatherHD
"""

import logging
import math
from typing import Tuple

from flask import Blueprint, current_app, jsonify, request

from ..cache import fetch_through
from ..nws import AlertService, AtomFeedClient
from ..providers import get_air_quality, get_weather, spotter_post
from ..providers.openmeteo import normalize_units

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)


def _cache():
    return current_app.extensions['weatherhd_cache']


def _transport():
    return current_app.extensions['weatherhd_transport']


def _error(message: str, status: int):
    return jsonify({'success': False, 'error': message}), status


def resolve_coords() -> Tuple[float, float]:
    """lat/lon query params, falling back to the configured default point."""
    coords = []
    for name, default in (('lat', current_app.config['DEFAULT_LAT']),
                          ('lon', current_app.config['DEFAULT_LON'])):
        try:
            value = float(request.args.get(name, ''))
        except ValueError:
            value = default
        coords.append(value if math.isfinite(value) else default)
    return coords[0], coords[1]


def _flag(name: str) -> bool:
    return request.args.get(name, '').strip().lower() in ('1', 'true')


def _parse_markers(raw: str):
    markers = []
    for part in raw.split(','):
        try:
            markers.append(int(part))
        except ValueError:
            continue
    return markers


@api_bp.route('/weather', methods=['GET'])
async def weather():
    """
    Current conditions and forecast.

    Query params:
        lat, lon: float - point (defaults to the configured location)
        units: str - us/imperial, metric or auto
    """
    lat, lon = resolve_coords()
    units = normalize_units(request.args.get('units') or current_app.config['DEFAULT_UNITS'])
    config = current_app.config
    transport = _transport()

    async def fetch():
        return await get_weather(lat, lon, units, config['USER_AGENT'], transport)

    try:
        data = await fetch_through(_cache(), f"weather:{lat:.2f},{lon:.2f}:{units}", config['WEATHER_TTL'], fetch)
    except ConnectionError:
        logger.exception("Weather API error")
        return _error('Failed to retrieve weather data', 500)

    return jsonify(data)


@api_bp.route('/air', methods=['GET'])
async def air_quality():
    """Air quality index and particulates for a point."""
    lat, lon = resolve_coords()
    config = current_app.config
    transport = _transport()

    async def fetch():
        return await get_air_quality(lat, lon, config['USER_AGENT'], transport)

    try:
        data = await fetch_through(_cache(), f"air:{lat:.2f},{lon:.2f}", config['AIR_TTL'], fetch)
    except ConnectionError:
        logger.exception("Air API error")
        return _error('Failed to retrieve air quality', 500)

    return jsonify(data)


@api_bp.route('/alerts', methods=['GET'])
async def alerts():
    """
    Active warnings for a state, narrowed to a point when polygons allow.

    Query params:
        state: str - 2-letter state code or ALL
        lat, lon: float - point for the polygon filter
        nocache: 1/true - refetch even when a cached result exists

    Returns:
        {state, point, count, items, fetchedAt, debug}
    """
    config = current_app.config
    state = (request.args.get('state') or config['DEFAULT_STATE']).strip().upper()
    lat, lon = resolve_coords()

    service = AlertService(
        AtomFeedClient(config['USER_AGENT'], _transport()),
        _cache(),
        config['ALERT_ATOM_URLS'],
        config['ALERTS_TTL']
    )

    try:
        data = await service.get_alerts(state, lat, lon, nocache=_flag('nocache'))
    except ConnectionError:
        logger.exception("Alerts API error")
        return _error('Failed to retrieve alerts', 500)

    return jsonify(data)


async def _relay_spotter(endpoint: str, payload: dict):
    try:
        status, data = await spotter_post(endpoint, payload, current_app.config['USER_AGENT'], _transport())
    except ConnectionError:
        logger.exception("Spotter API error")
        return _error('Failed to reach SpotterNetwork', 500)
    return jsonify(data), status


@api_bp.route('/spotter/positions', methods=['GET'])
async def spotter_positions():
    """
    Spotter positions.

    Query params:
        id: str - SpotterNetwork application id (defaults to SPOTTER_ID)
        markers: str - comma separated marker ids
    """
    spotter_id = (request.args.get('id') or current_app.config['SPOTTER_ID']).strip()
    if not spotter_id:
        return _error('Missing id', 400)

    payload = {'id': spotter_id}
    markers = _parse_markers(request.args.get('markers', ''))
    if markers:
        payload['markers'] = markers

    return await _relay_spotter('/positions', payload)


@api_bp.route('/spotter/positions', methods=['POST'])
async def spotter_positions_post():
    """Spotter positions from a JSON body {id, markers}."""
    body = request.get_json(silent=True) or {}
    spotter_id = body.get('id') or current_app.config['SPOTTER_ID']
    if not spotter_id:
        return _error('Missing id', 400)

    payload = {'id': spotter_id}
    markers = body.get('markers')
    if isinstance(markers, list) and markers:
        payload['markers'] = markers

    return await _relay_spotter('/positions', payload)


@api_bp.route('/spotter/positions/update', methods=['POST'])
async def spotter_update():
    """Report a spotter position."""
    body = request.get_json(silent=True) or {}
    if not body.get('id'):
        return _error('Missing id', 400)

    fields = ('id', 'report_at', 'lat', 'lon', 'elev', 'mph', 'dir', 'active', 'gps')
    payload = {name: body.get(name) for name in fields}
    return await _relay_spotter('/positions/update', payload)


@api_bp.route('/status', methods=['GET'])
def status():
    """Cache size and configured alert feeds."""
    return jsonify({
        'success': True,
        'cache_entries': len(_cache()),
        'feeds': current_app.config['ALERT_ATOM_URLS']
    })
