"""
Open-Meteo air quality provider.
"""

from typing import Any, Dict, Optional, Tuple

import httpx

from ..upstream import UpstreamError, make_client, raise_for_upstream


AIR_QUALITY_URL = 'https://air-quality-api.open-meteo.com/v1/air-quality'

# US AQI upper bounds
AQI_CATEGORIES = [
    (50, 'Good', '#2ecc71'),
    (100, 'Moderate', '#f1c40f'),
    (150, 'USG', '#e67e22'),  # unhealthy for sensitive groups
    (200, 'Unhealthy', '#e74c3c'),
    (300, 'Very Unhealthy', '#8e44ad'),
]


def aqi_category(aqi: Optional[float]) -> Tuple[str, str]:
    """(label, colour) for a US AQI value."""
    if aqi is None:
        return 'Unknown', '#8a8f98'
    for bound, label, color in AQI_CATEGORIES:
        if aqi <= bound:
            return label, color
    return 'Hazardous', '#7f1d1d'


def _at(values: Optional[list], index: int) -> Any:
    return values[index] if values and len(values) > index else None


def normalize_air_quality(payload: Dict[str, Any], lat: float, lon: float) -> Dict[str, Any]:
    hourly = payload.get('hourly') or {}
    # the first hourly slot is the current hour
    aqi = _at(hourly.get('us_aqi'), 0)
    label, color = aqi_category(aqi)

    return {
        'provider': 'open-meteo-air',
        'location': {'lat': lat, 'lon': lon, 'timezone': payload.get('timezone')},
        'current': {
            'aqi': aqi,
            'category': label,
            'color': color,
            'pm25': _at(hourly.get('pm2_5'), 0),
            'pm10': _at(hourly.get('pm10'), 0),
            'time': _at(hourly.get('time'), 0)
        },
        'hourly': {
            'time': hourly.get('time', []),
            'us_aqi': hourly.get('us_aqi', []),
            'pm2_5': hourly.get('pm2_5', []),
            'pm10': hourly.get('pm10', [])
        },
        'raw': payload
    }


async def get_air_quality(
    lat: float,
    lon: float,
    user_agent: str,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> Dict[str, Any]:
    """Fetch three days of hourly air quality for a point."""
    params = {
        'latitude': str(lat),
        'longitude': str(lon),
        'hourly': 'pm2_5,pm10,us_aqi',
        'timezone': 'auto',
        'forecast_days': '3',
    }
    async with make_client(user_agent, transport) as client:
        try:
            response = await client.get(AIR_QUALITY_URL, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Open-Meteo AQ request failed: {e}") from e
        raise_for_upstream(response, 'Open-Meteo AQ')
        return normalize_air_quality(response.json(), lat, lon)
