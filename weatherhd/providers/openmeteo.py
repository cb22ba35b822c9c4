"""
Open-Meteo forecast provider.

Reference: https://open-meteo.com/en/docs
"""

from typing import Any, Dict, Optional

import httpx

from ..upstream import UpstreamError, make_client, raise_for_upstream


FORECAST_URL = 'https://api.open-meteo.com/v1/forecast'

# WMO weather interpretation codes
WEATHER_CODES = {
    0: ('Clear sky', '☀️'),
    1: ('Mainly clear', '🌤️'),
    2: ('Partly cloudy', '⛅'),
    3: ('Overcast', '☁️'),
    45: ('Fog', '🌫️'),
    48: ('Depositing rime fog', '🌫️'),
    51: ('Light drizzle', '🌦️'),
    53: ('Moderate drizzle', '🌦️'),
    55: ('Dense drizzle', '🌧️'),
    56: ('Freezing light drizzle', '🌧️'),
    57: ('Freezing dense drizzle', '🌧️'),
    61: ('Slight rain', '🌧️'),
    63: ('Moderate rain', '🌧️'),
    65: ('Heavy rain', '🌧️'),
    66: ('Light freezing rain', '🌧️'),
    67: ('Heavy freezing rain', '🌧️'),
    71: ('Slight snow', '🌨️'),
    73: ('Moderate snow', '🌨️'),
    75: ('Heavy snow', '❄️'),
    77: ('Snow grains', '❄️'),
    80: ('Slight rain showers', '🌦️'),
    81: ('Moderate rain showers', '🌦️'),
    82: ('Violent rain showers', '⛈️'),
    85: ('Slight snow showers', '🌨️'),
    86: ('Heavy snow showers', '❄️'),
    95: ('Thunderstorm', '⛈️'),
    96: ('Thunderstorm with slight hail', '⛈️'),
    99: ('Thunderstorm with heavy hail', '⛈️'),
}

UNKNOWN_CODE = ('Unknown', '❓')


def normalize_units(units: Optional[str]) -> str:
    """'imperial' is an alias of 'us'; anything else passes through lower-cased."""
    units = (units or 'auto').lower()
    return 'us' if units == 'imperial' else units


def units_for(units: str) -> Dict[str, str]:
    if units == 'us':
        return {'temperature': '°F', 'windspeed': 'mph'}
    return {'temperature': '°C', 'windspeed': 'km/h'}


def _first(values: Optional[list]) -> Any:
    return values[0] if values else None


def forecast_params(lat: float, lon: float, units: str) -> Dict[str, str]:
    params = {
        'latitude': str(lat),
        'longitude': str(lon),
        'current_weather': 'true',
        'hourly': 'temperature_2m,apparent_temperature,relativehumidity_2m,precipitation,weathercode',
        'daily': 'temperature_2m_max,temperature_2m_min,sunrise,sunset,precipitation_sum,weathercode',
        'timezone': 'auto',
    }
    if units == 'us':
        params.update({
            'temperature_unit': 'fahrenheit',
            'windspeed_unit': 'mph',
            'precipitation_unit': 'inch',
        })
    return params


def normalize_forecast(payload: Dict[str, Any], lat: float, lon: float, units: str) -> Dict[str, Any]:
    """Reshape an Open-Meteo response for the dashboard."""
    current = payload.get('current_weather') or {}
    daily = payload.get('daily') or {}
    hourly = payload.get('hourly') or {}

    code = current.get('weathercode')
    if code is None:
        code = _first(daily.get('weathercode'))
    if code is None:
        code = 0
    label, icon = WEATHER_CODES.get(code, UNKNOWN_CODE)

    return {
        'provider': 'open-meteo',
        'location': {'lat': lat, 'lon': lon, 'timezone': payload.get('timezone')},
        'current': {
            'temperature': current.get('temperature'),
            'windspeed': current.get('windspeed'),
            'winddirection': current.get('winddirection'),
            'code': code,
            'description': label,
            'icon': icon,
            'time': current.get('time'),
            'units': units_for(units)
        },
        'today': {
            'high': _first(daily.get('temperature_2m_max')),
            'low': _first(daily.get('temperature_2m_min')),
            'sunrise': _first(daily.get('sunrise')),
            'sunset': _first(daily.get('sunset')),
            'precipitation_sum': _first(daily.get('precipitation_sum'))
        },
        'hourly': {
            'time': hourly.get('time', []),
            'temperature': hourly.get('temperature_2m', []),
            'apparent_temperature': hourly.get('apparent_temperature', []),
            'relative_humidity': hourly.get('relativehumidity_2m', []),
            'precipitation': hourly.get('precipitation', []),
            'weathercode': hourly.get('weathercode', [])
        },
        'raw': payload
    }


async def get_weather(
    lat: float,
    lon: float,
    units: str,
    user_agent: str,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> Dict[str, Any]:
    """
    Fetch the forecast for a point.

    Raises:
        UpstreamError: On a non-success response or network failure
    """
    units = normalize_units(units)
    async with make_client(user_agent, transport) as client:
        try:
            response = await client.get(FORECAST_URL, params=forecast_params(lat, lon, units))
        except httpx.HTTPError as e:
            raise UpstreamError(f"Open-Meteo request failed: {e}") from e
        raise_for_upstream(response, 'Open-Meteo')
        return normalize_forecast(response.json(), lat, lon, units)
