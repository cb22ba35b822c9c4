"""
Upstream data providers (Open-Meteo forecast and air quality, SpotterNetwork).
"""

from .air import get_air_quality, aqi_category
from .openmeteo import get_weather, WEATHER_CODES
from .spotter import spotter_post

__all__ = [
    'get_weather', 'WEATHER_CODES',
    'get_air_quality', 'aqi_category',
    'spotter_post'
]
