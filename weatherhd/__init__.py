"""
WeatherHD dashboard backend

Proxies Open-Meteo, NWS alert feeds and SpotterNetwork behind a small
Flask JSON API with an in-memory TTL cache.
"""

__version__ = '0.2.0'
