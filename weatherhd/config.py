"""
Application configuration.

Values come from the environment (a local .env file is loaded first).
"""

import logging
import os
from typing import Any, List, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


load_dotenv()


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, os.environ.get(name))
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """
    Central settings for the dashboard backend.

    Environment Variables:
        HOST, PORT: development server bind address (default 127.0.0.1:3000)
        DEBUG: run Flask in debug mode
        LOG_LEVEL: root logging level (default INFO)
        USER_AGENT: sent with every upstream request (NWS requires one)
        DEFAULT_LAT, DEFAULT_LON: coordinates used when a request omits them
        DEFAULT_STATE: alert state filter when none is given (default GA)
        DEFAULT_UNITS: forecast units when none are given (default us)
        WEATHER_TTL, AIR_TTL, ALERTS_TTL: cache lifetimes in seconds
        SPOTTER_ID: SpotterNetwork application id
        CORS_ORIGINS: comma separated list, '*' for any
    """

    HOST: str = os.environ.get('HOST', '127.0.0.1')
    PORT: int = int(_env_float('PORT', 3000))
    DEBUG: bool = _env_bool('DEBUG')
    LOG_LEVEL: str = os.environ.get('LOG_LEVEL', 'INFO').upper()

    USER_AGENT: str = os.environ.get(
        'USER_AGENT', 'WeatherHD/0.2 (contact: you@example.com)'
    )

    # Atlanta, GA
    DEFAULT_LAT: float = _env_float('DEFAULT_LAT', 33.7490)
    DEFAULT_LON: float = _env_float('DEFAULT_LON', -84.3880)
    DEFAULT_STATE: str = os.environ.get('DEFAULT_STATE', 'GA').upper()
    DEFAULT_UNITS: str = os.environ.get('DEFAULT_UNITS', 'us').lower()

    WEATHER_TTL: float = _env_float('WEATHER_TTL', 60)
    AIR_TTL: float = _env_float('AIR_TTL', 10 * 60)
    ALERTS_TTL: float = _env_float('ALERTS_TTL', 2 * 60)

    SPOTTER_ID: str = os.environ.get('SPOTTER_ID', '55f78b6ed31f5')

    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.environ.get('CORS_ORIGINS', '*').split(',')
        if origin.strip()
    ]

    @classmethod
    def as_dict(cls) -> dict:
        """Upper-case attributes, in the shape Flask's app.config expects."""
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if key.isupper()
        }

    @classmethod
    def validate(cls, values: Optional[Mapping[str, Any]] = None):
        """
        Validate configuration values.

        Args:
            values: Settings to check, e.g. a Flask app.config with
                overrides applied (defaults to the class attributes)

        Raises:
            ValueError: If a cache lifetime is not positive
        """
        values = cls.as_dict() if values is None else values

        for name in ('WEATHER_TTL', 'AIR_TTL', 'ALERTS_TTL'):
            if values[name] <= 0:
                raise ValueError(f"{name} must be positive")

        if 'example.com' in values['USER_AGENT']:
            logger.warning("USER_AGENT still uses the placeholder contact address")

        state = values['DEFAULT_STATE']
        if len(state) != 2 and state != 'ALL':
            logger.warning("DEFAULT_STATE %r is not a 2-letter code", state)

        logger.info("Configuration validated successfully")
