"""
WeatherHD Flask application
"""

import logging
from typing import Any, Dict, Optional

import httpx
from flask import Flask
from flask_cors import CORS

from ..cache import TTLCache
from ..config import Config
from ..nws import ALERT_ATOM_URLS


def create_app(
    config: Optional[Dict[str, Any]] = None,
    cache: Optional[TTLCache] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
):
    """
    Build the application.

    Args:
        config: Overrides applied on top of Config
        cache: Response cache; a fresh TTLCache when omitted
        transport: httpx transport for every upstream call (tests only)
    """
    app = Flask(__name__)
    app.config.update(Config.as_dict())
    app.config.setdefault('ALERT_ATOM_URLS', list(ALERT_ATOM_URLS))
    if config:
        app.config.update(config)

    Config.validate(app.config)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    app.extensions['weatherhd_cache'] = cache if cache is not None else TTLCache()
    app.extensions['weatherhd_transport'] = transport

    CORS(app, origins=app.config['CORS_ORIGINS'])

    # register blueprints
    from .routes import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    return app
