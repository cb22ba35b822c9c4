#!/usr/bin/env python3
"""
Run the WeatherHD development server.
"""

import sys
import os

# add the project root to path
sys.path.insert(0, os.path.dirname(__file__))

from weatherhd.config import Config
from weatherhd.web import create_app

if __name__ == '__main__':
    app = create_app()
    app.run(debug=Config.DEBUG, host=Config.HOST, port=Config.PORT)
