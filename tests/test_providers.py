"""
Tests for the Open-Meteo and SpotterNetwork providers
"""

import json

import httpx
import pytest

from weatherhd.upstream import UpstreamError
from weatherhd.providers import aqi_category, get_air_quality, get_weather, spotter_post
from weatherhd.providers.openmeteo import normalize_forecast, normalize_units

from conftest import AIR, FORECAST


def json_transport(payload, status=200, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=payload)
    return httpx.MockTransport(handler)


class TestOpenMeteo:
    """Tests for the forecast provider."""

    def test_normalize_units(self):
        assert normalize_units('imperial') == 'us'
        assert normalize_units('US') == 'us'
        assert normalize_units('metric') == 'metric'
        assert normalize_units(None) == 'auto'

    def test_normalize_forecast(self):
        data = normalize_forecast(FORECAST, 33.75, -84.39, 'us')
        assert data['provider'] == 'open-meteo'
        assert data['current']['description'] == 'Partly cloudy'
        assert data['current']['units'] == {'temperature': '°F', 'windspeed': 'mph'}
        assert data['today']['high'] == 75.0
        assert data['hourly']['relative_humidity'] == [55]
        assert data['location']['timezone'] == 'America/New_York'

    def test_code_falls_back_to_daily(self):
        payload = dict(FORECAST, current_weather={})
        data = normalize_forecast(payload, 0, 0, 'metric')
        assert data['current']['code'] == 3
        assert data['current']['units']['temperature'] == '°C'

    def test_unknown_code(self):
        payload = dict(FORECAST, current_weather={'weathercode': 42})
        assert normalize_forecast(payload, 0, 0, 'us')['current']['description'] == 'Unknown'

    @pytest.mark.asyncio
    async def test_get_weather_us_params(self):
        seen = []
        data = await get_weather(33.75, -84.39, 'imperial', 'test-agent', json_transport(FORECAST, seen=seen))

        params = seen[0].url.params
        assert params['temperature_unit'] == 'fahrenheit'
        assert params['windspeed_unit'] == 'mph'
        assert params['latitude'] == '33.75'
        assert seen[0].headers['User-Agent'] == 'test-agent'
        assert data['current']['temperature'] == 71.2

    @pytest.mark.asyncio
    async def test_get_weather_error(self):
        with pytest.raises(UpstreamError) as exc_info:
            await get_weather(0, 0, 'us', 'test-agent', json_transport({}, status=502))
        assert exc_info.value.status_code == 502


class TestAirQuality:
    """Tests for the air quality provider."""

    def test_aqi_categories(self):
        assert aqi_category(None) == ('Unknown', '#8a8f98')
        assert aqi_category(50)[0] == 'Good'
        assert aqi_category(51)[0] == 'Moderate'
        assert aqi_category(150)[0] == 'USG'
        assert aqi_category(300)[0] == 'Very Unhealthy'
        assert aqi_category(301) == ('Hazardous', '#7f1d1d')

    @pytest.mark.asyncio
    async def test_get_air_quality(self):
        data = await get_air_quality(33.75, -84.39, 'test-agent', json_transport(AIR))
        assert data['current'] == {
            'aqi': 42, 'category': 'Good', 'color': '#2ecc71',
            'pm25': 8.1, 'pm10': 12.0, 'time': '2026-10-19T12:00'
        }
        assert data['hourly']['us_aqi'] == [42, 55]

    @pytest.mark.asyncio
    async def test_missing_hourly(self):
        data = await get_air_quality(0, 0, 'test-agent', json_transport({}))
        assert data['current']['aqi'] is None
        assert data['current']['category'] == 'Unknown'


class TestSpotter:
    """Tests for the SpotterNetwork proxy."""

    @pytest.mark.asyncio
    async def test_json_body_relayed(self):
        seen = []
        status, data = await spotter_post(
            '/positions', {'id': 'abc', 'markers': [1, 2]}, 'test-agent',
            json_transport({'positions': []}, seen=seen)
        )
        assert status == 200
        assert data == {'positions': []}
        assert str(seen[0].url) == 'https://www.spotternetwork.org/positions'
        assert json.loads(seen[0].content) == {'id': 'abc', 'markers': [1, 2]}

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(403, text='Forbidden'))
        status, data = await spotter_post('/positions', {'id': 'abc'}, 'test-agent', transport)
        assert status == 403
        assert data == {'raw': 'Forbidden'}
