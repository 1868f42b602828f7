"""Unit tests for the weather cache lookup and refresh path."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from conftest import make_current_payload, make_forecast_payload
from src.server.weather_server.service import WeatherService, normalize_city
from src.tools.api_tools.weather_api.weather_api import OpenWeatherClient, UpstreamError


def make_stub_client(current=None, forecast=None) -> AsyncMock:
    client = AsyncMock(spec=OpenWeatherClient)
    client.get_current_weather.return_value = current or make_current_payload()
    client.get_weather_forecast.return_value = forecast or make_forecast_payload()
    return client


def count_rows(db, table: str) -> int:
    conn = db.get_connection()
    try:
        return conn.execute(f'SELECT COUNT(*) FROM {table}').fetchone()[0]
    finally:
        conn.close()


def test_normalize_city():
    assert normalize_city('Towson') == ('Towson,US', 'Towson')
    assert normalize_city(' Towson , MD') == ('Towson,US', 'Towson')


class TestWeatherService:
    """Tests for WeatherService.get_forecast."""

    @pytest.mark.asyncio
    async def test_miss_fetches_and_persists(self, weather_db):
        """A miss calls both upstream endpoints once and stores the snapshot."""
        client = make_stub_client()
        service = WeatherService(weather_db, client)

        lookup = await service.get_forecast('Towson, MD')

        client.get_current_weather.assert_awaited_once_with('Towson,US')
        client.get_weather_forecast.assert_awaited_once_with('Towson,US')
        assert lookup.from_cache is False
        assert lookup.bundle['current']['city'] == 'Towson'
        assert lookup.bundle['current']['temp'] == 72
        assert count_rows(weather_db, 'cached_locations') == 1
        assert count_rows(weather_db, 'cached_weather') == 1

    @pytest.mark.asyncio
    async def test_hit_does_not_contact_upstream(self, weather_db):
        """An unexpired snapshot is served without any upstream call."""
        await WeatherService(weather_db, make_stub_client()).get_forecast('Towson')

        client = make_stub_client()
        service = WeatherService(weather_db, client)
        lookup = await service.get_forecast('towson')

        client.get_current_weather.assert_not_called()
        client.get_weather_forecast.assert_not_called()
        assert lookup.from_cache is True
        assert lookup.bundle['current'] == {
            'city': 'towson',
            'temp': 72,
            'high': 76,
            'low': 68,
            'wind': 8,
            'humidity': 40,
            'condition': 'Clear',
            'icon': 'clear.png',
        }
        assert len(lookup.bundle['hourly']) == 6
        assert [d['day'] for d in lookup.bundle['daily']] == ['Monday', 'Tuesday']

    @pytest.mark.asyncio
    async def test_expired_snapshot_refreshes(self, weather_db):
        """With a zero TTL every request goes upstream and adds a snapshot."""
        await WeatherService(weather_db, make_stub_client(), ttl=timedelta(0)).get_forecast('Towson')

        client = make_stub_client()
        lookup = await WeatherService(weather_db, client, ttl=timedelta(0)).get_forecast('Towson')

        assert lookup.from_cache is False
        assert client.get_current_weather.await_count == 1
        assert count_rows(weather_db, 'cached_locations') == 1
        assert count_rows(weather_db, 'cached_weather') == 2

    @pytest.mark.asyncio
    async def test_blank_city_uses_default(self, weather_db):
        client = make_stub_client()
        service = WeatherService(weather_db, client, default_city='Baltimore')

        await service.get_forecast('  ')

        client.get_current_weather.assert_awaited_once_with('Baltimore,US')

    @pytest.mark.asyncio
    async def test_upstream_failure_persists_nothing(self, weather_db):
        """If either upstream call fails the whole lookup fails."""
        client = make_stub_client()
        client.get_weather_forecast.side_effect = UpstreamError(
            'API request failed', provider_message='city not found', status_code=404
        )
        service = WeatherService(weather_db, client)

        with pytest.raises(UpstreamError) as exc_info:
            await service.get_forecast('Nowhere')

        assert exc_info.value.provider_message == 'city not found'
        assert count_rows(weather_db, 'cached_weather') == 0

    @pytest.mark.asyncio
    async def test_malformed_payload_is_upstream_error(self, weather_db):
        client = make_stub_client(current={'name': 'Towson'})
        service = WeatherService(weather_db, client)

        with pytest.raises(UpstreamError, match='Unexpected provider payload'):
            await service.get_forecast('Towson')
