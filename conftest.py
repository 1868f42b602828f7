"""Shared fixtures: temporary cache database and provider payloads."""

import os
import tempfile

import pytest

from src.tools.data_tools.weather_db.weather_db import WeatherDb

# 2024-01-01 00:00:00 UTC, a Monday
MONDAY_MIDNIGHT = 1704067200
THREE_HOURS = 3 * 60 * 60


def make_current_payload(
    city_id: int = 4371582,
    name: str = 'Towson',
    temp: float = 72.4,
    icon: str = '01d',
    main: str = 'Clear',
) -> dict:
    return {
        'id': city_id,
        'name': name,
        'coord': {'lat': 39.4015, 'lon': -76.6019},
        'sys': {'country': 'US'},
        'main': {
            'temp': temp,
            'temp_max': 75.5,
            'temp_min': 68.2,
            'humidity': 40,
        },
        'wind': {'speed': 7.6},
        'weather': [{'main': main, 'description': 'clear sky', 'icon': icon}],
    }


def make_forecast_entry(dt: int, temp_max: float, temp_min: float, main: str = 'Clouds',
                        icon: str = '03d', temp: float | None = None) -> dict:
    return {
        'dt': dt,
        'main': {
            'temp': temp if temp is not None else (temp_max + temp_min) / 2,
            'temp_max': temp_max,
            'temp_min': temp_min,
            'humidity': 50,
        },
        'weather': [{'main': main, 'icon': icon}],
    }


def make_forecast_payload(entries: list[dict] | None = None, utc_offset: int = 0) -> dict:
    if entries is None:
        entries = [
            make_forecast_entry(MONDAY_MIDNIGHT + i * THREE_HOURS, 60 + i, 50 + i)
            for i in range(16)
        ]
    return {
        'city': {'name': 'Towson', 'country': 'US', 'timezone': utc_offset},
        'list': entries,
    }


@pytest.fixture
def temp_db_dir():
    """Create a temporary directory for test database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        os.environ['WEATHER_DB_DIR'] = tmpdir
        yield tmpdir
        # Cleanup
        if 'WEATHER_DB_DIR' in os.environ:
            del os.environ['WEATHER_DB_DIR']


@pytest.fixture
def weather_db(temp_db_dir):
    """Initialized cache database in the temporary directory."""
    db = WeatherDb()
    db.init_db()
    return db


@pytest.fixture
def current_payload():
    return make_current_payload()


@pytest.fixture
def forecast_payload():
    return make_forecast_payload()
