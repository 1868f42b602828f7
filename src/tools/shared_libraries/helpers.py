"""Shared helper functions for weather tools."""

import json
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_ICON = 'cloudy.png'

# OpenWeatherMap icon code -> local icon file
WEATHER_ICONS = {
    '01d': 'clear.png', '01n': 'clear.png',
    '02d': 'partly-cloudy.png', '02n': 'partly-cloudy.png',
    '03d': 'cloudy.png', '03n': 'cloudy.png',
    '04d': 'cloudy.png', '04n': 'cloudy.png',
    '09d': 'rain.png', '09n': 'rain.png',
    '10d': 'rain.png', '10n': 'rain.png',
    '11d': 'thunderstorm.png', '11n': 'thunderstorm.png',
    '13d': 'snow.png', '13n': 'snow.png',
    '50d': 'mist.png', '50n': 'mist.png',
}

# OpenWeatherMap condition group ("main") -> local icon file
CONDITION_ICONS = {
    'clear': 'clear.png',
    'clouds': 'cloudy.png',
    'rain': 'rain.png',
    'drizzle': 'rain.png',
    'thunderstorm': 'thunderstorm.png',
    'snow': 'snow.png',
    'mist': 'mist.png',
    'fog': 'mist.png',
    'haze': 'mist.png',
    'smoke': 'mist.png',
    'dust': 'mist.png',
    'sand': 'mist.png',
    'ash': 'mist.png',
    'squall': 'mist.png',
    'tornado': 'mist.png',
}


def icon_for_code(code: str | None) -> str:
    """Map a provider icon code (e.g. "01d") to a local icon file."""
    return WEATHER_ICONS.get(code or '', DEFAULT_ICON)


def icon_for_condition(condition: str | None) -> str:
    """Map a stored condition string (e.g. "Rain") to a local icon file."""
    return CONDITION_ICONS.get((condition or '').strip().lower(), DEFAULT_ICON)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (73.5 -> 74, -0.5 -> 0)."""
    return int(math.floor(value + 0.5))


def safe_json_list(raw: Any) -> list:
    """Decode a stored JSON list, degrading to [] when it is malformed.

    Args:
        raw: A JSON string, an already decoded value, or None.

    Returns:
        The decoded list, or an empty list.
    """
    if raw is None:
        return []
    if isinstance(raw, (bytes, str)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            logger.warning(f'Malformed stored JSON, using empty list: {e}')
            return []
    if not isinstance(raw, list):
        logger.warning(f'Stored JSON is {type(raw).__name__}, expected list')
        return []
    return raw


def local_datetime(timestamp: int | float, utc_offset: int = 0) -> datetime:
    """Convert a unix timestamp to an aware datetime at a fixed UTC offset."""
    tz = timezone(timedelta(seconds=utc_offset))
    return datetime.fromtimestamp(timestamp, tz=tz)


def format_hour_label(moment: datetime) -> str:
    """Format a datetime as a 12-hour label such as "3 PM" or "12 AM"."""
    hour = moment.hour % 12 or 12
    suffix = 'AM' if moment.hour < 12 else 'PM'
    return f'{hour} {suffix}'
