"""Forecast transformer - provider payloads and cache rows into bundles.

A bundle is the ``{current, hourly, daily}`` shape served by /api/weather.
"""

from typing import Any, Mapping

from .helpers import (
    format_hour_label,
    icon_for_code,
    icon_for_condition,
    local_datetime,
    round_half_up,
    safe_json_list,
)

HOURLY_ENTRIES = 6
MAX_DAILY_BUCKETS = 7


def _first_weather(item: Mapping[str, Any]) -> Mapping[str, Any]:
    weather = item.get('weather') or [{}]
    return weather[0]


def transform_current(city: str, payload: Mapping[str, Any]) -> dict:
    """Build the ``current`` section from a current-conditions payload.

    Args:
        city: Display name echoed back to the caller.
        payload: Raw /weather response.

    Returns:
        Dict with city, temp, high, low, wind, humidity, condition, icon.
    """
    main = payload['main']
    weather = _first_weather(payload)
    return {
        'city': city,
        'temp': round_half_up(main['temp']),
        'high': round_half_up(main['temp_max']),
        'low': round_half_up(main['temp_min']),
        'wind': round_half_up(payload['wind']['speed']),
        'humidity': main['humidity'],
        'condition': weather.get('main'),
        'icon': icon_for_code(weather.get('icon')),
    }


def transform_hourly(payload: Mapping[str, Any]) -> list[dict]:
    """Take the first six 3-hour entries of a forecast payload."""
    utc_offset = (payload.get('city') or {}).get('timezone', 0)
    hourly = []
    for item in payload.get('list', [])[:HOURLY_ENTRIES]:
        weather = _first_weather(item)
        hourly.append({
            'time': format_hour_label(local_datetime(item['dt'], utc_offset)),
            'temp': round_half_up(item['main']['temp']),
            'condition': weather.get('main'),
            'icon': icon_for_code(weather.get('icon')),
        })
    return hourly


def transform_daily(payload: Mapping[str, Any]) -> list[dict]:
    """Bucket forecast entries by weekday name.

    The first entry seen for a weekday seeds its condition and icon; high and
    low are the running max of ``temp_max`` and min of ``temp_min`` over every
    entry on that weekday. Buckets keep first-seen order, at most seven.
    """
    utc_offset = (payload.get('city') or {}).get('timezone', 0)
    buckets: dict[str, dict] = {}
    for item in payload.get('list', []):
        day = local_datetime(item['dt'], utc_offset).strftime('%A')
        main = item['main']
        bucket = buckets.get(day)
        if bucket is None:
            weather = _first_weather(item)
            bucket = buckets[day] = {
                'day': day,
                'high': main['temp_max'],
                'low': main['temp_min'],
                'condition': weather.get('main'),
                'icon': icon_for_code(weather.get('icon')),
            }
        bucket['high'] = max(bucket['high'], main['temp_max'])
        bucket['low'] = min(bucket['low'], main['temp_min'])
    return list(buckets.values())[:MAX_DAILY_BUCKETS]


def build_bundle(
    city: str,
    current_payload: Mapping[str, Any],
    forecast_payload: Mapping[str, Any],
) -> dict:
    """Transform both provider payloads into a bundle."""
    return {
        'current': transform_current(city, current_payload),
        'hourly': transform_hourly(forecast_payload),
        'daily': transform_daily(forecast_payload),
    }


def bundle_from_snapshot(city: str, row: Mapping[str, Any]) -> dict:
    """Rebuild a bundle from a cached_weather row.

    Malformed hourly/daily JSON degrades to an empty list.
    """
    condition = row['weather_condition']
    return {
        'current': {
            'city': city,
            'temp': round_half_up(row['current_temp']),
            'high': round_half_up(row['high_temp']),
            'low': round_half_up(row['low_temp']),
            'wind': round_half_up(row['wind_speed']),
            'humidity': row['humidity'],
            'condition': condition,
            'icon': icon_for_condition(condition),
        },
        'hourly': safe_json_list(row['hourly_data']),
        'daily': safe_json_list(row['daily_forecast']),
    }
