"""Weather tip generator - templated text from an already fetched bundle."""

from typing import Any

from .helpers import round_half_up

NO_FAVORITE_DAY = 'No favorite day selected. Click on a day in the forecast to get specific tips!'

HOT_THRESHOLD_F = 80
FREEZING_THRESHOLD_F = 32


def _or_default(value: Any, default: str) -> Any:
    return default if value is None or value == '' else value


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _temperature(value: Any) -> float | None:
    """Numeric temperatures only; anything else counts as missing."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _favorite_day_entry(daily: Any, favorite_day: Any) -> dict | None:
    """Return the daily entry at favorite_day, or None if the index is not usable."""
    if isinstance(favorite_day, bool) or not isinstance(favorite_day, int):
        return None
    if not isinstance(daily, list) or not 0 <= favorite_day < len(daily):
        return None
    entry = daily[favorite_day]
    return entry if isinstance(entry, dict) else None


def day_remark(day: dict) -> str:
    """Pick one of the four canned remarks for a daily entry."""
    name = day.get('day') or 'That day'
    condition = str(day.get('condition') or '').lower()
    high = _temperature(day.get('high'))
    low = _temperature(day.get('low'))

    if 'rain' in condition:
        return f"🌧️ Don't forget your umbrella on {name}!"
    if high is not None and high > HOT_THRESHOLD_F:
        return f'☀️ {name} will be hot - stay hydrated!'
    if low is not None and low < FREEZING_THRESHOLD_F:
        return f'❄️ {name} will be freezing - bundle up!'
    return f'🌤️ {name} looks like a great day to be outside!'


def generate_weather_tips(weather_data: Any, favorite_day: Any = None) -> str:
    """Build the tips text for a bundle and an optional favourite-day index.

    Args:
        weather_data: A ``{current, hourly, daily}`` bundle. Missing parts fall
            back to placeholder text, as does anything that is not a dict.
        favorite_day: Index into ``daily``; ignored unless it points at an entry.

    Returns:
        Multi-line tips string.
    """
    weather_data = _mapping(weather_data)
    current = _mapping(weather_data.get('current'))

    lines = [
        f"Weather for {_or_default(current.get('city'), 'unknown location')}:",
        f"Current: {_or_default(current.get('condition'), 'unknown')}, "
        f"{_or_default(current.get('temp'), '--')}°F",
        f"Wind: {_or_default(current.get('wind'), '--')} mph, "
        f"Humidity: {_or_default(current.get('humidity'), '--')}%",
        '',
    ]

    day = _favorite_day_entry(weather_data.get('daily'), favorite_day)
    if day is None:
        lines.append(NO_FAVORITE_DAY)
        return '\n'.join(lines)

    high = _temperature(day.get('high'))
    low = _temperature(day.get('low'))
    lines.extend([
        f"Your favorite day ({day.get('day')}) forecast:",
        f"High: {round_half_up(high) if high is not None else '--'}°F, "
        f"Low: {round_half_up(low) if low is not None else '--'}°F",
        f"Conditions: {day.get('condition')}",
        '',
        day_remark(day),
    ])
    return '\n'.join(lines)
