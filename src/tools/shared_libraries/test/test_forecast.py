"""Unit tests for the forecast transformer."""

import json

from conftest import (
    MONDAY_MIDNIGHT,
    THREE_HOURS,
    make_current_payload,
    make_forecast_entry,
    make_forecast_payload,
)
from src.tools.shared_libraries.forecast import (
    build_bundle,
    bundle_from_snapshot,
    transform_current,
    transform_daily,
    transform_hourly,
)

DAY = 24 * 60 * 60


class TestTransformCurrent:
    """Tests for the current-conditions transform."""

    def test_rounds_and_maps_icon(self):
        """Temperatures round half up and the icon code maps to a file."""
        payload = make_current_payload(temp=72.5)

        current = transform_current('Towson', payload)

        assert current == {
            'city': 'Towson',
            'temp': 73,
            'high': 76,
            'low': 68,
            'wind': 8,
            'humidity': 40,
            'condition': 'Clear',
            'icon': 'clear.png',
        }

    def test_unknown_icon_defaults_to_cloudy(self):
        """Unrecognised icon codes fall back to cloudy.png."""
        payload = make_current_payload(icon='99z')

        assert transform_current('Towson', payload)['icon'] == 'cloudy.png'


class TestTransformHourly:
    """Tests for the hourly slice."""

    def test_takes_first_six_entries(self, forecast_payload):
        """Only the first six 3-hour entries are kept."""
        hourly = transform_hourly(forecast_payload)

        assert len(hourly) == 6
        assert [h['time'] for h in hourly] == ['12 AM', '3 AM', '6 AM', '9 AM', '12 PM', '3 PM']

    def test_uses_city_utc_offset(self):
        """Hour labels are in the city's local time."""
        payload = make_forecast_payload(
            [make_forecast_entry(MONDAY_MIDNIGHT, 40, 30, temp=35.5)],
            utc_offset=-5 * 60 * 60,
        )

        hourly = transform_hourly(payload)

        assert hourly == [{'time': '7 PM', 'temp': 36, 'condition': 'Clouds', 'icon': 'cloudy.png'}]


class TestTransformDaily:
    """Tests for weekday bucketing."""

    def test_aggregates_high_and_low_per_weekday(self):
        """The bucket keeps the max temp_max and min temp_min of its entries."""
        payload = make_forecast_payload([
            make_forecast_entry(MONDAY_MIDNIGHT, 70, 60, main='Rain', icon='10d'),
            make_forecast_entry(MONDAY_MIDNIGHT + THREE_HOURS, 75, 55),
            make_forecast_entry(MONDAY_MIDNIGHT + 2 * THREE_HOURS, 68, 58),
            make_forecast_entry(MONDAY_MIDNIGHT + DAY, 80, 65, main='Clear', icon='01d'),
        ])

        daily = transform_daily(payload)

        assert daily == [
            {'day': 'Monday', 'high': 75, 'low': 55, 'condition': 'Rain', 'icon': 'rain.png'},
            {'day': 'Tuesday', 'high': 80, 'low': 65, 'condition': 'Clear', 'icon': 'clear.png'},
        ]

    def test_keeps_first_seen_order_and_caps_at_seven(self):
        """Nine days of entries give seven weekday buckets in first-seen order."""
        wednesday = MONDAY_MIDNIGHT + 2 * DAY
        payload = make_forecast_payload([
            make_forecast_entry(wednesday + i * DAY, 70 + i, 50 + i)
            for i in range(9)
        ])

        daily = transform_daily(payload)

        assert [d['day'] for d in daily] == [
            'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday', 'Monday', 'Tuesday',
        ]
        # The eighth day is Wednesday again and folds into the first bucket
        assert daily[0]['high'] == 77
        assert daily[0]['low'] == 50


class TestBundles:
    """Tests for bundle assembly from payloads and cache rows."""

    def test_build_bundle(self, current_payload, forecast_payload):
        bundle = build_bundle('Towson', current_payload, forecast_payload)

        assert set(bundle) == {'current', 'hourly', 'daily'}
        assert bundle['current']['city'] == 'Towson'
        assert len(bundle['hourly']) == 6
        assert [d['day'] for d in bundle['daily']] == ['Monday', 'Tuesday']

    def test_snapshot_with_malformed_json(self):
        """Malformed stored JSON yields empty lists instead of an error."""
        row = {
            'current_temp': 71.6,
            'high_temp': 75.5,
            'low_temp': 68.2,
            'wind_speed': 7.4,
            'humidity': 40,
            'weather_condition': 'Rain',
            'hourly_data': '[{"time": "3 PM"',
            'daily_forecast': 'not json',
        }

        bundle = bundle_from_snapshot('Towson', row)

        assert bundle['hourly'] == []
        assert bundle['daily'] == []
        assert bundle['current']['temp'] == 72
        assert bundle['current']['icon'] == 'rain.png'

    def test_snapshot_with_stored_lists(self):
        hourly = [{'time': '3 PM', 'temp': 70, 'condition': 'Clear', 'icon': 'clear.png'}]
        row = {
            'current_temp': 70.0,
            'high_temp': 72.0,
            'low_temp': 60.0,
            'wind_speed': 3.0,
            'humidity': 30,
            'weather_condition': 'Clouds',
            'hourly_data': json.dumps(hourly),
            'daily_forecast': json.dumps({'not': 'a list'}),
        }

        bundle = bundle_from_snapshot('Towson', row)

        assert bundle['hourly'] == hourly
        assert bundle['daily'] == []
        assert bundle['current']['icon'] == 'cloudy.png'
