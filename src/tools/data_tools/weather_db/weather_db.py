"""Weather Database - SQLite cache of provider locations and forecasts."""

import json
import logging
import os
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

from observability import trace_operation

from .models import SCHEMA_SQL, TIMESTAMP_FORMAT

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=1)


def get_db_path() -> str:
    """Get the database file path."""
    db_dir = Path(os.getenv('WEATHER_DB_DIR', './data'))
    db_dir.mkdir(parents=True, exist_ok=True)
    return str(db_dir / 'weather.db')


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as stored UTC text."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


class WeatherDb:
    """Persisted weather cache, user sessions and search log.

    Every operation opens its own connection, so one instance can be shared
    across request threads. Writes are individual statements with no
    surrounding transaction.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or get_db_path()

    def get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Initialize the database with required tables."""
        conn = self.get_connection()
        try:
            conn.executescript(SCHEMA_SQL)
            conn.commit()
        finally:
            conn.close()

    @trace_operation(name='db.get_cached_weather', capture_output=False)
    def get_cached_weather(self, city_name: str, now: datetime | None = None) -> sqlite3.Row | None:
        """Get the newest unexpired snapshot for a city.

        City names compare case-insensitively and without state or country,
        so same-named cities share snapshots.

        Args:
            city_name: Bare city name, e.g. "Towson".
            now: Reference time. Defaults to the current UTC time.

        Returns:
            The cached_weather row, or None on a miss.
        """
        conn = self.get_connection()
        try:
            cursor = conn.execute(
                """
                SELECT cw.*
                FROM cached_weather cw
                JOIN cached_locations cl ON cw.location_id = cl.location_id
                WHERE cl.city_name = ? COLLATE NOCASE AND cw.expires_at > ?
                ORDER BY cw.expires_at DESC, cw.weather_id DESC
                LIMIT 1
                """,
                (city_name, format_timestamp(now or utcnow())),
            )
            return cursor.fetchone()
        finally:
            conn.close()

    @trace_operation(name='db.cache_location')
    def cache_location(self, payload: dict) -> int:
        """Insert the location of a current-conditions payload, or reuse it.

        Locations are keyed on the provider's city id and never updated.

        Args:
            payload: Raw /weather response.

        Returns:
            The location_id.
        """
        conn = self.get_connection()
        try:
            openweather_id = str(payload['id'])
            conn.execute(
                """
                INSERT OR IGNORE INTO cached_locations
                (openweather_id, city_name, country_code, latitude, longitude)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    openweather_id,
                    payload['name'],
                    payload.get('sys', {}).get('country'),
                    payload.get('coord', {}).get('lat'),
                    payload.get('coord', {}).get('lon'),
                ),
            )
            conn.commit()
            row = conn.execute(
                'SELECT location_id FROM cached_locations WHERE openweather_id = ?',
                (openweather_id,),
            ).fetchone()
            return row['location_id']
        except sqlite3.Error as e:
            logger.error(f'Location caching error: {e}')
            raise
        finally:
            conn.close()

    @trace_operation(name='db.cache_weather')
    def cache_weather(
        self,
        location_id: int,
        payload: dict,
        hourly: list,
        daily: list,
        ttl: timedelta = DEFAULT_TTL,
        now: datetime | None = None,
    ) -> int:
        """Store a new snapshot that expires ``ttl`` from now.

        Args:
            location_id: Owning cached_locations row.
            payload: Raw /weather response; unrounded values are stored.
            hourly: Transformed hourly entries.
            daily: Transformed daily entries.
            ttl: Snapshot lifetime.
            now: Reference time. Defaults to the current UTC time.

        Returns:
            The weather_id of the new snapshot.
        """
        now = now or utcnow()
        main = payload['main']
        conn = self.get_connection()
        try:
            cursor = conn.execute(
                """
                INSERT INTO cached_weather
                (location_id, fetched_at, expires_at, current_temp, high_temp, low_temp,
                 weather_condition, wind_speed, humidity, hourly_data, daily_forecast)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    location_id,
                    format_timestamp(now),
                    format_timestamp(now + ttl),
                    main['temp'],
                    main['temp_max'],
                    main['temp_min'],
                    (payload.get('weather') or [{}])[0].get('main'),
                    payload['wind']['speed'],
                    main['humidity'],
                    json.dumps(hourly),
                    json.dumps(daily),
                ),
            )
            conn.commit()
            return cursor.lastrowid
        except sqlite3.Error as e:
            logger.error(f'Weather caching error: {e}')
            raise
        finally:
            conn.close()

    @trace_operation(name='db.create_user')
    def create_user(self, session_id: str) -> int:
        """Create the user row for a new browser session."""
        conn = self.get_connection()
        try:
            cursor = conn.execute(
                'INSERT INTO users (session_id) VALUES (?)',
                (session_id,),
            )
            conn.commit()
            return cursor.lastrowid
        finally:
            conn.close()

    @trace_operation(name='db.track_search')
    def track_search(self, user_id: int, location_id: int) -> bool:
        """Record that a user looked up a location.

        Tracking is best effort: database errors are logged, not raised.

        Returns:
            True if the record was written.
        """
        conn = self.get_connection()
        try:
            conn.execute(
                'INSERT INTO user_searches (user_id, location_id) VALUES (?, ?)',
                (user_id, location_id),
            )
            conn.commit()
            return True
        except sqlite3.Error as e:
            logger.error(f'Search tracking error: {e}')
            return False
        finally:
            conn.close()

    @trace_operation(name='db.prune_expired')
    def prune_expired(self, now: datetime | None = None) -> int:
        """Delete expired snapshots.

        Returns:
            Number of rows deleted.
        """
        conn = self.get_connection()
        try:
            cursor = conn.execute(
                'DELETE FROM cached_weather WHERE expires_at <= ?',
                (format_timestamp(now or utcnow()),),
            )
            conn.commit()
            logger.info(f'Pruned {cursor.rowcount} expired weather snapshots')
            return cursor.rowcount
        finally:
            conn.close()
