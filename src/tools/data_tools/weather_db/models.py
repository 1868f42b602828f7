"""Database models and schema for the weather cache."""

# SQLite schema definitions
SCHEMA_SQL = """
-- Anonymous browser sessions
CREATE TABLE IF NOT EXISTS users (
    user_id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Provider locations, one row per OpenWeatherMap city id
CREATE TABLE IF NOT EXISTS cached_locations (
    location_id INTEGER PRIMARY KEY AUTOINCREMENT,
    openweather_id TEXT NOT NULL UNIQUE,
    city_name TEXT NOT NULL,
    country_code TEXT,
    latitude REAL,
    longitude REAL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Weather snapshots; only the newest unexpired one per city is read
CREATE TABLE IF NOT EXISTS cached_weather (
    weather_id INTEGER PRIMARY KEY AUTOINCREMENT,
    location_id INTEGER NOT NULL REFERENCES cached_locations(location_id),
    fetched_at TIMESTAMP NOT NULL,
    expires_at TIMESTAMP NOT NULL,
    current_temp REAL,
    high_temp REAL,
    low_temp REAL,
    weather_condition TEXT,
    wind_speed REAL,
    humidity INTEGER,
    hourly_data TEXT,
    daily_forecast TEXT
);

-- Append-only search log
CREATE TABLE IF NOT EXISTS user_searches (
    search_id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(user_id),
    location_id INTEGER NOT NULL REFERENCES cached_locations(location_id),
    searched_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Index for faster lookups
CREATE INDEX IF NOT EXISTS idx_cached_locations_city ON cached_locations(city_name COLLATE NOCASE);
CREATE INDEX IF NOT EXISTS idx_cached_weather_location ON cached_weather(location_id, expires_at);
CREATE INDEX IF NOT EXISTS idx_user_searches_user ON user_searches(user_id);
"""

# Text format of every stored timestamp (UTC)
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
