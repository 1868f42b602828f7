"""Weather server settings, read from the environment."""

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta

logger = logging.getLogger(__name__)

DEV_SESSION_SECRET = 'dev-session-secret'


def _env_list(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(',') if item.strip()]


@dataclass(frozen=True)
class Settings:
    openweather_api_key: str | None = None
    openweather_base_url: str = 'https://api.openweathermap.org/data/2.5'
    openweather_timeout: float = 10.0
    db_path: str | None = None
    session_secret: str = DEV_SESSION_SECRET
    session_max_age: int = 60 * 60 * 24
    cache_ttl_minutes: int = 60
    default_city: str = 'Towson'
    city_index_path: str | None = None
    static_dir: str = './public'
    cors_origins: list[str] = field(default_factory=lambda: ['*'])

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(minutes=self.cache_ttl_minutes)

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from environment variables."""
        session_secret = os.getenv('SESSION_SECRET')
        if not session_secret:
            logger.warning('SESSION_SECRET not set, using the development secret.')
            session_secret = DEV_SESSION_SECRET

        return cls(
            openweather_api_key=os.getenv('OPENWEATHER_API_KEY'),
            openweather_base_url=os.getenv(
                'OPENWEATHER_BASE_URL', 'https://api.openweathermap.org/data/2.5'
            ),
            openweather_timeout=float(os.getenv('OPENWEATHER_TIMEOUT', '10.0')),
            db_path=None,  # weather_db.get_db_path() reads WEATHER_DB_DIR
            session_secret=session_secret,
            session_max_age=int(os.getenv('SESSION_MAX_AGE', str(60 * 60 * 24))),
            cache_ttl_minutes=int(os.getenv('CACHE_TTL_MINUTES', '60')),
            default_city=os.getenv('DEFAULT_CITY', 'Towson'),
            city_index_path=os.getenv('CITY_INDEX_PATH') or None,
            static_dir=os.getenv('STATIC_DIR', './public'),
            cors_origins=_env_list('CORS_ORIGINS', '*'),
        )
