"""Weather Service - cache lookup and refresh for /api/weather.

Check the cache, and on a miss fetch both provider feeds concurrently,
transform them, persist the snapshot and return the fresh bundle.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import timedelta

from observability import trace_span

from src.tools.api_tools.weather_api.weather_api import OpenWeatherClient, UpstreamError
from src.tools.data_tools.weather_db.weather_db import DEFAULT_TTL, WeatherDb
from src.tools.shared_libraries.forecast import build_bundle, bundle_from_snapshot

logger = logging.getLogger(__name__)

COUNTRY_SUFFIX = 'US'


def normalize_city(city: str) -> tuple[str, str]:
    """Turn user input into a provider query and a bare lookup key.

    "Towson, MD" -> ("Towson,US", "Towson"); "Towson" -> ("Towson,US", "Towson").
    """
    bare = city.split(',')[0].strip()
    return f'{bare},{COUNTRY_SUFFIX}', bare


@dataclass
class ForecastLookup:
    bundle: dict
    location_id: int
    from_cache: bool


class WeatherService:
    """Serves forecast bundles from the cache, refreshing from the provider."""

    def __init__(
        self,
        db: WeatherDb,
        client: OpenWeatherClient,
        ttl: timedelta = DEFAULT_TTL,
        default_city: str = 'Towson',
    ):
        self.db = db
        self.client = client
        self.ttl = ttl
        self.default_city = default_city

    @trace_span('weather.get_forecast')
    async def get_forecast(self, city: str | None = None) -> ForecastLookup:
        """Return the forecast bundle for a city.

        Args:
            city: User input such as "Towson" or "Towson, US". Blank input
                falls back to the default city.

        Returns:
            The bundle with the location it belongs to.

        Raises:
            UpstreamError: A cache miss could not be filled from the provider.
            sqlite3.Error: The fresh snapshot could not be persisted.
        """
        query, city_key = normalize_city(city if city and city.strip() else self.default_city)

        row = await asyncio.to_thread(self.db.get_cached_weather, city_key)
        if row is not None:
            logger.info(f'Cache hit for {city_key}')
            return ForecastLookup(
                bundle=bundle_from_snapshot(city_key, row),
                location_id=row['location_id'],
                from_cache=True,
            )

        logger.info(f'Cache miss for {city_key}, fetching {query}')
        current, forecast = await asyncio.gather(
            self.client.get_current_weather(query),
            self.client.get_weather_forecast(query),
        )

        try:
            bundle = build_bundle(city_key, current, forecast)
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError(f'Unexpected provider payload: {e!r}') from e
        if 'id' not in current or 'name' not in current:
            raise UpstreamError('Provider payload has no city id or name')

        location_id = await asyncio.to_thread(self.db.cache_location, current)
        await asyncio.to_thread(
            self.db.cache_weather,
            location_id,
            current,
            bundle['hourly'],
            bundle['daily'],
            self.ttl,
        )
        return ForecastLookup(bundle=bundle, location_id=location_id, from_cache=False)
