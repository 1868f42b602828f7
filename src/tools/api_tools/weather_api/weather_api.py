"""Weather API client - OpenWeatherMap integration."""

import logging
import os

import httpx

from observability import trace_operation

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://api.openweathermap.org/data/2.5'
DEFAULT_TIMEOUT = 10.0


class UpstreamError(Exception):
    """The weather provider could not be reached or rejected the request."""

    def __init__(
        self,
        message: str,
        provider_message: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.provider_message = provider_message
        self.status_code = status_code


def _provider_message(response: httpx.Response) -> str | None:
    """Pull the provider's ``message`` field out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get('message'):
        return str(body['message'])
    return None


class OpenWeatherClient:
    """Async client for the current-conditions and 5-day/3-hour endpoints.

    Both calls return the raw provider JSON; shaping happens in the forecast
    transformer.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        units: str = 'imperial',
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key or os.getenv('OPENWEATHER_API_KEY')
        self.base_url = base_url.rstrip('/')
        self.units = units
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, endpoint: str, city: str) -> dict:
        if not self.api_key:
            raise UpstreamError('OPENWEATHER_API_KEY environment variable not set.')

        try:
            response = await self._client.get(
                f'{self.base_url}/{endpoint}',
                params={
                    'q': city,
                    'appid': self.api_key,
                    'units': self.units,
                },
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f'Weather API {endpoint} for {city!r} returned {status}')
            raise UpstreamError(
                f'API request failed: {e}',
                provider_message=_provider_message(e.response),
                status_code=status,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f'Weather API {endpoint} for {city!r} failed: {e}')
            raise UpstreamError(f'API request failed: {e}') from e
        except ValueError as e:
            raise UpstreamError('Invalid JSON response from API.') from e

        if not isinstance(data, dict):
            raise UpstreamError('Invalid JSON response from API.')
        return data

    @trace_operation(name='api.get_current_weather', capture_output=False)
    async def get_current_weather(self, city: str) -> dict:
        """Get current conditions for a city query such as "Towson,US".

        Args:
            city: Provider query string.

        Returns:
            The raw /weather payload.

        Raises:
            UpstreamError: On network failure, non-2xx status or bad JSON.
        """
        return await self._get('weather', city)

    @trace_operation(name='api.get_weather_forecast', capture_output=False)
    async def get_weather_forecast(self, city: str) -> dict:
        """Get the 5-day/3-hour forecast for a city query.

        Args:
            city: Provider query string.

        Returns:
            The raw /forecast payload.

        Raises:
            UpstreamError: On network failure, non-2xx status or bad JSON.
        """
        return await self._get('forecast', city)
