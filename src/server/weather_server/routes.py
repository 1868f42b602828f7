"""HTTP routes: city search, cached weather and weather tips."""

import logging
import sqlite3
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query, Request
from fastapi.responses import JSONResponse

from src.tools.api_tools.weather_api.weather_api import UpstreamError
from src.tools.shared_libraries.tips import generate_weather_tips

from .schemas import CitySuggestion, ErrorResponse, TipsRequest, TipsResponse, WeatherBundle
from .service import WeatherService
from .session import get_current_user

logger = logging.getLogger(__name__)

FETCH_FAILED = 'Failed to fetch weather data'

router = APIRouter(prefix='/api', dependencies=[Depends(get_current_user)])


def get_weather_service(request: Request) -> WeatherService:
    return request.app.state.weather_service


def _error(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump(exclude_none=True),
    )


@router.get('/cities', response_model=list[CitySuggestion])
def search_cities(request: Request, q: str | None = Query(default=None)):
    """Suggest US cities whose name contains ``q``."""
    return request.app.state.city_index.search(q)


@router.get('/weather', responses={
    200: {'model': WeatherBundle},
    500: {'model': ErrorResponse},
    502: {'model': ErrorResponse},
})
async def get_weather(
    background_tasks: BackgroundTasks,
    city: str | None = Query(default=None),
    service: WeatherService = Depends(get_weather_service),
    user_id: int | None = Depends(get_current_user),
):
    """Return the ``{current, hourly, daily}`` bundle for a city."""
    message = f"Could not find weather for {city or 'default location'}"
    try:
        lookup = await service.get_forecast(city)
    except UpstreamError as e:
        logger.error(f'Weather API error: {e}')
        return _error(502, e.provider_message or FETCH_FAILED, message)
    except sqlite3.Error as e:
        logger.error(f'Weather cache error: {e}')
        return _error(500, FETCH_FAILED, message)

    if user_id is not None:
        background_tasks.add_task(service.db.track_search, user_id, lookup.location_id)
    return lookup.bundle


@router.post('/ai-weather', response_model=TipsResponse)
def weather_tips(body: Any = Body(default=None)):
    """Build templated tips for the bundle and favourite day the UI holds.

    Malformed fields fall back to placeholder text or "no favourite day".
    """
    tips_request = TipsRequest.model_validate(body) if isinstance(body, dict) else TipsRequest()
    tips = generate_weather_tips(tips_request.weatherData, tips_request.favoriteDay)
    return TipsResponse(aiResponse=tips)
