"""Weather server application factory."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from src.tools.api_tools.weather_api.weather_api import OpenWeatherClient
from src.tools.data_tools.city_index.city_index import CityIndex, load_city_index
from src.tools.data_tools.weather_db.weather_db import WeatherDb

from .config import Settings
from .routes import router
from .service import WeatherService
from .session import SESSION_COOKIE

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    db: WeatherDb | None = None,
    client: OpenWeatherClient | None = None,
    city_index: CityIndex | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        settings: Server settings. Defaults to ``Settings.from_env()``.
        db: Cache store. Defaults to a WeatherDb at ``settings.db_path``.
        client: Upstream client. Defaults to one built from settings.
        city_index: Search index. Defaults to ``settings.city_index_path``
            or the bundled city list.
    """
    if settings is None:
        settings = Settings.from_env()
    if db is None:
        db = WeatherDb(settings.db_path)
    if client is None:
        client = OpenWeatherClient(
            api_key=settings.openweather_api_key,
            base_url=settings.openweather_base_url,
            timeout=settings.openweather_timeout,
        )
    if city_index is None:
        city_index = load_city_index(settings.city_index_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.init_db()
        logger.info(f'Weather cache at {db.db_path}')
        yield
        await client.aclose()

    app = FastAPI(title='Weather App', lifespan=lifespan)
    app.state.settings = settings
    app.state.db = db
    app.state.city_index = city_index
    app.state.weather_service = WeatherService(
        db=db,
        client=client,
        ttl=settings.cache_ttl,
        default_city=settings.default_city,
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=SESSION_COOKIE,
        max_age=settings.session_max_age,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.include_router(router)

    # Mounted last so /api routes take precedence
    if os.path.isdir(settings.static_dir):
        app.mount('/', StaticFiles(directory=settings.static_dir, html=True), name='static')
    else:
        logger.info(f'No static directory at {settings.static_dir}, UI assets not served')

    return app
