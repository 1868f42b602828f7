"""Weather Server - Entry point for the HTTP server."""

import logging
import os
import sys

import click
import uvicorn
from dotenv import load_dotenv

from observability import init_tracing

from src.tools.data_tools.weather_db.weather_db import WeatherDb

from .app import create_app
from .config import Settings


load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class MissingAPIKeyError(Exception):
    """Exception for missing API key."""


@click.command()
@click.option('--host', 'host', default='localhost', help='Server host')
@click.option('--port', 'port', type=int, default=lambda: int(os.getenv('PORT', '3000')), help='Server port')
@click.option('--prune/--no-prune', 'prune', default=True, help='Delete expired snapshots at start-up')
def main(host: str, port: int, prune: bool):
    """Starts the weather server."""
    try:
        settings = Settings.from_env()
        if not settings.openweather_api_key:
            raise MissingAPIKeyError(
                'OPENWEATHER_API_KEY environment variable not set.'
            )

        init_tracing(project_name='weather-app')

        db = WeatherDb(settings.db_path)
        db.init_db()
        if prune:
            db.prune_expired()

        app = create_app(settings, db=db)

        logger.info(f'Starting weather server at http://{host}:{port}')
        uvicorn.run(app, host=host, port=port)

    except MissingAPIKeyError as e:
        logger.error(f'Error: {e}')
        sys.exit(1)
    except Exception as e:
        logger.error(f'An error occurred during server startup: {e}')
        sys.exit(1)


if __name__ == '__main__':
    main()
