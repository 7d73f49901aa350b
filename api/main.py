import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from api.dependencies import cleanup_dependencies, deps, init_dependencies
from api.error_handlers import register_exception_handlers
from api.routes import arbitrage
from config.logging import setup_logging
from config.settings import get_settings

logger = logging.getLogger(__name__)


settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
	setup_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
	logger.info(f'Starting {settings.APP_NAME}...')

	init_dependencies()
	await deps.db.create_tables()
	logger.info('Spread tables ready')

	yield

	# Pending spread writes finish before the engine they use is disposed
	logger.info('Shutting down...')
	await cleanup_dependencies()


app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)

app.include_router(arbitrage.router)
register_exception_handlers(app)


def run() -> None:
	uvicorn.run('api.main:app', host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == '__main__':
	run()
