import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.arbitrage import InvalidRange, NoFxRate

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidRange)
	async def invalid_range_handler(request: Request, exc: InvalidRange):
		return JSONResponse(status_code=400, content={'detail': str(exc)})

	@app.exception_handler(NoFxRate)
	async def no_fx_rate_handler(request: Request, exc: NoFxRate):
		logger.error(f'Exchange rate unavailable: {exc}')
		return JSONResponse(
			status_code=503, content={'detail': 'Exchange rate service unavailable'}
		)

	@app.exception_handler(Exception)
	async def global_exception_handler(request: Request, exc: Exception):
		logger.error(f'Unhandled exception: {exc}', exc_info=True)
		return JSONResponse(status_code=500, content={'detail': 'Internal server error'})
