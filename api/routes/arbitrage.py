from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_arbitrage_service
from api.schemas import (
	ExchangeRateResponse,
	HistoricalSpreadPoint,
	HourlySpreadPoint,
	OpportunityResponse,
	QuoteResponse,
)
from application.services import ArbitrageService
from domain.exceptions.arbitrage import InvalidRange

router = APIRouter(prefix='/api', tags=['arbitrage'])


def _parse_date(value: str, field: str) -> date:
	try:
		return date.fromisoformat(value)
	except ValueError as e:
		raise InvalidRange(f'{field} must be a YYYY-MM-DD date, got {value!r}') from e


@router.get(
	'/exchange-rate',
	response_model=ExchangeRateResponse,
	status_code=status.HTTP_200_OK,
	summary='Get the current USD/ZAR rate',
)
async def get_exchange_rate(
	service: Annotated[ArbitrageService, Depends(get_arbitrage_service)],
) -> ExchangeRateResponse:
	return ExchangeRateResponse.from_domain(await service.get_exchange_rate())


@router.get(
	'/prices/international',
	response_model=list[QuoteResponse],
	status_code=status.HTTP_200_OK,
	summary='BTC prices from international (USD) exchanges',
)
async def get_international_prices(
	service: Annotated[ArbitrageService, Depends(get_arbitrage_service)],
) -> list[QuoteResponse]:
	return [QuoteResponse.from_domain(quote) for quote in await service.get_international_prices()]


@router.get(
	'/prices/local',
	response_model=list[QuoteResponse],
	status_code=status.HTTP_200_OK,
	summary='BTC prices from local (ZAR) exchanges',
)
async def get_local_prices(
	service: Annotated[ArbitrageService, Depends(get_arbitrage_service)],
) -> list[QuoteResponse]:
	return [QuoteResponse.from_domain(quote) for quote in await service.get_local_prices()]


@router.get(
	'/arbitrage',
	response_model=list[OpportunityResponse],
	status_code=status.HTTP_200_OK,
	summary='Ranked arbitrage opportunities',
)
async def get_arbitrage_opportunities(
	service: Annotated[ArbitrageService, Depends(get_arbitrage_service)],
) -> list[OpportunityResponse]:
	opportunities = await service.get_current_opportunities()
	return [OpportunityResponse.from_domain(opportunity) for opportunity in opportunities]


@router.get(
	'/historical-spread',
	response_model=list[HistoricalSpreadPoint],
	status_code=status.HTTP_200_OK,
	summary='Daily spread history for a period or date range',
)
async def get_historical_spread(
	service: Annotated[ArbitrageService, Depends(get_arbitrage_service)],
	period: Annotated[str, Query(description='1d, 7d, 30d, 90d, 6m or 1y')] = '7d',
	start_date: Annotated[str | None, Query(alias='startDate')] = None,
	end_date: Annotated[str | None, Query(alias='endDate')] = None,
) -> list[HistoricalSpreadPoint]:
	if start_date and end_date:
		records = await service.get_historical_spread(
			start_date=_parse_date(start_date, 'startDate'),
			end_date=_parse_date(end_date, 'endDate'),
		)
	else:
		records = await service.get_historical_spread(period=period)
	return [HistoricalSpreadPoint.from_domain(record) for record in records]


@router.get(
	'/hourly-spread',
	response_model=list[HourlySpreadPoint],
	status_code=status.HTTP_200_OK,
	summary='Hourly spread statistics for the last N hours',
)
async def get_hourly_spread(
	service: Annotated[ArbitrageService, Depends(get_arbitrage_service)],
	hours: Annotated[int, Query(description='Look-back window, 1 to 720 hours')] = 24,
) -> list[HourlySpreadPoint]:
	return [HourlySpreadPoint.from_domain(record) for record in await service.get_hourly_spread(hours)]
