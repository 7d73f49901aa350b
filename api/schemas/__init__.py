from .responses import (
	ExchangeRateResponse,
	HistoricalSpreadPoint,
	HourlySpreadPoint,
	OpportunityResponse,
	QuoteResponse,
)

__all__ = [
	'ExchangeRateResponse',
	'HistoricalSpreadPoint',
	'HourlySpreadPoint',
	'OpportunityResponse',
	'QuoteResponse',
]
