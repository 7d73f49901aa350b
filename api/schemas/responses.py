import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from domain.models.market import FxRate, Opportunity, Quote
from domain.models.spreads import DailySpreadRecord, HourlySpreadRecord


class ExchangeRateResponse(BaseModel):
	from_currency: str = Field('USD', description='Base currency code')
	to_currency: str = Field('ZAR', description='Quote currency code')
	rate: Decimal = Field(..., description='ZAR per one USD')
	timestamp: dt.datetime = Field(..., description='When the rate was fetched')

	model_config = {
		'json_schema_extra': {
			'example': {
				'from_currency': 'USD',
				'to_currency': 'ZAR',
				'rate': 18.52,
				'timestamp': '2025-09-27T10:30:00Z',
			}
		}
	}

	@classmethod
	def from_domain(cls, fx_rate: FxRate) -> 'ExchangeRateResponse':
		return cls(rate=fx_rate.rate, timestamp=fx_rate.observed_at)


class QuoteResponse(BaseModel):
	exchange: str = Field(..., description='Exchange the price was read from')
	price: Decimal = Field(..., description='Last traded BTC price')
	currency: str = Field(..., description='Currency the price is quoted in')
	timestamp: dt.datetime = Field(..., description='When the price was observed')

	@classmethod
	def from_domain(cls, quote: Quote) -> 'QuoteResponse':
		return cls(
			exchange=quote.exchange_name,
			price=quote.price,
			currency=quote.currency.value,
			timestamp=quote.observed_at,
		)


class OpportunityResponse(BaseModel):
	buy_exchange: str = Field(..., description='International exchange to buy on')
	sell_exchange: str = Field(..., description='Local exchange to sell on')
	route: str = Field(..., description='Display key, buy → sell')
	buy_price_zar: Decimal = Field(..., description='Buy price converted to ZAR')
	sell_price_zar: Decimal = Field(..., description='Local sell price in ZAR')
	spread: Decimal = Field(..., description='sell - buy, in ZAR')
	spread_percentage: float = Field(..., description='spread / buy * 100')

	model_config = {
		'json_schema_extra': {
			'example': {
				'buy_exchange': 'Binance',
				'sell_exchange': 'VALR',
				'route': 'Binance → VALR',
				'buy_price_zar': 1140000,
				'sell_price_zar': 1150000,
				'spread': 10000,
				'spread_percentage': 0.877,
			}
		}
	}

	@classmethod
	def from_domain(cls, opportunity: Opportunity) -> 'OpportunityResponse':
		return cls(
			buy_exchange=opportunity.buy_exchange,
			sell_exchange=opportunity.sell_exchange,
			route=opportunity.route,
			buy_price_zar=opportunity.buy_price_zar,
			sell_price_zar=opportunity.sell_price_zar,
			spread=opportunity.spread,
			spread_percentage=opportunity.spread_percentage,
		)


class HistoricalSpreadPoint(BaseModel):
	date: dt.date
	route: str
	highest_spread: float
	lowest_spread: float
	average_spread: float
	data_points: int
	synthetic: bool = Field(False, description='True when generated rather than observed')

	@classmethod
	def from_domain(cls, record: DailySpreadRecord) -> 'HistoricalSpreadPoint':
		return cls(
			date=record.date,
			route=record.route,
			highest_spread=record.highest_spread,
			lowest_spread=record.lowest_spread,
			average_spread=record.average_spread,
			data_points=record.data_points,
			synthetic=record.synthetic,
		)


class HourlySpreadPoint(BaseModel):
	hour: dt.datetime
	route: str
	highest_spread: float
	lowest_spread: float
	average_spread: float
	data_points: int

	@classmethod
	def from_domain(cls, record: HourlySpreadRecord) -> 'HourlySpreadPoint':
		return cls(
			hour=record.hour_timestamp,
			route=record.route,
			highest_spread=record.highest_spread,
			lowest_spread=record.lowest_spread,
			average_spread=record.average_spread,
			data_points=record.data_points,
		)
