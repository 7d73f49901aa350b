import asyncio
import logging
from datetime import date

from application.services.arbitrage_calculator import ArbitrageCalculator
from application.services.history_resolver import HistoricalSeriesResolver
from application.services.price_aggregator import PriceAggregator
from application.services.spread_accumulator import SpreadAccumulator
from domain.models.market import FxRate, Opportunity, Quote
from domain.models.spreads import DailySpreadRecord, HistoryPeriod, HourlySpreadRecord
from infrastructure.persistence.database import Database

logger = logging.getLogger(__name__)


class ArbitrageService:
    """Entry point for the web layer: live opportunities and spread history."""

    def __init__(
        self,
        aggregator: PriceAggregator,
        accumulator: SpreadAccumulator,
        db: Database,
        calculator: ArbitrageCalculator | None = None,
        max_range_days: int = 730,
    ):
        self.aggregator = aggregator
        self.accumulator = accumulator
        self.calculator = calculator or ArbitrageCalculator()
        self.resolver = HistoricalSeriesResolver(
            db, opportunity_provider=self.compute_opportunities, max_range_days=max_range_days
        )

    async def get_exchange_rate(self) -> FxRate:
        return await self.aggregator.get_exchange_rate()

    async def get_international_prices(self) -> list[Quote]:
        return await self.aggregator.get_international_prices()

    async def get_local_prices(self) -> list[Quote]:
        return await self.aggregator.get_local_prices()

    async def compute_opportunities(self) -> list[Opportunity]:
        """One refresh cycle without recording. Raises NoFxRate when no rate was ever fetched."""
        fx_rate = await self.aggregator.get_exchange_rate()
        international, local = await asyncio.gather(
            self.aggregator.get_international_prices(),
            self.aggregator.get_local_prices(),
        )
        return self.calculator.compute(international, local, fx_rate.rate)

    async def get_current_opportunities(self) -> list[Opportunity]:
        opportunities = await self.compute_opportunities()
        queued = self.accumulator.schedule(opportunities)
        logger.debug(f'Queued {queued} spread observations')
        return opportunities

    async def get_historical_spread(
        self,
        period: HistoryPeriod | str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[DailySpreadRecord]:
        return await self.resolver.resolve(period, start_date, end_date)

    async def get_hourly_spread(self, hours: int = 24) -> list[HourlySpreadRecord]:
        return await self.resolver.resolve_hourly(hours)
