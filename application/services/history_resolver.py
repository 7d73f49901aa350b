import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, date, datetime, timedelta

from application.services import synthetic_spreads
from domain.exceptions.arbitrage import CorruptStoredRecord, InvalidRange
from domain.models.market import Opportunity
from domain.models.spreads import DailySpreadRecord, DateRange, HistoryPeriod, HourlySpreadRecord
from infrastructure.persistence.database import Database
from infrastructure.persistence.repositories.spreads import SpreadRepository

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = HistoryPeriod.SEVEN_DAYS
MAX_HOURS = 720


def _utc_now() -> datetime:
    return datetime.now(UTC)


def parse_period(period: HistoryPeriod | str | None) -> HistoryPeriod:
    if period is None:
        return DEFAULT_PERIOD
    try:
        return HistoryPeriod(period)
    except ValueError as e:
        allowed = ', '.join(p.value for p in HistoryPeriod)
        raise InvalidRange(f'Unknown period {period!r}; expected one of {allowed}') from e


def check_record(record: DailySpreadRecord) -> DailySpreadRecord:
    if record.lowest_spread >= record.highest_spread:
        raise CorruptStoredRecord(
            f'{record.date} {record.route}: low {record.lowest_spread} >= high {record.highest_spread}'
        )
    return record


class HistoricalSeriesResolver:
    """Serves daily spread history, substituting a deterministic series when stored coverage is thin.

    Order of preference:
      1. stored daily records, when at least 30% of the requested days have data;
      2. a series anchored on the best live opportunity (or a fixed 0.6% baseline
         when the market currently offers no pairs);
      3. a fixed 2.0% series when live market data cannot be fetched at all.
    Every returned record satisfies lowest_spread <= highest_spread.
    """

    def __init__(
        self,
        db: Database,
        opportunity_provider: Callable[[], Awaitable[list[Opportunity]]],
        max_range_days: int = 730,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.db = db
        self.opportunity_provider = opportunity_provider
        self.max_range_days = max_range_days
        self._clock = clock

    def today(self) -> date:
        return self._clock().astimezone(UTC).date()

    def date_range_for(
        self,
        period: HistoryPeriod | str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> DateRange:
        if start_date is not None and end_date is not None:
            if start_date > end_date:
                raise InvalidRange('Start date must be before end date.')
            if (end_date - start_date).days > self.max_range_days:
                raise InvalidRange(f'Date range cannot exceed {self.max_range_days} days.')
            return DateRange(start=start_date, end=end_date)

        days = parse_period(period).days
        today = self.today()
        return DateRange(start=today - timedelta(days=days - 1), end=today)

    async def resolve(
        self,
        period: HistoryPeriod | str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[DailySpreadRecord]:
        date_range = self.date_range_for(period, start_date, end_date)

        async with self.db.session() as session:
            stored = await SpreadRepository(session).get_daily_spreads(date_range.start, date_range.end)

        observed_days = len({record.date for record in stored})
        coverage = observed_days / date_range.days
        logger.info(
            f'Date coverage for {date_range.start}..{date_range.end}: '
            f'{observed_days}/{date_range.days} days ({coverage * 100:.1f}%)'
        )

        if stored and coverage >= synthetic_spreads.COVERAGE_THRESHOLD:
            return self._validated(stored)

        logger.info('Insufficient historical coverage, generating synthetic series')
        return self._validated(await self._synthesize(date_range))

    async def resolve_hourly(self, hours: int = 24) -> list[HourlySpreadRecord]:
        if hours < 1 or hours > MAX_HOURS:
            raise InvalidRange(f'hours must be between 1 and {MAX_HOURS}')

        since = self._clock().astimezone(UTC).replace(minute=0, second=0, microsecond=0) - timedelta(hours=hours - 1)
        async with self.db.session() as session:
            return await SpreadRepository(session).get_hourly_spreads(since)

    async def _synthesize(self, date_range: DateRange) -> list[DailySpreadRecord]:
        try:
            opportunities = await self.opportunity_provider()
        except Exception as e:
            logger.error(f'Error fetching current market data for historical generation: {e}')
            return synthetic_spreads.synthesize_degraded(date_range)

        if opportunities:
            return synthetic_spreads.synthesize_from_market(date_range, opportunities[0])
        return synthetic_spreads.synthesize_baseline(date_range)

    def _validated(self, records: list[DailySpreadRecord]) -> list[DailySpreadRecord]:
        validated = []
        for record in records:
            try:
                validated.append(check_record(record))
            except CorruptStoredRecord as e:
                corrected = synthetic_spreads.repaired_low(record.highest_spread)
                logger.warning(f'Corrected invalid spread data ({e}): using {corrected} as low spread')
                validated.append(record.with_lowest(corrected))
        return validated
