from datetime import UTC, date, datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from domain.models.spreads import DailySpreadRecord, HourlySpreadRecord, SpreadStats
from infrastructure.persistence.models.spreads import DailySpreadDB, HourlySpreadDB


def _to_naive_utc(value: datetime) -> datetime:
	if value.tzinfo is None:
		return value
	return value.astimezone(UTC).replace(tzinfo=None)


def _stats_of(row: DailySpreadDB | HourlySpreadDB, fallback_average: float) -> SpreadStats:
	return SpreadStats(
		highest_spread=row.highest_spread,
		lowest_spread=row.lowest_spread,
		average_spread=row.average_spread if row.average_spread is not None else fallback_average,
		data_points=row.data_points or 1,
	)


def _apply_stats(row: DailySpreadDB | HourlySpreadDB, stats: SpreadStats) -> None:
	row.highest_spread = stats.highest_spread
	row.lowest_spread = stats.lowest_spread
	row.average_spread = stats.average_spread
	row.data_points = stats.data_points


def _daily_to_domain(row: DailySpreadDB) -> DailySpreadRecord:
	return DailySpreadRecord(
		date=row.date,
		route=row.route,
		buy_exchange=row.buy_exchange,
		sell_exchange=row.sell_exchange,
		highest_spread=row.highest_spread,
		lowest_spread=row.lowest_spread,
		average_spread=row.average_spread if row.average_spread is not None else row.highest_spread,
		data_points=row.data_points or 1,
	)


def _hourly_to_domain(row: HourlySpreadDB) -> HourlySpreadRecord:
	return HourlySpreadRecord(
		hour_timestamp=row.hour_timestamp.replace(tzinfo=UTC),
		route=row.route,
		buy_exchange=row.buy_exchange,
		sell_exchange=row.sell_exchange,
		highest_spread=row.highest_spread,
		lowest_spread=row.lowest_spread,
		average_spread=row.average_spread if row.average_spread is not None else row.highest_spread,
		data_points=row.data_points or 1,
	)


class SpreadRepository:
	"""Daily and hourly spread statistics keyed by (bucket, route)."""

	def __init__(self, db_session: AsyncSession):
		self.db_session = db_session

	async def get_daily_spreads(self, start: date, end: date) -> list[DailySpreadRecord]:
		stmt = (
			select(DailySpreadDB)
			.filter(DailySpreadDB.date >= start, DailySpreadDB.date <= end)
			.order_by(DailySpreadDB.date.asc(), DailySpreadDB.route.asc())
		)
		result = await self.db_session.execute(stmt)
		return [_daily_to_domain(row) for row in result.scalars().all()]

	async def get_daily_spread(self, day: date, route: str) -> DailySpreadRecord | None:
		row = await self._find_daily(day, route)
		return _daily_to_domain(row) if row else None

	async def record_daily_observation(
		self, day: date, route: str, buy_exchange: str, sell_exchange: str, spread_percentage: float
	) -> DailySpreadRecord:
		row = await self._find_daily(day, route)
		if row is None:
			row = DailySpreadDB(date=day, route=route, buy_exchange=buy_exchange, sell_exchange=sell_exchange)
			_apply_stats(row, SpreadStats.first(spread_percentage))
			self.db_session.add(row)
		else:
			_apply_stats(row, _stats_of(row, spread_percentage).observe(spread_percentage))

		await self.db_session.flush()
		return _daily_to_domain(row)

	async def get_hourly_spreads(self, since: datetime, until: datetime | None = None) -> list[HourlySpreadRecord]:
		stmt = select(HourlySpreadDB).filter(HourlySpreadDB.hour_timestamp >= _to_naive_utc(since))
		if until is not None:
			stmt = stmt.filter(HourlySpreadDB.hour_timestamp <= _to_naive_utc(until))
		stmt = stmt.order_by(HourlySpreadDB.hour_timestamp.asc(), HourlySpreadDB.route.asc())

		result = await self.db_session.execute(stmt)
		return [_hourly_to_domain(row) for row in result.scalars().all()]

	async def record_hourly_observation(
		self, hour: datetime, route: str, buy_exchange: str, sell_exchange: str, spread_percentage: float
	) -> HourlySpreadRecord:
		hour = _to_naive_utc(hour)
		stmt = select(HourlySpreadDB).filter(HourlySpreadDB.hour_timestamp == hour, HourlySpreadDB.route == route)
		row = (await self.db_session.execute(stmt)).scalars().first()

		if row is None:
			row = HourlySpreadDB(
				hour_timestamp=hour, route=route, buy_exchange=buy_exchange, sell_exchange=sell_exchange
			)
			_apply_stats(row, SpreadStats.first(spread_percentage))
			self.db_session.add(row)
		else:
			_apply_stats(row, _stats_of(row, spread_percentage).observe(spread_percentage))

		await self.db_session.flush()
		return _hourly_to_domain(row)

	async def _find_daily(self, day: date, route: str) -> DailySpreadDB | None:
		stmt = select(DailySpreadDB).filter(DailySpreadDB.date == day, DailySpreadDB.route == route)
		return (await self.db_session.execute(stmt)).scalars().first()
