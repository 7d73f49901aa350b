import datetime as dt

from sqlalchemy import Date, DateTime, Float, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
	pass


class DailySpreadDB(Base):
	__tablename__ = 'daily_spreads'

	id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
	date: Mapped[dt.date] = mapped_column(Date, nullable=False)
	buy_exchange: Mapped[str] = mapped_column(String(50), nullable=False)
	sell_exchange: Mapped[str] = mapped_column(String(50), nullable=False)
	route: Mapped[str] = mapped_column(String(120), nullable=False)
	highest_spread: Mapped[float] = mapped_column(Float, nullable=False)
	lowest_spread: Mapped[float] = mapped_column(Float, nullable=False)
	average_spread: Mapped[float | None] = mapped_column(Float, nullable=True)
	data_points: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
	created_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
	updated_at: Mapped[dt.datetime] = mapped_column(
		DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
	)

	__table_args__ = (
		Index('idx_daily_spreads_date', 'date'),
		UniqueConstraint('date', 'route', name='uq_daily_spreads_date_route'),
	)


class HourlySpreadDB(Base):
	__tablename__ = 'hourly_spreads'

	id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
	# Rounded down to the hour; data from 14:00-14:59 is stored as 14:00:00
	hour_timestamp: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False)
	buy_exchange: Mapped[str] = mapped_column(String(50), nullable=False)
	sell_exchange: Mapped[str] = mapped_column(String(50), nullable=False)
	route: Mapped[str] = mapped_column(String(120), nullable=False)
	highest_spread: Mapped[float] = mapped_column(Float, nullable=False)
	lowest_spread: Mapped[float] = mapped_column(Float, nullable=False)
	average_spread: Mapped[float | None] = mapped_column(Float, nullable=True)
	data_points: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
	created_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
	updated_at: Mapped[dt.datetime] = mapped_column(
		DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
	)

	__table_args__ = (
		Index('idx_hourly_spreads_hour_timestamp', 'hour_timestamp'),
		Index('idx_hourly_spreads_route', 'route'),
		UniqueConstraint('hour_timestamp', 'route', name='uq_hourly_spreads_hour_route'),
	)
