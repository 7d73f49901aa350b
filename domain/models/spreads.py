from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum


class HistoryPeriod(str, Enum):
    ONE_DAY = '1d'
    SEVEN_DAYS = '7d'
    THIRTY_DAYS = '30d'
    NINETY_DAYS = '90d'
    SIX_MONTHS = '6m'
    ONE_YEAR = '1y'

    @property
    def days(self) -> int:
        return _PERIOD_DAYS[self]


_PERIOD_DAYS = {
    HistoryPeriod.ONE_DAY: 1,
    HistoryPeriod.SEVEN_DAYS: 7,
    HistoryPeriod.THIRTY_DAYS: 30,
    HistoryPeriod.NINETY_DAYS: 90,
    HistoryPeriod.SIX_MONTHS: 180,
    HistoryPeriod.ONE_YEAR: 365,
}


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends inclusive."""
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class SpreadStats:
    """Running extrema and mean of spread percentages for one bucket."""

    highest_spread: float
    lowest_spread: float
    average_spread: float
    data_points: int

    @classmethod
    def first(cls, spread_percentage: float) -> 'SpreadStats':
        return cls(
            highest_spread=spread_percentage,
            lowest_spread=spread_percentage,
            average_spread=spread_percentage,
            data_points=1,
        )

    def observe(self, spread_percentage: float) -> 'SpreadStats':
        """Fold one more observation in without replaying history."""
        points = self.data_points + 1
        return SpreadStats(
            highest_spread=max(self.highest_spread, spread_percentage),
            lowest_spread=min(self.lowest_spread, spread_percentage),
            average_spread=(self.average_spread * self.data_points + spread_percentage) / points,
            data_points=points,
        )


@dataclass(frozen=True)
class DailySpreadRecord:
    date: date
    route: str
    buy_exchange: str
    sell_exchange: str
    highest_spread: float
    lowest_spread: float
    average_spread: float
    data_points: int
    # Synthetic records are never persisted and carry data_points == 0.
    synthetic: bool = False

    def with_lowest(self, lowest_spread: float) -> 'DailySpreadRecord':
        return replace(self, lowest_spread=lowest_spread)


@dataclass(frozen=True)
class HourlySpreadRecord:
    hour_timestamp: datetime
    route: str
    buy_exchange: str
    sell_exchange: str
    highest_spread: float
    lowest_spread: float
    average_spread: float
    data_points: int
