"""
Deterministic stand-in spread history for days without enough stored data.

The constants below are dashboard tuning values, not a market model. Each
day's pseudorandom draws are seeded from (day index, days since epoch) so the
same calendar day always regenerates the same numbers.
"""
import math
from datetime import date, timedelta

from domain.models.market import Opportunity, make_route
from domain.models.spreads import DailySpreadRecord, DateRange

# Share of requested days that must have stored data before it is served as-is
COVERAGE_THRESHOLD = 0.3

# Stored record repair: a low that is not below the high becomes high - 0.2, floored at 0.5
REPAIR_LOW_OFFSET = 0.2
REPAIR_LOW_FLOOR = 0.5

# Shared shaping
WEEKEND_DAMPENING = 0.8
MIN_SPREAD = 0.1
MIN_SEPARATION = 0.05

# Market-anchored generator (best live opportunity as base)
MARKET_TREND_PERIOD_DAYS = 14
MARKET_TREND_AMPLITUDE = 0.3
MARKET_NOISE_RANGE = 0.6
MARKET_WEEKEND_OFFSET = -0.2
MARKET_BASE_FLOOR = 0.3
MARKET_HIGH_NOISE = 0.4
MARKET_LOW_NOISE = 0.3
MARKET_MIN_HIGH_ABOVE_BASE = 0.1

# Live data reachable but no opportunities to anchor on
BASELINE_SPREAD = 0.6
BASELINE_TREND_PERIOD_DAYS = 10
BASELINE_TREND_AMPLITUDE = 0.2
BASELINE_NOISE = 0.3
BASELINE_HIGH_NOISE = 0.3
BASELINE_LOW_NOISE = 0.2

# Live data unreachable
DEGRADED_BASELINE_SPREAD = 2.0
DEGRADED_TREND_PERIOD_DAYS = 3
DEGRADED_TREND_AMPLITUDE = 0.8
DEGRADED_NOISE = 1.5
DEGRADED_HIGH_NOISE = 1.2
DEGRADED_LOW_NOISE = 0.7
DEGRADED_LOW_FLOOR = 0.3
DEGRADED_MIN_SEPARATION = 0.1

FALLBACK_BUY_EXCHANGE = 'Binance'
FALLBACK_SELL_EXCHANGE = 'AltcoinTrader'

_EPOCH = date(1970, 1, 1)


def days_since_epoch(day: date) -> int:
    return (day - _EPOCH).days


def seeded_random(seed: int, day: date) -> float:
    """Fractional part of a scaled sine: a cheap reproducible value in [0, 1)."""
    x = math.sin(seed + days_since_epoch(day)) * 10000
    return x - math.floor(x)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def repaired_low(highest_spread: float) -> float:
    return min(max(REPAIR_LOW_FLOOR, highest_spread - REPAIR_LOW_OFFSET), highest_spread)


def _days(date_range: DateRange):
    for day_index in range(date_range.days):
        yield day_index, date_range.start + timedelta(days=day_index)


def _record(
    day: date, buy_exchange: str, sell_exchange: str, high: float, low: float, separation: float = MIN_SEPARATION
) -> DailySpreadRecord:
    # Rounding must not pull low within `separation` of high
    high = round(high, 2)
    low = min(round(low, 2), round(high - separation, 2))
    return DailySpreadRecord(
        date=day,
        route=make_route(buy_exchange, sell_exchange),
        buy_exchange=buy_exchange,
        sell_exchange=sell_exchange,
        highest_spread=high,
        lowest_spread=low,
        average_spread=round((high + low) / 2, 2),
        data_points=0,
        synthetic=True,
    )


def synthesize_from_market(date_range: DateRange, best: Opportunity) -> list[DailySpreadRecord]:
    records = []
    for day_index, day in _days(date_range):
        weekend = is_weekend(day)
        volatility = WEEKEND_DAMPENING if weekend else 1.0

        trend = math.sin(day_index / MARKET_TREND_PERIOD_DAYS * math.pi) * MARKET_TREND_AMPLITUDE
        noise = (seeded_random(day_index, day) - 0.5) * MARKET_NOISE_RANGE
        weekend_effect = MARKET_WEEKEND_OFFSET if weekend else 0.0
        variation = (trend + noise + weekend_effect) * volatility

        base = max(MARKET_BASE_FLOOR, best.spread_percentage + variation)
        high = base + seeded_random(day_index + 100, day) * MARKET_HIGH_NOISE
        low = max(MIN_SPREAD, base - seeded_random(day_index + 200, day) * MARKET_LOW_NOISE)

        daily_high = max(base + MARKET_MIN_HIGH_ABOVE_BASE, high)
        daily_low = max(MIN_SPREAD, min(low, daily_high - MIN_SEPARATION))
        records.append(_record(day, best.buy_exchange, best.sell_exchange, daily_high, daily_low))
    return records


def synthesize_baseline(date_range: DateRange) -> list[DailySpreadRecord]:
    records = []
    for day_index, day in _days(date_range):
        volatility = WEEKEND_DAMPENING if is_weekend(day) else 1.0

        trend = math.sin(day_index / BASELINE_TREND_PERIOD_DAYS * math.pi) * BASELINE_TREND_AMPLITUDE
        base = BASELINE_SPREAD + trend + seeded_random(day_index, day) * BASELINE_NOISE
        high = (base + seeded_random(day_index + 50, day) * BASELINE_HIGH_NOISE) * volatility
        low = (base - seeded_random(day_index + 150, day) * BASELINE_LOW_NOISE) * volatility

        daily_high = max(base + MARKET_MIN_HIGH_ABOVE_BASE, high)
        daily_low = max(MIN_SPREAD, min(low, daily_high - MIN_SEPARATION))
        records.append(_record(day, FALLBACK_BUY_EXCHANGE, FALLBACK_SELL_EXCHANGE, daily_high, daily_low))
    return records


def synthesize_degraded(date_range: DateRange) -> list[DailySpreadRecord]:
    records = []
    for day_index, day in _days(date_range):
        trend = math.sin(day_index / DEGRADED_TREND_PERIOD_DAYS) * DEGRADED_TREND_AMPLITUDE
        base = DEGRADED_BASELINE_SPREAD + trend + seeded_random(day_index, day) * DEGRADED_NOISE
        daily_high = base + seeded_random(day_index + 300, day) * DEGRADED_HIGH_NOISE
        low = max(DEGRADED_LOW_FLOOR, base - seeded_random(day_index + 400, day) * DEGRADED_LOW_NOISE)

        daily_low = min(low, daily_high - DEGRADED_MIN_SEPARATION)
        records.append(
            _record(day, FALLBACK_BUY_EXCHANGE, FALLBACK_SELL_EXCHANGE, daily_high, daily_low, DEGRADED_MIN_SEPARATION)
        )
    return records
