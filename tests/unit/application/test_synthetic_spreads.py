# nosec B101


import pytest
from datetime import date
from decimal import Decimal

from application.services import synthetic_spreads
from application.services.synthetic_spreads import (
    is_weekend,
    repaired_low,
    seeded_random,
    synthesize_baseline,
    synthesize_degraded,
    synthesize_from_market,
)
from domain.models.market import Opportunity
from domain.models.spreads import DateRange


RANGE = DateRange(start=date(2025, 1, 1), end=date(2025, 3, 31))


def test_seeded_random_is_reproducible_and_bounded():
    values = [seeded_random(seed, date(2025, 1, 1)) for seed in range(50)]

    assert values == [seeded_random(seed, date(2025, 1, 1)) for seed in range(50)]
    assert all(0 <= v < 1 for v in values)


def test_is_weekend():
    assert is_weekend(date(2025, 3, 8))
    assert is_weekend(date(2025, 3, 9))
    assert not is_weekend(date(2025, 3, 10))


@pytest.mark.parametrize('high, expected', [(4.0, 3.8), (0.6, 0.5), (0.3, 0.3), (-1.0, -1.0)])
def test_repaired_low_never_exceeds_high(high, expected):
    assert repaired_low(high) == pytest.approx(expected)


@pytest.mark.parametrize('generate', [
    synthesize_baseline,
    synthesize_degraded,
    lambda r: synthesize_from_market(
        r, Opportunity('Binance', 'VALR', Decimal('1'), Decimal('1'), Decimal('0'), -0.4)
    ),
])
def test_generated_series_is_well_formed(generate):
    records = generate(RANGE)

    assert len(records) == RANGE.days
    assert all(r.lowest_spread <= r.highest_spread for r in records)
    assert all(r.lowest_spread > 0 for r in records)
    assert all(r.synthetic and r.data_points == 0 for r in records)
    assert records == generate(RANGE)


def make_best(spread_percentage):
    return Opportunity('Binance', 'VALR', Decimal('1'), Decimal('1'), Decimal('0'), spread_percentage)


@pytest.mark.parametrize('generate, separation', [
    (synthesize_baseline, 0.05),
    (lambda r: synthesize_from_market(r, make_best(0.9)), 0.05),
    (lambda r: synthesize_from_market(r, make_best(-0.4)), 0.05),
    (synthesize_degraded, 0.1),
])
def test_low_stays_below_high_by_minimum_separation(generate, separation):
    for record in generate(RANGE):
        assert record.highest_spread - record.lowest_spread >= separation - 1e-9


def test_market_series_moves_with_best_spread():
    def mean_average(best):
        records = synthesize_from_market(RANGE, make_best(best))
        return sum(r.average_spread for r in records) / len(records)

    assert mean_average(3.4) - mean_average(2.0) == pytest.approx(1.4, abs=0.02)
    assert mean_average(2.0) > mean_average(0.6)


WEEKDAY = DateRange(start=date(2025, 3, 10), end=date(2025, 3, 10))
WEEKEND_DAY = DateRange(start=date(2025, 3, 8), end=date(2025, 3, 8))


@pytest.fixture
def flat_noise(monkeypatch):
    monkeypatch.setattr(synthetic_spreads, 'seeded_random', lambda seed, day: 0.5)


@pytest.mark.usefixtures('flat_noise')
def test_market_series_is_lower_on_weekends():
    weekday = synthesize_from_market(WEEKDAY, make_best(2.0))[0]
    weekend = synthesize_from_market(WEEKEND_DAY, make_best(2.0))[0]

    assert weekday.highest_spread == pytest.approx(2.2)
    assert weekend.highest_spread == pytest.approx(2.04)
    assert weekend.lowest_spread < weekday.lowest_spread


@pytest.mark.usefixtures('flat_noise')
def test_baseline_series_is_dampened_on_weekends():
    weekday = synthesize_baseline(WEEKDAY)[0]
    weekend = synthesize_baseline(WEEKEND_DAY)[0]

    assert weekday.lowest_spread == pytest.approx(0.65)
    assert weekend.lowest_spread == pytest.approx(0.52)
    assert weekend.highest_spread < weekday.highest_spread
