# nosec B101


import pytest
from decimal import Decimal

from application.services.arbitrage_calculator import ArbitrageCalculator
from domain.models.market import Currency, Quote


def usd(name, price):
    return Quote(exchange_name=name, price=Decimal(price), currency=Currency.USD)


def zar(name, price):
    return Quote(exchange_name=name, price=Decimal(price), currency=Currency.ZAR)


@pytest.fixture
def calculator():
    return ArbitrageCalculator()


def test_single_pair_spread_in_zar(calculator):
    opportunities = calculator.compute([usd('Binance', '60000')], [zar('VALR', '1150000')], Decimal('19.0'))

    assert len(opportunities) == 1
    opportunity = opportunities[0]
    assert opportunity.buy_price_zar == Decimal('1140000')
    assert opportunity.sell_price_zar == Decimal('1150000')
    assert opportunity.spread == Decimal('10000')
    assert opportunity.spread_percentage == pytest.approx(0.877, abs=1e-3)
    assert opportunity.route == 'Binance → VALR'


def test_returns_every_pair_sorted_by_spread(calculator):
    international = [usd('Bitstamp', '60500'), usd('Binance', '60000'), usd('Kraken', '61000')]
    local = [zar('LUNO', '1160000'), zar('VALR', '1150000')]

    opportunities = calculator.compute(international, local, Decimal('19'))

    assert len(opportunities) == 6
    percentages = [o.spread_percentage for o in opportunities]
    assert percentages == sorted(percentages, reverse=True)
    assert opportunities[0].route == 'Binance → LUNO'
    assert {o.route for o in opportunities} == {
        f'{i.exchange_name} → {l.exchange_name}' for i in international for l in local
    }


def test_negative_spreads_are_kept(calculator):
    opportunities = calculator.compute([usd('Kraken', '62000')], [zar('VALR', '1150000')], Decimal('19'))

    assert opportunities[0].spread < 0
    assert opportunities[0].spread_percentage < 0


def test_equal_spreads_keep_input_order(calculator):
    opportunities = calculator.compute(
        [usd('Binance', '60000'), usd('Bitstamp', '60000')], [zar('VALR', '1150000')], Decimal('19')
    )

    assert [o.buy_exchange for o in opportunities] == ['Binance', 'Bitstamp']


@pytest.mark.parametrize('international, local', [
    ([], [zar('VALR', '1150000')]),
    ([usd('Binance', '60000')], []),
    ([], []),
])
def test_empty_side_yields_no_opportunities(calculator, international, local):
    assert calculator.compute(international, local, Decimal('19')) == []
