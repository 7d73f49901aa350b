from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum


class Currency(str, Enum):
    USD = 'USD'
    ZAR = 'ZAR'


ROUTE_SEPARATOR = ' → '


def make_route(buy_exchange: str, sell_exchange: str) -> str:
    return f'{buy_exchange}{ROUTE_SEPARATOR}{sell_exchange}'


@dataclass(frozen=True)
class Quote:
    exchange_name: str
    price: Decimal
    currency: Currency
    observed_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class FxRate:
    """USD -> ZAR conversion rate."""

    rate: Decimal
    observed_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class Opportunity:
    buy_exchange: str
    sell_exchange: str
    buy_price_zar: Decimal
    sell_price_zar: Decimal
    spread: Decimal
    spread_percentage: float

    @property
    def route(self) -> str:
        return make_route(self.buy_exchange, self.sell_exchange)
