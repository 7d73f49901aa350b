from typing import Any

from domain.models.market import Currency

from .base import PriceSource


class LunoSource(PriceSource):
    URL = 'https://api.luno.com/api/1/ticker?pair=XBTZAR'
    CURRENCY = Currency.ZAR

    @property
    def name(self) -> str:
        return 'LUNO'

    def parse_price(self, data: dict[str, Any]) -> Any:
        return data['last_trade']


class ValrSource(PriceSource):
    URL = 'https://api.valr.com/v1/public/BTCZAR/marketsummary'
    CURRENCY = Currency.ZAR

    @property
    def name(self) -> str:
        return 'VALR'

    def parse_price(self, data: dict[str, Any]) -> Any:
        return data['lastTradedPrice']


class AltcoinTraderSource(PriceSource):
    URL = 'https://api.altcointrader.co.za/v3/live-stats'
    CURRENCY = Currency.ZAR

    @property
    def name(self) -> str:
        return 'AltcoinTrader'

    def parse_price(self, data: dict[str, Any]) -> Any:
        return data['BTC']['Price']
