from typing import Any

from domain.exceptions.arbitrage import InvalidQuote
from domain.models.market import Currency

from .base import PriceSource


class BitstampSource(PriceSource):
    URL = 'https://www.bitstamp.net/api/v2/ticker/btcusd/'
    CURRENCY = Currency.USD

    @property
    def name(self) -> str:
        return 'Bitstamp'

    def parse_price(self, data: dict[str, Any]) -> Any:
        return data['last']


class BitfinexSource(PriceSource):
    URL = 'https://api-pub.bitfinex.com/v2/ticker/tBTCUSD'
    CURRENCY = Currency.USD

    @property
    def name(self) -> str:
        return 'Bitfinex'

    def parse_price(self, data: list[Any]) -> Any:
        # [BID, BID_SIZE, ASK, ASK_SIZE, DAILY_CHANGE, DAILY_CHANGE_REL, LAST_PRICE, ...]
        return data[6]


class BinanceSource(PriceSource):
    URL = 'https://api.binance.us/api/v3/ticker/price?symbol=BTCUSD'
    CURRENCY = Currency.USD

    @property
    def name(self) -> str:
        return 'Binance'

    def parse_price(self, data: dict[str, Any]) -> Any:
        return data['price']


class KrakenSource(PriceSource):
    URL = 'https://api.kraken.com/0/public/Ticker?pair=XBTUSD'
    CURRENCY = Currency.USD

    @property
    def name(self) -> str:
        return 'Kraken'

    def parse_price(self, data: dict[str, Any]) -> Any:
        if data.get('error'):
            raise InvalidQuote(self.name, f"API error: {data['error']}")
        return data['result']['XXBTZUSD']['c'][0]


class KuCoinSource(PriceSource):
    URL = 'https://api.kucoin.com/api/v1/market/stats?symbol=BTC-USDT'
    CURRENCY = Currency.USD

    @property
    def name(self) -> str:
        return 'KuCoin'

    def parse_price(self, data: dict[str, Any]) -> Any:
        return data['data']['last']
