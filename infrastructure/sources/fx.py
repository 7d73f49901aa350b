from datetime import UTC, datetime

from domain.exceptions.arbitrage import InvalidQuote
from domain.models.market import Currency, FxRate

from .base import JsonHttpSource, to_price


class ExchangeRateAPISource(JsonHttpSource):
    """USD -> ZAR rate from exchangerate-api.com."""

    URL = 'https://api.exchangerate-api.com/v4/latest/USD'

    @property
    def name(self) -> str:
        return 'exchangerate-api'

    async def fetch(self) -> FxRate:
        data = await self._request()
        try:
            raw_rate = data['rates'][Currency.ZAR.value]
        except (KeyError, TypeError) as e:
            raise InvalidQuote(self.name, 'Missing ZAR rate in response') from e

        return FxRate(rate=to_price(self.name, raw_rate), observed_at=datetime.now(UTC))
