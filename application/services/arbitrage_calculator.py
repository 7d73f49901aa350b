from collections.abc import Sequence
from decimal import Decimal

from domain.models.market import Currency, Opportunity, Quote


class ArbitrageCalculator:
    """Pure cross-join of international and local quotes into ranked opportunities."""

    def compute(
        self, international_quotes: Sequence[Quote], local_quotes: Sequence[Quote], fx_rate: Decimal
    ) -> list[Opportunity]:
        """
        Pair every international quote with every local quote.

        International prices are converted to ZAR through ``fx_rate`` (USD -> ZAR)
        so both legs are compared in the same currency. The result is sorted by
        spread percentage, highest first; equal spreads keep input order.
        """
        opportunities = []
        for international in international_quotes:
            buy_price = self._in_zar(international, fx_rate)
            for local in local_quotes:
                sell_price = self._in_zar(local, fx_rate)
                spread = sell_price - buy_price
                opportunities.append(
                    Opportunity(
                        buy_exchange=international.exchange_name,
                        sell_exchange=local.exchange_name,
                        buy_price_zar=buy_price,
                        sell_price_zar=sell_price,
                        spread=spread,
                        spread_percentage=float(spread / buy_price * 100),
                    )
                )

        opportunities.sort(key=lambda o: o.spread_percentage, reverse=True)
        return opportunities

    @staticmethod
    def _in_zar(quote: Quote, fx_rate: Decimal) -> Decimal:
        if quote.currency is Currency.ZAR:
            return quote.price
        return quote.price * fx_rate
