import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from domain.exceptions.arbitrage import NoFxRate, QuoteSourceError, SourceUnavailable
from domain.models.market import FxRate, Quote
from infrastructure.cache.keys import CacheKey
from infrastructure.cache.rate_limited_cache import RateLimitedCache
from infrastructure.sources import ExchangeRateAPISource, PriceSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceOutcome:
    """Settled result of one adapter call: exactly one of quote/error is set."""

    source_name: str
    quote: Quote | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.quote is not None


class PriceAggregator:
    """Fans out to every adapter of a market group and keeps whatever succeeded."""

    def __init__(
        self,
        international_sources: Sequence[PriceSource],
        local_sources: Sequence[PriceSource],
        fx_source: ExchangeRateAPISource,
        cache: RateLimitedCache,
        cache_ttl: float = 30,
        source_timeout: float = 5,
    ):
        self.international_sources = list(international_sources)
        self.local_sources = list(local_sources)
        self.fx_source = fx_source
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.source_timeout = source_timeout

    async def settle_all(self, sources: Sequence[PriceSource]) -> list[SourceOutcome]:
        """Run every adapter concurrently and collect each outcome, never short-circuiting."""
        results = await asyncio.gather(
            *(self._fetch_with_timeout(source) for source in sources), return_exceptions=True
        )

        outcomes = []
        for source, result in zip(sources, results, strict=True):
            if isinstance(result, Quote):
                outcomes.append(SourceOutcome(source_name=source.name, quote=result))
            else:
                outcomes.append(SourceOutcome(source_name=source.name, error=result))
        return outcomes

    async def fetch_group(self, sources: Sequence[PriceSource]) -> list[Quote]:
        quotes = []
        for outcome in await self.settle_all(sources):
            if outcome.ok:
                logger.debug(f'Retrieved {outcome.source_name} price: {outcome.quote.price} {outcome.quote.currency.value}')
                quotes.append(outcome.quote)
            else:
                logger.error(f'Error fetching {outcome.source_name} data: {outcome.error}', extra={'source': outcome.source_name})

        logger.info(f'Collected {len(quotes)}/{len(sources)} quotes')
        return quotes

    async def get_international_prices(self) -> list[Quote]:
        return await self._get_group(CacheKey.INTERNATIONAL_PRICES, self.international_sources)

    async def get_local_prices(self) -> list[Quote]:
        return await self._get_group(CacheKey.LOCAL_PRICES, self.local_sources)

    async def get_exchange_rate(self) -> FxRate:
        try:
            return await self.cache.get_or_fetch(CacheKey.EXCHANGE_RATE, self.cache_ttl, self._fetch_fx_rate)
        except QuoteSourceError as e:
            raise NoFxRate(f'No USD/ZAR exchange rate available: {e}') from e

    async def close(self) -> None:
        for source in [*self.international_sources, *self.local_sources, self.fx_source]:
            await source.close()

    async def _get_group(self, key: CacheKey, sources: Sequence[PriceSource]) -> list[Quote]:
        try:
            return await self.cache.get_or_fetch(key, self.cache_ttl, lambda: self._fetch_group_or_raise(key, sources))
        except QuoteSourceError as e:
            logger.warning(f'No quotes available for {key.value}: {e}')
            return []

    async def _fetch_group_or_raise(self, key: CacheKey, sources: Sequence[PriceSource]) -> list[Quote]:
        # An empty cycle counts as a failed fetch so a stale cached group wins over nothing
        quotes = await self.fetch_group(sources)
        if sources and not quotes:
            raise SourceUnavailable(key.value, 'no source produced a usable quote')
        return quotes

    async def _fetch_with_timeout(self, source: PriceSource) -> Quote:
        try:
            return await asyncio.wait_for(source.fetch(), timeout=self.source_timeout)
        except TimeoutError as e:
            raise SourceUnavailable(source.name, f'Timed out after {self.source_timeout}s') from e

    async def _fetch_fx_rate(self) -> FxRate:
        try:
            return await asyncio.wait_for(self.fx_source.fetch(), timeout=self.source_timeout)
        except TimeoutError as e:
            raise SourceUnavailable(self.fx_source.name, f'Timed out after {self.source_timeout}s') from e
