import httpx

from .base import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, JsonHttpSource, PriceSource, to_price
from .fx import ExchangeRateAPISource
from .international import BinanceSource, BitfinexSource, BitstampSource, KrakenSource, KuCoinSource
from .local import AltcoinTraderSource, LunoSource, ValrSource

INTERNATIONAL_SOURCES: tuple[type[PriceSource], ...] = (
    BitstampSource,
    BitfinexSource,
    BinanceSource,
    KrakenSource,
    KuCoinSource,
)

LOCAL_SOURCES: tuple[type[PriceSource], ...] = (
    LunoSource,
    ValrSource,
    AltcoinTraderSource,
)


def build_sources(
    source_types: tuple[type[PriceSource], ...],
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
    client: httpx.AsyncClient | None = None,
) -> list[PriceSource]:
    return [
        source_type(client=client, timeout=timeout, user_agent=user_agent)
        for source_type in source_types
    ]


__all__ = [
    'AltcoinTraderSource',
    'BinanceSource',
    'BitfinexSource',
    'BitstampSource',
    'ExchangeRateAPISource',
    'INTERNATIONAL_SOURCES',
    'JsonHttpSource',
    'KrakenSource',
    'KuCoinSource',
    'LOCAL_SOURCES',
    'LunoSource',
    'PriceSource',
    'ValrSource',
    'build_sources',
    'to_price',
]
