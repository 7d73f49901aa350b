from abc import ABC, abstractmethod
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from domain.exceptions.arbitrage import InvalidQuote, SourceUnavailable
from domain.models.market import Currency, Quote

DEFAULT_TIMEOUT = 5
DEFAULT_USER_AGENT = 'ArbitrageTracker/1.0'


def to_price(source_name: str, value: Any) -> Decimal:
    """Coerce a raw JSON value into a positive, finite Decimal or raise InvalidQuote."""
    if isinstance(value, bool):
        raise InvalidQuote(source_name, f'Non-numeric price: {value!r}')
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidQuote(source_name, f'Non-numeric price: {value!r}') from e

    if not price.is_finite() or price <= 0:
        raise InvalidQuote(source_name, f'Non-positive price: {value!r}')
    return price


class JsonHttpSource(ABC):
    """Fetches one JSON document from a public endpoint.

    Transport failures become SourceUnavailable, undecodable bodies become
    InvalidQuote. No retries: the next refresh cycle is the retry.
    """

    URL: str = ''

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        url: str | None = None,
    ):
        self.url = url or self.URL
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={'User-Agent': user_agent, 'accept': 'application/json'},
        )

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    async def _request(self) -> Any:
        try:
            response = await self._client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SourceUnavailable(
                self.name, f'HTTP error {e.response.status_code}: {e.response.text[:200]}'
            ) from e
        except httpx.RequestError as e:
            raise SourceUnavailable(self.name, f'Request failed: {e.__class__.__name__}') from e

        try:
            return response.json()
        except ValueError as e:
            raise InvalidQuote(self.name, f'Response is not valid JSON: {e}') from e

    async def close(self) -> None:
        await self._client.aclose()


class PriceSource(JsonHttpSource):
    """One exchange's BTC ticker, normalised into a Quote."""

    CURRENCY: Currency

    @abstractmethod
    def parse_price(self, data: Any) -> Any:
        """Pull the raw last-trade price out of this exchange's response shape."""
        ...

    async def fetch(self) -> Quote:
        data = await self._request()
        try:
            raw_price = self.parse_price(data)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise InvalidQuote(self.name, f'Unexpected response shape: {e!r}') from e

        return Quote(
            exchange_name=self.name,
            price=to_price(self.name, raw_price),
            currency=self.CURRENCY,
            observed_at=datetime.now(UTC),
        )
