# nosec B101


import pytest
from decimal import Decimal
from unittest.mock import Mock, AsyncMock
import httpx

from infrastructure.sources import ExchangeRateAPISource
from domain.exceptions.arbitrage import InvalidQuote, SourceUnavailable


@pytest.mark.asyncio
async def test_fetch_returns_zar_rate():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_response = Mock()
    mock_response.json.return_value = {'base': 'USD', 'rates': {'EUR': 0.92, 'ZAR': 18.52}}
    mock_response.raise_for_status = Mock()
    mock_client.get.return_value = mock_response

    source = ExchangeRateAPISource(client=mock_client)

    fx_rate = await source.fetch()

    assert fx_rate.rate == Decimal('18.52')
    mock_client.get.assert_called_once_with('https://api.exchangerate-api.com/v4/latest/USD')


@pytest.mark.asyncio
async def test_fetch_uses_configured_url():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_response = Mock()
    mock_response.json.return_value = {'rates': {'ZAR': 19}}
    mock_response.raise_for_status = Mock()
    mock_client.get.return_value = mock_response

    source = ExchangeRateAPISource(client=mock_client, url='http://fx.local/latest')
    await source.fetch()

    mock_client.get.assert_called_once_with('http://fx.local/latest')


@pytest.mark.asyncio
async def test_fetch_missing_zar_raises_invalid_quote():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_response = Mock()
    mock_response.json.return_value = {'rates': {'EUR': 0.92}}
    mock_response.raise_for_status = Mock()
    mock_client.get.return_value = mock_response

    source = ExchangeRateAPISource(client=mock_client)

    with pytest.raises(InvalidQuote) as exc_info:
        await source.fetch()

    assert 'ZAR' in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_timeout_raises_source_unavailable():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = httpx.ReadTimeout('timed out')

    source = ExchangeRateAPISource(client=mock_client)

    with pytest.raises(SourceUnavailable):
        await source.fetch()


@pytest.mark.asyncio
async def test_close_closes_client():
    mock_client = AsyncMock(spec=httpx.AsyncClient)

    source = ExchangeRateAPISource(client=mock_client)
    await source.close()

    mock_client.aclose.assert_awaited_once()
