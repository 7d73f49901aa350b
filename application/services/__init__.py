from .arbitrage_calculator import ArbitrageCalculator
from .arbitrage_service import ArbitrageService
from .history_resolver import HistoricalSeriesResolver
from .price_aggregator import PriceAggregator, SourceOutcome
from .spread_accumulator import SpreadAccumulator

__all__ = [
    'ArbitrageCalculator',
    'ArbitrageService',
    'HistoricalSeriesResolver',
    'PriceAggregator',
    'SourceOutcome',
    'SpreadAccumulator',
]
