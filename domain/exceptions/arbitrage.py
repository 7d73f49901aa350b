class ArbitrageTrackerError(Exception):
    pass


class QuoteSourceError(ArbitrageTrackerError):
    """A price source produced nothing usable this cycle."""

    def __init__(self, source_name: str, message: str):
        super().__init__(f'{source_name}: {message}')
        self.source_name = source_name


class SourceUnavailable(QuoteSourceError):
    pass


class InvalidQuote(QuoteSourceError):
    pass


class NoFxRate(ArbitrageTrackerError):
    pass


class InvalidRange(ArbitrageTrackerError):
    pass


class CorruptStoredRecord(ArbitrageTrackerError):
    pass


class CacheError(ArbitrageTrackerError):
    pass
