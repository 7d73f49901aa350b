from enum import Enum


class CacheKey(str, Enum):
    INTERNATIONAL_PRICES = 'international-prices'
    LOCAL_PRICES = 'local-prices'
    EXCHANGE_RATE = 'exchange-rate'
