import logging

from redis.asyncio import Redis

from application.services import ArbitrageService, PriceAggregator, SpreadAccumulator
from config.settings import Settings, get_settings
from infrastructure.cache.rate_limited_cache import CacheStore, InMemoryCacheStore, RateLimitedCache
from infrastructure.cache.redis_cache import RedisCacheStore
from infrastructure.persistence.database import Database
from infrastructure.sources import (
	INTERNATIONAL_SOURCES,
	LOCAL_SOURCES,
	ExchangeRateAPISource,
	build_sources,
)

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	db: Database | None = None
	redis_client: Redis | None = None
	aggregator: PriceAggregator | None = None
	accumulator: SpreadAccumulator | None = None
	arbitrage_service: ArbitrageService | None = None


deps = AppDependencies()


def _build_cache_store(settings: Settings) -> CacheStore:
	if settings.CACHE_BACKEND == 'redis':
		deps.redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
		return RedisCacheStore(deps.redis_client, retention_seconds=settings.CACHE_RETENTION_SECONDS)
	return InMemoryCacheStore()


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()

	deps.db = Database(settings.DATABASE_URL, echo=settings.DEBUG)

	timeout = settings.SOURCE_TIMEOUT_SECONDS
	deps.aggregator = PriceAggregator(
		international_sources=build_sources(INTERNATIONAL_SOURCES, timeout, settings.USER_AGENT),
		local_sources=build_sources(LOCAL_SOURCES, timeout, settings.USER_AGENT),
		fx_source=ExchangeRateAPISource(timeout=timeout, user_agent=settings.USER_AGENT, url=settings.FX_RATE_URL),
		cache=RateLimitedCache(_build_cache_store(settings)),
		cache_ttl=settings.PRICE_CACHE_TTL_SECONDS,
		source_timeout=timeout,
	)
	deps.accumulator = SpreadAccumulator(deps.db)
	deps.arbitrage_service = ArbitrageService(
		aggregator=deps.aggregator,
		accumulator=deps.accumulator,
		db=deps.db,
		max_range_days=settings.HISTORY_MAX_RANGE_DAYS,
	)
	logger.info(f'Dependencies initialized (cache backend: {settings.CACHE_BACKEND})')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.accumulator:
		await deps.accumulator.drain()
	if deps.aggregator:
		await deps.aggregator.close()
	if deps.redis_client:
		await deps.redis_client.aclose()
	if deps.db:
		await deps.db.close()

	logger.info('Cleanup complete')


def get_arbitrage_service() -> ArbitrageService:
	if deps.arbitrage_service is None:
		raise RuntimeError('Arbitrage service not initialized')
	return deps.arbitrage_service
