from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	DATABASE_URL: str = 'sqlite+aiosqlite:///./arbitrage_tracker.db'

	REDIS_URL: str = 'redis://localhost:6379'
	CACHE_BACKEND: Literal['memory', 'redis'] = 'memory'

	# Upstream polling
	PRICE_CACHE_TTL_SECONDS: float = 30
	CACHE_RETENTION_SECONDS: int = 86400
	SOURCE_TIMEOUT_SECONDS: float = 5
	FX_RATE_URL: str = 'https://api.exchangerate-api.com/v4/latest/USD'
	USER_AGENT: str = 'ArbitrageTracker/1.0'

	HISTORY_MAX_RANGE_DAYS: int = 730

	# Application
	HOST: str = '127.0.0.1'
	PORT: int = 8000
	APP_NAME: str = 'Arbitrage Tracker API'
	DEBUG: bool = False
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
