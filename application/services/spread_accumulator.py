import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from domain.models.market import Opportunity, make_route
from domain.models.spreads import DailySpreadRecord
from infrastructure.persistence.database import Database
from infrastructure.persistence.repositories.spreads import SpreadRepository

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def floor_to_hour(moment: datetime) -> datetime:
    return moment.astimezone(UTC).replace(minute=0, second=0, microsecond=0)


class SpreadAccumulator:
    """Folds observed spread percentages into per-day and per-hour running statistics.

    Writes are serialised through one lock so two refresh cycles cannot race
    on the same (bucket, route) row.
    """

    def __init__(self, db: Database, clock: Callable[[], datetime] = _utc_now):
        self.db = db
        self._clock = clock
        self._write_lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()

    async def record(
        self,
        route: str,
        buy_exchange: str,
        sell_exchange: str,
        spread_percentage: float,
        observed_at: datetime | None = None,
    ) -> DailySpreadRecord:
        observed_at = observed_at or self._clock()
        day = observed_at.astimezone(UTC).date()

        async with self._write_lock:
            async with self.db.session() as session:
                repository = SpreadRepository(session)
                daily = await repository.record_daily_observation(
                    day, route, buy_exchange, sell_exchange, spread_percentage
                )
                await repository.record_hourly_observation(
                    floor_to_hour(observed_at), route, buy_exchange, sell_exchange, spread_percentage
                )
        return daily

    def schedule(self, opportunities: Iterable[Opportunity]) -> int:
        """Record each opportunity in the background; returns how many writes were queued."""
        observed_at = self._clock()
        queued = 0
        for opportunity in opportunities:
            task = asyncio.create_task(self._record_quietly(opportunity, observed_at))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            queued += 1
        return queued

    async def drain(self) -> None:
        """Wait for every queued background write to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def _record_quietly(self, opportunity: Opportunity, observed_at: datetime) -> None:
        try:
            await self.record(
                make_route(opportunity.buy_exchange, opportunity.sell_exchange),
                opportunity.buy_exchange,
                opportunity.sell_exchange,
                opportunity.spread_percentage,
                observed_at=observed_at,
            )
        except Exception as e:
            logger.error(f'Error recording spread data for {opportunity.route}: {e}', extra={'route': opportunity.route})
