"""Picture and stats refresh, once or on a polling timer."""

import asyncio
import logging
from dataclasses import dataclass, field

from harley_vote.adapters.voting_api_client import VotingApiClient
from harley_vote.domain.errors import VotingClientError
from harley_vote.domain.state import PicturesLoaded, StatsLoaded
from harley_vote.services.scheduler import Scheduler, Timer
from harley_vote.services.store import StateStore

logger = logging.getLogger(__name__)


@dataclass
class DataRefresher:
    """Replaces the local picture and stats snapshots with fresh copies."""

    api_client: VotingApiClient
    store: StateStore
    scheduler: Scheduler
    interval_seconds: float = 30.0
    _timer: Timer | None = field(default=None, init=False)
    _inflight: asyncio.Task[None] | None = field(default=None, init=False)

    @property
    def polling(self) -> bool:
        return self._timer is not None

    async def refresh(self) -> None:
        """Fetch pictures and stats; a failed fetch keeps the old snapshot."""
        await asyncio.gather(self._refresh_pictures(), self._refresh_stats())

    def start(self) -> None:
        """Begin polling every ``interval_seconds``."""
        if self._timer is not None:
            return
        self._schedule_tick()

    def stop(self) -> None:
        """Stop polling and abandon a tick refresh that is still running."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    def _schedule_tick(self) -> None:
        self._timer = self.scheduler.call_later(self.interval_seconds, self._tick)

    def _tick(self) -> None:
        self._schedule_tick()
        if self._inflight is not None and not self._inflight.done():
            logger.info("Previous refresh still running, skipping tick")
            return
        self._inflight = asyncio.get_running_loop().create_task(self.refresh())

    async def _refresh_pictures(self) -> None:
        try:
            pictures = await self.api_client.list_pictures()
        except VotingClientError:
            logger.exception("Error fetching pictures")
            return
        self.store.dispatch(PicturesLoaded(tuple(pictures)))

    async def _refresh_stats(self) -> None:
        try:
            stats = await self.api_client.get_stats()
        except VotingClientError:
            logger.exception("Error fetching stats")
            return
        self.store.dispatch(StatsLoaded(stats))
