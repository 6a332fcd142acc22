"""Timer abstraction used for polling and the vote narrative."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


class Timer(Protocol):
    """Handle to a pending callback."""

    def cancel(self) -> None:
        """Prevent the callback from running if it has not run yet."""


class Scheduler(Protocol):
    """Schedules plain callbacks after a delay in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        """Run ``callback`` once after ``delay`` seconds."""


@dataclass
class AsyncioScheduler(Scheduler):
    """Scheduler backed by the running asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        """Schedule on the current loop; must be called from a coroutine."""
        return asyncio.get_running_loop().call_later(delay, callback)
