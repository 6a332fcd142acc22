"""Owner of the client application state."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from harley_vote.domain.state import AppState, Event, reduce

logger = logging.getLogger(__name__)

Listener = Callable[[AppState, Event], None]


@dataclass
class StateStore:
    """Holds the current state and applies events to it."""

    state: AppState = field(default_factory=AppState)
    history: list[Event] = field(default_factory=list)
    _listeners: list[Listener] = field(default_factory=list, init=False)

    def dispatch(self, event: Event) -> AppState:
        """Apply an event, notify listeners and return the new state."""
        self.state = reduce(self.state, event)
        self.history.append(event)
        for listener in list(self._listeners):
            try:
                listener(self.state, event)
            except Exception:
                logger.exception(
                    "State listener failed", extra={"event": type(event).__name__}
                )
        return self.state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


def replay(events: list[Event], initial: AppState | None = None) -> AppState:
    """Rebuild a state from a recorded event sequence."""
    state = initial or AppState()
    for event in events:
        state = reduce(state, event)
    return state
