"""Vote submission and the post-vote narrative."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from harley_vote.adapters.voting_api_client import VotingApiClient
from harley_vote.domain.errors import ApiStatusError, VotingClientError
from harley_vote.domain.pictures import Picture, PictureId
from harley_vote.domain.state import (
    NarrativeAdvanced,
    NarrativeCancelled,
    NarrativePhase,
    VoteBlocked,
    VoteFailed,
    VoteStarted,
    VoteSucceeded,
)
from harley_vote.services.refresh import DataRefresher
from harley_vote.services.scheduler import Scheduler, Timer
from harley_vote.services.store import StateStore

logger = logging.getLogger(__name__)

NO_SESSION_MESSAGE = "Session not initialized. Please refresh the page."
VOTE_REJECTED_FALLBACK = "Failed to record vote"
VOTE_ERROR_MESSAGE = "Error recording vote. Please try again."

# Seconds spent in each phase before moving to the next one.
NARRATIVE_DELAYS: dict[NarrativePhase, float] = {
    NarrativePhase.SETTLING: 1.0,
    NarrativePhase.THANK_YOU: 2.0,
    NarrativePhase.LEADERBOARD: 4.0,
}


class VoteStatus(StrEnum):
    """How a vote attempt ended."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    NO_SESSION = "no_session"
    UNKNOWN_PICTURE = "unknown_picture"
    IN_PROGRESS = "in_progress"


@dataclass(frozen=True)
class VoteOutcome:
    """Result of a vote attempt with the message shown to the user."""

    status: VoteStatus
    message: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status is VoteStatus.ACCEPTED


@dataclass
class VoteNarrative:
    """Single-slot timed sequence: settling, thank-you, leaderboard, idle."""

    store: StateStore
    scheduler: Scheduler
    _timer: Timer | None = field(default=None, init=False)
    _closed: bool = field(default=False, init=False)

    def begin(self, picture: Picture) -> None:
        """Start the narrative for a vote, replacing any narrative in progress."""
        self._cancel_timer()
        self.store.dispatch(VoteSucceeded(picture))
        if self._closed:
            # Votes finishing after teardown are recorded without overlays.
            self.store.dispatch(NarrativeCancelled())
            return
        self._schedule_next()

    def cancel(self) -> None:
        """Drop the pending step and return to idle."""
        self._cancel_timer()
        if self.store.state.narrative is not NarrativePhase.IDLE:
            self.store.dispatch(NarrativeCancelled())

    def close(self) -> None:
        """Cancel the narrative and refuse to schedule any further steps."""
        self._closed = True
        self.cancel()

    def _schedule_next(self) -> None:
        phase = self.store.state.narrative
        if phase is NarrativePhase.IDLE:
            self._timer = None
            return
        token = self.store.state.narrative_token
        self._timer = self.scheduler.call_later(
            NARRATIVE_DELAYS[phase], lambda: self._advance(token)
        )

    def _advance(self, token: int) -> None:
        self._timer = None
        if token != self.store.state.narrative_token:
            return
        self.store.dispatch(NarrativeAdvanced(token))
        self._schedule_next()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


@dataclass
class VoteSubmitter:
    """Sends votes and hands successful ones to the narrative."""

    api_client: VotingApiClient
    store: StateStore
    refresher: DataRefresher
    narrative: VoteNarrative

    async def submit(self, picture_id: PictureId) -> VoteOutcome:
        """Vote for a picture using the resolved session."""
        state = self.store.state
        session_id = state.session_id
        if not session_id:
            self.store.dispatch(VoteBlocked(NO_SESSION_MESSAGE))
            return VoteOutcome(VoteStatus.NO_SESSION, NO_SESSION_MESSAGE)
        picture = state.find_picture(picture_id)
        if picture is None:
            return VoteOutcome(VoteStatus.UNKNOWN_PICTURE)
        if state.is_voting(picture_id):
            return VoteOutcome(VoteStatus.IN_PROGRESS)

        self.store.dispatch(VoteStarted(picture_id))
        try:
            await self.api_client.cast_vote(picture_id, session_id)
        except ApiStatusError as exc:
            message = exc.message or VOTE_REJECTED_FALLBACK
            logger.info(
                "Vote rejected",
                extra={"picture_id": picture_id, "status_code": exc.status_code},
            )
            self.store.dispatch(VoteFailed(picture_id, message))
            return VoteOutcome(VoteStatus.REJECTED, message)
        except VotingClientError:
            logger.exception("Error voting", extra={"picture_id": picture_id})
            self.store.dispatch(VoteFailed(picture_id, VOTE_ERROR_MESSAGE))
            return VoteOutcome(VoteStatus.REJECTED, VOTE_ERROR_MESSAGE)

        await self.refresher.refresh()
        self.narrative.begin(picture)
        return VoteOutcome(VoteStatus.ACCEPTED)
