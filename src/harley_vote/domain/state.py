"""Client application state and its transitions.

Every change to :class:`AppState` is expressed as an event and applied with
:func:`reduce`, which never mutates its input. Replaying the same events from
the same starting state always yields the same state.
"""

from dataclasses import dataclass, field, replace
from enum import StrEnum

from harley_vote.domain.pictures import Picture, PictureId, Stats


class NarrativePhase(StrEnum):
    """Steps of the scripted sequence that follows a successful vote."""

    IDLE = "idle"
    SETTLING = "settling"
    THANK_YOU = "thank_you"
    LEADERBOARD = "leaderboard"


NEXT_PHASE: dict[NarrativePhase, NarrativePhase] = {
    NarrativePhase.SETTLING: NarrativePhase.THANK_YOU,
    NarrativePhase.THANK_YOU: NarrativePhase.LEADERBOARD,
    NarrativePhase.LEADERBOARD: NarrativePhase.IDLE,
}


@dataclass(frozen=True)
class AppState:
    """Everything the client knows at a point in time."""

    session_id: str | None = None
    pictures: tuple[Picture, ...] = ()
    stats: Stats | None = None
    loading: bool = True
    voting: dict[PictureId, bool] = field(default_factory=dict)
    narrative: NarrativePhase = NarrativePhase.IDLE
    narrative_token: int = 0
    last_voted_picture: Picture | None = None
    notice: str | None = None

    @property
    def show_thank_you(self) -> bool:
        return (
            self.narrative is NarrativePhase.THANK_YOU
            and self.last_voted_picture is not None
        )

    @property
    def show_leaderboard(self) -> bool:
        return self.narrative is NarrativePhase.LEADERBOARD

    def is_voting(self, picture_id: PictureId) -> bool:
        """Return true while a vote for the picture is in flight."""
        return self.voting.get(picture_id, False)

    def find_picture(self, picture_id: PictureId) -> Picture | None:
        """Return the picture with the given id from the current snapshot."""
        for picture in self.pictures:
            if picture.id == picture_id:
                return picture
        return None


@dataclass(frozen=True)
class SessionResolved:
    session_id: str


@dataclass(frozen=True)
class PicturesLoaded:
    pictures: tuple[Picture, ...]


@dataclass(frozen=True)
class StatsLoaded:
    stats: Stats


@dataclass(frozen=True)
class LoadingFinished:
    pass


@dataclass(frozen=True)
class VoteBlocked:
    """A vote was refused before any request was sent."""

    message: str


@dataclass(frozen=True)
class VoteStarted:
    picture_id: PictureId


@dataclass(frozen=True)
class VoteFailed:
    picture_id: PictureId
    message: str


@dataclass(frozen=True)
class VoteSucceeded:
    picture: Picture


@dataclass(frozen=True)
class NarrativeAdvanced:
    """The narrative timer fired for the narrative identified by ``token``."""

    token: int


@dataclass(frozen=True)
class NarrativeCancelled:
    pass


Event = (
    SessionResolved
    | PicturesLoaded
    | StatsLoaded
    | LoadingFinished
    | VoteBlocked
    | VoteStarted
    | VoteFailed
    | VoteSucceeded
    | NarrativeAdvanced
    | NarrativeCancelled
)


def reduce(state: AppState, event: Event) -> AppState:  # noqa: PLR0911
    """Apply a single event and return the resulting state."""
    if isinstance(event, SessionResolved):
        return replace(state, session_id=event.session_id)
    if isinstance(event, PicturesLoaded):
        return replace(state, pictures=event.pictures)
    if isinstance(event, StatsLoaded):
        return replace(state, stats=event.stats)
    if isinstance(event, LoadingFinished):
        return replace(state, loading=False)
    if isinstance(event, VoteBlocked):
        return replace(state, notice=event.message)
    if isinstance(event, VoteStarted):
        return replace(
            state,
            voting=_with_flag(state.voting, event.picture_id, True),
            notice=None,
        )
    if isinstance(event, VoteFailed):
        return replace(
            state,
            voting=_with_flag(state.voting, event.picture_id, False),
            notice=event.message,
        )
    if isinstance(event, VoteSucceeded):
        voting = state.voting
        # A newer vote takes over the narrative slot; release the old flag.
        if _settling_picture(state) is not None:
            voting = _with_flag(voting, _settling_picture(state), False)
        return replace(
            state,
            voting=voting,
            narrative=NarrativePhase.SETTLING,
            narrative_token=state.narrative_token + 1,
            last_voted_picture=event.picture,
        )
    if isinstance(event, NarrativeAdvanced):
        return _advance_narrative(state, event.token)
    if isinstance(event, NarrativeCancelled):
        voting = state.voting
        if _settling_picture(state) is not None:
            voting = _with_flag(voting, _settling_picture(state), False)
        return replace(state, voting=voting, narrative=NarrativePhase.IDLE)
    raise TypeError(f"Unknown event: {event!r}")


def _advance_narrative(state: AppState, token: int) -> AppState:
    if token != state.narrative_token or state.narrative is NarrativePhase.IDLE:
        return state
    voting = state.voting
    if state.narrative is NarrativePhase.SETTLING and state.last_voted_picture:
        voting = _with_flag(voting, state.last_voted_picture.id, False)
    return replace(state, voting=voting, narrative=NEXT_PHASE[state.narrative])


def _settling_picture(state: AppState) -> PictureId | None:
    if state.narrative is NarrativePhase.SETTLING and state.last_voted_picture:
        return state.last_voted_picture.id
    return None


def _with_flag(
    voting: dict[PictureId, bool], picture_id: PictureId, value: bool
) -> dict[PictureId, bool]:
    updated = dict(voting)
    updated[picture_id] = value
    return updated
