"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from harley_vote.adapters.session_store import SessionStore
from harley_vote.adapters.voting_api_client import VotingApiClient
from harley_vote.config import Settings
from harley_vote.containers import AppContainer, image_urls_for
from harley_vote.domain.errors import (
    ApiStatusError,
    TransportError,
    VotingClientError,
)
from harley_vote.domain.pictures import Picture, PictureId, RankedPicture, Stats
from harley_vote.services.controller import ClientController
from harley_vote.services.scheduler import Scheduler


def _ranked(picture: Picture) -> RankedPicture:
    return RankedPicture(filename=picture.filename, votes=picture.votes, id=picture.id)


@dataclass
class FakeVotingApiClient(VotingApiClient):
    """In-memory voting backend with a one-vote-per-picture-per-session rule."""

    pictures: list[Picture] = field(
        default_factory=lambda: [
            Picture(id=1, filename="harley-1.jpg", votes=5),
            Picture(id=2, filename="harley-2.jpg", votes=3),
        ]
    )
    images: dict[str, bytes] = field(default_factory=dict)
    session_calls: int = 0
    picture_calls: int = 0
    stats_calls: int = 0
    vote_calls: list[tuple[PictureId, str]] = field(default_factory=list)
    votes_cast: set[tuple[PictureId, str]] = field(default_factory=set)
    fail_session: bool = False
    fail_pictures: bool = False
    fail_stats: bool = False
    vote_error: VotingClientError | None = None
    pictures_gate: asyncio.Event | None = None
    vote_gate: asyncio.Event | None = None

    async def create_session(self) -> str:
        self.session_calls += 1
        if self.fail_session:
            raise TransportError("connection refused")
        return f"session-{self.session_calls}"

    async def list_pictures(self) -> list[Picture]:
        self.picture_calls += 1
        if self.pictures_gate is not None:
            await self.pictures_gate.wait()
        if self.fail_pictures:
            raise TransportError("connection refused")
        return list(self.pictures)

    async def get_stats(self) -> Stats:
        self.stats_calls += 1
        if self.fail_stats:
            raise ApiStatusError(500, "stats unavailable")
        ranked = sorted(self.pictures, key=lambda picture: picture.votes, reverse=True)
        return Stats(
            total_votes=sum(picture.votes for picture in self.pictures),
            most_popular=_ranked(ranked[0]) if ranked else None,
            top_three=tuple(_ranked(picture) for picture in ranked[:3]),
        )

    async def cast_vote(self, picture_id: PictureId, session_id: str) -> None:
        self.vote_calls.append((picture_id, session_id))
        if self.vote_gate is not None:
            await self.vote_gate.wait()
        if self.vote_error is not None:
            raise self.vote_error
        if (picture_id, session_id) in self.votes_cast:
            raise ApiStatusError(400, "You have already voted for this picture today")
        for index, picture in enumerate(self.pictures):
            if picture.id == picture_id:
                self.pictures[index] = Picture(
                    id=picture.id, filename=picture.filename, votes=picture.votes + 1
                )
                self.votes_cast.add((picture_id, session_id))
                return
        raise ApiStatusError(404, "Picture not found")

    async def fetch_image(self, filename: str) -> tuple[bytes, str]:
        if filename not in self.images:
            raise ApiStatusError(404)
        return self.images[filename], "image/jpeg"


@dataclass
class InMemorySessionStore(SessionStore):
    """Session store kept in memory."""

    session_id: str | None = None
    saves: list[str] = field(default_factory=list)

    def load(self) -> str | None:
        return self.session_id

    def save(self, session_id: str) -> None:
        self.saves.append(session_id)
        self.session_id = session_id


@dataclass
class FakeTimer:
    """Timer handle recorded by the fake scheduler."""

    due: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class FakeScheduler(Scheduler):
    """Scheduler with a manual clock; callbacks run only on ``advance``."""

    now: float = 0.0
    timers: list[FakeTimer] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(due=self.now + delay, callback=callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if not timer.cancelled]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running due callbacks in order."""
        target = self.now + seconds
        while True:
            due = [timer for timer in self.pending if timer.due <= target + 1e-9]
            if not due:
                break
            timer = min(due, key=lambda entry: entry.due)
            timer.cancelled = True
            self.now = max(self.now, timer.due)
            timer.callback()
        self.now = target


async def drain() -> None:
    """Let tasks created by timer callbacks run to completion."""
    for _ in range(20):
        await asyncio.sleep(0)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        voting_api_base_url="https://backend.test",
        session_file=tmp_path / "session.json",
    )


@pytest.fixture
def api_client() -> FakeVotingApiClient:
    return FakeVotingApiClient()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def controller(
    settings: Settings,
    api_client: FakeVotingApiClient,
    session_store: InMemorySessionStore,
    scheduler: FakeScheduler,
) -> ClientController:
    return ClientController.create(
        api_client=api_client,
        session_store=session_store,
        scheduler=scheduler,
        image_urls=image_urls_for(settings),
        refresh_interval_seconds=settings.refresh_interval_seconds,
    )


@pytest.fixture
def container(
    settings: Settings,
    api_client: FakeVotingApiClient,
    session_store: InMemorySessionStore,
    scheduler: FakeScheduler,
    controller: ClientController,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        api_client=api_client,
        session_store=session_store,
        scheduler=scheduler,
        controller=controller,
        close_resources=close_resources,
    )
