"""Client controller tying session, refresh and voting together."""

import logging
from dataclasses import dataclass

from harley_vote.adapters.session_store import SessionStore
from harley_vote.adapters.voting_api_client import VotingApiClient
from harley_vote.domain.pictures import PictureId
from harley_vote.domain.state import AppState, LoadingFinished
from harley_vote.services.gallery import ImageUrls, build_gallery_view
from harley_vote.services.refresh import DataRefresher
from harley_vote.services.scheduler import Scheduler
from harley_vote.services.sessions import SessionResolver
from harley_vote.services.store import StateStore
from harley_vote.services.voting import VoteNarrative, VoteOutcome, VoteSubmitter

logger = logging.getLogger(__name__)


@dataclass
class ClientController:
    """Owns the application state for the lifetime of one view."""

    store: StateStore
    resolver: SessionResolver
    refresher: DataRefresher
    submitter: VoteSubmitter
    image_urls: ImageUrls

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        api_client: VotingApiClient,
        session_store: SessionStore,
        scheduler: Scheduler,
        image_urls: ImageUrls,
        refresh_interval_seconds: float = 30.0,
    ) -> "ClientController":
        """Wire a controller and its collaborators around one state store."""
        store = StateStore()
        refresher = DataRefresher(
            api_client=api_client,
            store=store,
            scheduler=scheduler,
            interval_seconds=refresh_interval_seconds,
        )
        return cls(
            store=store,
            resolver=SessionResolver(api_client, session_store, store),
            refresher=refresher,
            submitter=VoteSubmitter(
                api_client=api_client,
                store=store,
                refresher=refresher,
                narrative=VoteNarrative(store=store, scheduler=scheduler),
            ),
            image_urls=image_urls,
        )

    @property
    def state(self) -> AppState:
        return self.store.state

    async def start(self) -> None:
        """Resolve the session, load data once, then poll."""
        await self.resolver.resolve()
        await self.refresher.refresh()
        self.store.dispatch(LoadingFinished())
        self.refresher.start()
        logger.info(
            "Client started",
            extra={
                "has_session": self.state.session_id is not None,
                "pictures": len(self.state.pictures),
            },
        )

    async def vote(self, picture_id: PictureId) -> VoteOutcome:
        """Vote for a picture."""
        return await self.submitter.submit(picture_id)

    async def stop(self) -> None:
        """Tear down polling and any pending narrative step."""
        self.refresher.stop()
        self.submitter.narrative.close()

    def view(self) -> dict[str, object]:
        """Return the gallery view model for the current state."""
        return build_gallery_view(self.state, self.image_urls)
