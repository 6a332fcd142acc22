"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from harley_vote.adapters.session_store import JsonFileSessionStore, SessionStore
from harley_vote.adapters.voting_api_client import (
    HttpxVotingApiClient,
    VotingApiClient,
)
from harley_vote.config import (
    GALLERY_PLACEHOLDER_SIZE,
    TOP_THREE_PLACEHOLDER_SIZE,
    Settings,
    placeholder_url,
)
from harley_vote.services.controller import ClientController
from harley_vote.services.gallery import ImageUrls
from harley_vote.services.scheduler import AsyncioScheduler, Scheduler


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    api_client: VotingApiClient
    session_store: SessionStore
    scheduler: Scheduler
    controller: ClientController
    close_resources: Callable[[], Awaitable[None]]


def image_urls_for(settings: Settings) -> ImageUrls:
    """Build image URL helpers from settings."""
    return ImageUrls(
        prefix=settings.image_path_prefix,
        gallery_placeholder=placeholder_url(settings, GALLERY_PLACEHOLDER_SIZE),
        top_three_placeholder=placeholder_url(settings, TOP_THREE_PLACEHOLDER_SIZE),
    )


def build_container(
    settings: Settings | None = None, scheduler: Scheduler | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    api_client = HttpxVotingApiClient.create(
        base_url=resolved_settings.voting_api_base_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    session_store = JsonFileSessionStore(resolved_settings.session_file)
    resolved_scheduler = scheduler or AsyncioScheduler()
    controller = ClientController.create(
        api_client=api_client,
        session_store=session_store,
        scheduler=resolved_scheduler,
        image_urls=image_urls_for(resolved_settings),
        refresh_interval_seconds=resolved_settings.refresh_interval_seconds,
    )

    async def close_resources() -> None:
        await api_client.close()

    return AppContainer(
        settings=resolved_settings,
        api_client=api_client,
        session_store=session_store,
        scheduler=resolved_scheduler,
        controller=controller,
        close_resources=close_resources,
    )
