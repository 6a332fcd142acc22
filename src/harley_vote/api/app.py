"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse

from harley_vote.api.page import router as page_router
from harley_vote.app_logging import configure_logging
from harley_vote.config import (
    GALLERY_PLACEHOLDER_SIZE,
    TOP_THREE_PLACEHOLDER_SIZE,
    placeholder_url,
)
from harley_vote.containers import AppContainer
from harley_vote.domain.errors import VotingClientError
from harley_vote.services.voting import VoteStatus

_PLACEHOLDER_SIZES = {GALLERY_PLACEHOLDER_SIZE, TOP_THREE_PLACEHOLDER_SIZE}

_VOTE_ERROR_STATUS = {
    VoteStatus.NO_SESSION: status.HTTP_503_SERVICE_UNAVAILABLE,
    VoteStatus.UNKNOWN_PICTURE: status.HTTP_404_NOT_FOUND,
    VoteStatus.IN_PROGRESS: status.HTTP_409_CONFLICT,
    VoteStatus.REJECTED: status.HTTP_400_BAD_REQUEST,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app hosting one client controller."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        await state_container.controller.start()
        try:
            yield
        finally:
            await state_container.controller.stop()
            await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(page_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/view")
    async def gallery_view(request: Request) -> dict[str, object]:
        """Return the current gallery view model."""
        state_container: AppContainer = request.app.state.container
        return state_container.controller.view()

    @app.post("/api/vote/{picture_id}")
    async def vote(picture_id: int, request: Request) -> dict[str, object]:
        """Vote for a picture and return the updated view."""
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.controller.vote(picture_id)
        if not outcome.accepted:
            detail = outcome.message or f"Cannot vote for picture {picture_id}"
            raise HTTPException(
                status_code=_VOTE_ERROR_STATUS[outcome.status], detail=detail
            )
        return state_container.controller.view()

    @app.get("/images/{filename}")
    async def image(
        filename: str, request: Request, size: str = GALLERY_PLACEHOLDER_SIZE
    ) -> Response:
        """Proxy a backend image, falling back to a placeholder of ``size``."""
        if size not in _PLACEHOLDER_SIZES:
            size = GALLERY_PLACEHOLDER_SIZE
        state_container: AppContainer = request.app.state.container
        try:
            content, media_type = await state_container.api_client.fetch_image(
                filename
            )
        except VotingClientError:
            logger.exception("Image failed to load", extra={"image": filename})
            return RedirectResponse(placeholder_url(state_container.settings, size))
        return Response(content=content, media_type=media_type)

    return app
