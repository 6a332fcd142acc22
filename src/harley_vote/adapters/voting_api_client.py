"""Voting backend API client."""

import logging
from dataclasses import dataclass
from typing import Protocol, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from harley_vote.adapters.voting_api_models import (
    ErrorPayload,
    PicturePayload,
    SessionPayload,
    StatsPayload,
)
from harley_vote.domain.errors import (
    ApiStatusError,
    MalformedResponseError,
    TransportError,
)
from harley_vote.domain.pictures import Picture, PictureId, Stats

logger = logging.getLogger(__name__)

_PICTURE_LIST = TypeAdapter(list[PicturePayload])

ModelT = TypeVar("ModelT", bound=BaseModel)


class VotingApiClient(Protocol):
    """Interface for the voting backend."""

    async def create_session(self) -> str:
        """Ask the backend for a new session id."""

    async def list_pictures(self) -> list[Picture]:
        """Return every picture with its current vote count."""

    async def get_stats(self) -> Stats:
        """Return the current stats snapshot."""

    async def cast_vote(self, picture_id: PictureId, session_id: str) -> None:
        """Record a vote for a picture on behalf of a session."""

    async def fetch_image(self, filename: str) -> tuple[bytes, str]:
        """Return image bytes and their content type."""


@dataclass
class HttpxVotingApiClient(VotingApiClient):
    """Voting backend client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(cls, base_url: str, timeout: float = 10.0) -> "HttpxVotingApiClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def create_session(self) -> str:
        """Request a new session id via ``GET /api/session``."""
        response = await self._send("GET", "/api/session")
        return _parse(SessionPayload, response).session_id

    async def list_pictures(self) -> list[Picture]:
        """Fetch the picture list."""
        response = await self._send("GET", "/api/pictures")
        try:
            payloads = _PICTURE_LIST.validate_python(_json(response))
        except ValidationError as exc:
            raise MalformedResponseError(f"Invalid picture list: {exc}") from exc
        return [payload.to_domain() for payload in payloads]

    async def get_stats(self) -> Stats:
        """Fetch the stats snapshot."""
        response = await self._send("GET", "/api/stats")
        return _parse(StatsPayload, response).to_domain()

    async def cast_vote(self, picture_id: PictureId, session_id: str) -> None:
        """Post a vote; raise ``ApiStatusError`` with the server's message."""
        response = await self._send(
            "POST", f"/api/vote/{picture_id}", json={"sessionId": session_id}
        )
        _json(response)

    async def fetch_image(self, filename: str) -> tuple[bytes, str]:
        """Download an image from the backend's image directory."""
        response = await self._send("GET", f"/images/{quote(filename, safe='')}")
        content_type = response.headers.get("content-type", "application/octet-stream")
        return response.content, content_type

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def _send(
        self, method: str, path: str, json: dict[str, object] | None = None
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.request(
                method, url, json=json, timeout=self.timeout
            )
        except httpx.RequestError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc
        if response.is_success:
            return response
        # Error bodies that are not JSON count as malformed, not as rejections.
        raise ApiStatusError(response.status_code, _error_message(_json(response)))


def _json(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponseError(
            f"Response from {response.request.url.path} "
            f"(HTTP {response.status_code}) is not JSON"
        ) from exc


def _parse(model: type[ModelT], response: httpx.Response) -> ModelT:
    try:
        return model.model_validate(_json(response))
    except ValidationError as exc:
        raise MalformedResponseError(f"Invalid {model.__name__}: {exc}") from exc


def _error_message(payload: object) -> str | None:
    try:
        return ErrorPayload.model_validate(payload).error
    except ValidationError:
        logger.debug("Error response without an error message")
        return None
