"""Session bootstrap for the voting client."""

import logging
from dataclasses import dataclass

from harley_vote.adapters.session_store import SessionStore
from harley_vote.adapters.voting_api_client import VotingApiClient
from harley_vote.domain.errors import VotingClientError
from harley_vote.domain.state import SessionResolved
from harley_vote.services.store import StateStore

logger = logging.getLogger(__name__)


@dataclass
class SessionResolver:
    """Reuses the persisted session id or asks the backend for a new one."""

    api_client: VotingApiClient
    session_store: SessionStore
    store: StateStore

    async def resolve(self) -> str | None:
        """Resolve the session id; returns ``None`` when it stays unset."""
        session_id = self.session_store.load()
        if session_id is None:
            try:
                session_id = await self.api_client.create_session()
            except VotingClientError:
                logger.exception("Error creating session")
                return None
            try:
                self.session_store.save(session_id)
            except OSError:
                logger.exception("Could not persist session id")
        self.store.dispatch(SessionResolved(session_id))
        return session_id
