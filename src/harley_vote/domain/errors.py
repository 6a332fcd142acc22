"""Errors raised by the voting backend adapters."""


class VotingClientError(Exception):
    """Base error for any failed call to the voting backend."""


class TransportError(VotingClientError):
    """The request never produced an HTTP response."""


class ApiStatusError(VotingClientError):
    """The backend answered with a non-success status."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code
        self.message = message


class MalformedResponseError(VotingClientError):
    """The backend answered with a payload we could not understand."""
