"""Domain models for pictures and vote statistics."""

from dataclasses import dataclass

PictureId = int


@dataclass(frozen=True)
class Picture:
    """A votable picture as reported by the backend."""

    id: PictureId
    filename: str
    votes: int


@dataclass(frozen=True)
class RankedPicture:
    """Picture-like entry of a stats snapshot."""

    filename: str
    votes: int
    id: PictureId | None = None


@dataclass(frozen=True)
class Stats:
    """Server-computed vote statistics."""

    total_votes: int
    most_popular: RankedPicture | None
    top_three: tuple[RankedPicture, ...]
