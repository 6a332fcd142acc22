"""Pydantic models for voting backend payloads."""

from pydantic import BaseModel, ConfigDict, Field

from harley_vote.domain.pictures import Picture, RankedPicture, Stats


class _BackendModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SessionPayload(_BackendModel):
    """Response of ``GET /api/session``."""

    session_id: str = Field(alias="sessionId", min_length=1)


class PicturePayload(_BackendModel):
    """One entry of ``GET /api/pictures``."""

    id: int
    filename: str
    votes: int = 0

    def to_domain(self) -> Picture:
        return Picture(id=self.id, filename=self.filename, votes=self.votes)


class RankedPicturePayload(_BackendModel):
    """Picture-like record inside a stats snapshot."""

    filename: str
    votes: int = 0
    id: int | None = None

    def to_domain(self) -> RankedPicture:
        return RankedPicture(filename=self.filename, votes=self.votes, id=self.id)


class StatsPayload(_BackendModel):
    """Response of ``GET /api/stats``."""

    total_votes: int = Field(default=0, alias="totalVotes")
    most_popular: RankedPicturePayload | None = Field(
        default=None, alias="mostPopular"
    )
    top_three: list[RankedPicturePayload] = Field(
        default_factory=list, alias="topThree"
    )

    def to_domain(self) -> Stats:
        return Stats(
            total_votes=self.total_votes,
            most_popular=self.most_popular.to_domain() if self.most_popular else None,
            top_three=tuple(entry.to_domain() for entry in self.top_three[:3]),
        )


class ErrorPayload(_BackendModel):
    """Error body returned with non-success statuses."""

    error: str | None = None
