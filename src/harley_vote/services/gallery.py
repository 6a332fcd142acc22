"""Presentation data derived from the client state."""

from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import quote

from harley_vote.config import TOP_THREE_PLACEHOLDER_SIZE
from harley_vote.domain.pictures import Picture, RankedPicture, Stats
from harley_vote.domain.state import AppState

MEDALS = ("🥇", "🥈", "🥉")


@dataclass(frozen=True)
class ImageUrls:
    """URL builder for picture images and their placeholders."""

    prefix: str
    gallery_placeholder: str
    top_three_placeholder: str

    def for_file(self, filename: str, size: str | None = None) -> str:
        url = f"{self.prefix}/{quote(filename, safe='')}"
        return f"{url}?size={size}" if size else url


def format_percentage(votes: int, total_votes: int) -> str:
    """Share of the total as a percentage with one decimal, e.g. ``"25.0"``."""
    if total_votes <= 0:
        return "0.0"
    return f"{votes / total_votes * 100:.1f}"


def picture_number(pictures: Sequence[Picture], filename: str) -> int:
    """1-based gallery position of a picture, or 0 when it is not listed."""
    for index, picture in enumerate(pictures):
        if picture.filename == filename:
            return index + 1
    return 0


def build_gallery_view(state: AppState, urls: ImageUrls) -> dict[str, object]:
    """Build the JSON-ready view of the gallery, stats and overlays."""
    pictures = [
        {
            "id": picture.id,
            "number": index + 1,
            "filename": picture.filename,
            "votes": picture.votes,
            "image_url": urls.for_file(picture.filename),
            "fallback_url": urls.gallery_placeholder,
            "voting": state.is_voting(picture.id),
        }
        for index, picture in enumerate(state.pictures)
    ]
    return {
        "loading": state.loading,
        "empty": not state.pictures,
        "pictures": pictures,
        "stats": _stats_view(state, urls),
        "overlay": _overlay_view(state, urls),
        "notice": state.notice,
    }


def _stats_view(state: AppState, urls: ImageUrls) -> dict[str, object] | None:
    stats = state.stats
    if stats is None or stats.total_votes <= 0:
        return None
    leader = None
    if stats.most_popular is not None:
        leader = {
            "number": picture_number(state.pictures, stats.most_popular.filename),
            "votes": stats.most_popular.votes,
        }
    return {
        "total_votes": stats.total_votes,
        "total_pictures": len(state.pictures),
        "leader": leader,
        "top_three": _ranking(state.pictures, stats, urls),
    }


def _ranking(
    pictures: Sequence[Picture], stats: Stats, urls: ImageUrls
) -> list[dict[str, object]]:
    return [
        _ranked_entry(pictures, entry, rank, stats.total_votes, urls)
        for rank, entry in enumerate(stats.top_three[: len(MEDALS)])
    ]


def _ranked_entry(
    pictures: Sequence[Picture],
    entry: RankedPicture,
    rank: int,
    total_votes: int,
    urls: ImageUrls,
) -> dict[str, object]:
    return {
        "rank": rank + 1,
        "medal": MEDALS[rank],
        "number": picture_number(pictures, entry.filename),
        "filename": entry.filename,
        "votes": entry.votes,
        "percentage": format_percentage(entry.votes, total_votes),
        "image_url": urls.for_file(entry.filename, TOP_THREE_PLACEHOLDER_SIZE),
        "fallback_url": urls.top_three_placeholder,
    }


def _overlay_view(state: AppState, urls: ImageUrls) -> dict[str, object] | None:
    voted = state.last_voted_picture
    if state.show_thank_you and voted is not None:
        return {
            "kind": "thank_you",
            "number": picture_number(state.pictures, voted.filename),
            "image_url": urls.for_file(voted.filename),
        }
    stats = state.stats
    if state.show_leaderboard and stats is not None and stats.top_three:
        return {
            "kind": "leaderboard",
            "entries": _ranking(state.pictures, stats, urls),
        }
    return None
