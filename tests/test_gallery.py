"""Tests for the gallery view model."""

from dataclasses import replace

from harley_vote.domain.pictures import Picture, RankedPicture, Stats
from harley_vote.domain.state import AppState, NarrativePhase
from harley_vote.services.gallery import (
    ImageUrls,
    build_gallery_view,
    format_percentage,
    picture_number,
)

URLS = ImageUrls(
    prefix="/images",
    gallery_placeholder="https://placeholder.test/300x300",
    top_three_placeholder="https://placeholder.test/150x150",
)

PICTURES = (
    Picture(id=10, filename="a.jpg", votes=25),
    Picture(id=11, filename="b.jpg", votes=50),
    Picture(id=12, filename="c.jpg", votes=15),
    Picture(id=13, filename="d.jpg", votes=10),
)

STATS = Stats(
    total_votes=100,
    most_popular=RankedPicture(filename="b.jpg", votes=50),
    top_three=(
        RankedPicture(filename="b.jpg", votes=50),
        RankedPicture(filename="a.jpg", votes=25),
        RankedPicture(filename="c.jpg", votes=15),
    ),
)


def test_format_percentage() -> None:
    assert format_percentage(25, 100) == "25.0"
    assert format_percentage(1, 3) == "33.3"
    assert format_percentage(5, 0) == "0.0"


def test_picture_number_is_one_based_and_zero_when_missing() -> None:
    assert picture_number(PICTURES, "c.jpg") == 3
    assert picture_number(PICTURES, "missing.jpg") == 0


def test_view_lists_pictures_with_urls_and_flags() -> None:
    state = AppState(pictures=PICTURES, loading=False, voting={11: True})

    view = build_gallery_view(state, URLS)

    assert view["loading"] is False
    assert view["empty"] is False
    first, second = view["pictures"][:2]
    assert first["number"] == 1
    assert first["image_url"] == "/images/a.jpg"
    assert first["fallback_url"] == "https://placeholder.test/300x300"
    assert first["voting"] is False
    assert second["voting"] is True


def test_stats_section_ranks_top_three() -> None:
    state = AppState(pictures=PICTURES, stats=STATS, loading=False)

    stats = build_gallery_view(state, URLS)["stats"]

    assert stats["total_votes"] == 100
    assert stats["total_pictures"] == 4
    assert stats["leader"] == {"number": 2, "votes": 50}
    top = stats["top_three"]
    assert [entry["medal"] for entry in top] == ["🥇", "🥈", "🥉"]
    assert [entry["number"] for entry in top] == [2, 1, 3]
    assert top[1]["percentage"] == "25.0"
    assert top[0]["fallback_url"] == "https://placeholder.test/150x150"
    assert top[0]["image_url"] == "/images/b.jpg?size=150x150"


def test_stats_hidden_without_votes() -> None:
    empty_stats = Stats(total_votes=0, most_popular=None, top_three=())
    state = AppState(pictures=(), stats=empty_stats, loading=False)

    view = build_gallery_view(state, URLS)

    assert view["stats"] is None
    assert view["empty"] is True


def test_overlay_follows_narrative_phase() -> None:
    base = AppState(
        pictures=PICTURES,
        stats=STATS,
        loading=False,
        last_voted_picture=PICTURES[2],
    )

    settling = build_gallery_view(replace(base, narrative=NarrativePhase.SETTLING), URLS)
    thank_you = build_gallery_view(
        replace(base, narrative=NarrativePhase.THANK_YOU), URLS
    )
    leaderboard = build_gallery_view(
        replace(base, narrative=NarrativePhase.LEADERBOARD), URLS
    )

    assert settling["overlay"] is None
    assert thank_you["overlay"]["kind"] == "thank_you"
    assert thank_you["overlay"]["number"] == 3
    assert leaderboard["overlay"]["kind"] == "leaderboard"
    assert len(leaderboard["overlay"]["entries"]) == 3


def test_leaderboard_overlay_needs_rankings() -> None:
    state = AppState(
        pictures=PICTURES,
        stats=Stats(total_votes=0, most_popular=None, top_three=()),
        narrative=NarrativePhase.LEADERBOARD,
    )

    assert build_gallery_view(state, URLS)["overlay"] is None


def test_image_urls_escape_filenames() -> None:
    assert URLS.for_file("harley 1?.jpg") == "/images/harley%201%3F.jpg"
    assert URLS.for_file("a.jpg", "150x150") == "/images/a.jpg?size=150x150"
