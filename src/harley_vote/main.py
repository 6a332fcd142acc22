"""Console entry point: print the gallery and optionally cast a vote."""

import asyncio
import sys

from harley_vote.app_logging import configure_logging
from harley_vote.containers import AppContainer, build_container
from harley_vote.domain.state import (
    AppState,
    Event,
    NarrativeAdvanced,
    NarrativeCancelled,
    NarrativePhase,
)
from harley_vote.services.gallery import build_gallery_view

USAGE = "usage: harley-vote [vote <picture_id>]"


def main(argv: list[str] | None = None, container: AppContainer | None = None) -> int:
    """Run the console client and return a process exit code."""
    args = sys.argv[1:] if argv is None else argv
    picture_id: int | None = None
    if args:
        if len(args) != 2 or args[0] != "vote" or not args[1].isdecimal():  # noqa: PLR2004
            print(USAGE)
            return 2
        picture_id = int(args[1])
    configure_logging()
    return asyncio.run(_run(container or build_container(), picture_id))


async def _run(container: AppContainer, picture_id: int | None) -> int:
    controller = container.controller
    try:
        await controller.start()
        print(render_gallery(controller.view()))
        if picture_id is None:
            return 0
        finished = asyncio.Event()

        def on_change(state: AppState, event: Event) -> None:
            if not isinstance(event, NarrativeAdvanced | NarrativeCancelled):
                return
            overlay = build_gallery_view(state, controller.image_urls)["overlay"]
            if overlay is not None:
                print(render_overlay(overlay))
            if state.narrative is NarrativePhase.IDLE:
                finished.set()

        unsubscribe = controller.store.subscribe(on_change)
        outcome = await controller.vote(picture_id)
        if not outcome.accepted:
            unsubscribe()
            print(outcome.message or f"Cannot vote for picture {picture_id}.")
            return 1
        await finished.wait()
        unsubscribe()
        return 0
    finally:
        await controller.stop()
        await container.close_resources()


def render_gallery(view: dict[str, object]) -> str:
    """Format the gallery view model as plain text."""
    lines = ["What's the Best Picture of Harley?"]
    pictures = view["pictures"]
    if not pictures:
        lines.append("No pictures found!")
    for picture in pictures:
        lines.append(
            f"Picture #{picture['number']} (id {picture['id']}): {picture['votes']} votes"
        )
    stats = view["stats"]
    if stats:
        lines.append(f"Total Votes: {stats['total_votes']}")
        lines.append(f"Total Pictures: {stats['total_pictures']}")
        leader = stats["leader"]
        if leader:
            lines.append(
                f"Current Leader: Picture #{leader['number']} ({leader['votes']} votes)"
            )
        lines.extend(_ranking_lines(stats["top_three"]))
    if view["notice"]:
        lines.append(str(view["notice"]))
    return "\n".join(lines)


def render_overlay(overlay: dict[str, object]) -> str:
    """Format a narrative overlay as plain text."""
    if overlay["kind"] == "thank_you":
        return f"Thank You for Voting! You voted for Picture #{overlay['number']}"
    return "\n".join(["Current Leaderboard", *_ranking_lines(overlay["entries"])])


def _ranking_lines(entries: list[dict[str, object]]) -> list[str]:
    return [
        f"{entry['medal']} Picture #{entry['number']}: "
        f"{entry['votes']} votes ({entry['percentage']}%)"
        for entry in entries
    ]


if __name__ == "__main__":
    raise SystemExit(main())
