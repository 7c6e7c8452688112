"""Command line tool that lists speakers or shows what one room is doing."""

from __future__ import annotations

import argparse
import asyncio
import sys
from contextlib import aclosing

from .discovery import discover, find
from .errors import InvalidResponseError, SonorError
from .speaker import Speaker

_DISCOVERY_TIMEOUT = 5.0
_FIND_TIMEOUT = 3.0
_QUEUE_PREVIEW = 5


def fmt_duration(secs: int) -> str:
    """Format seconds as ``MM:SS``."""
    minutes, seconds = divmod(secs, 60)
    return f"{minutes:02}:{seconds:02}"


async def _list_speakers(timeout: float) -> None:
    async with aclosing(discover(timeout)) as speakers:
        async for speaker in speakers:
            print(f"- {await speaker.name()}")


async def _general(speaker: Speaker) -> None:
    print(f"Name: {await speaker.name()}")


async def _currently_playing(speaker: Speaker) -> None:
    print()
    info = await speaker.track()
    if info is None:
        print("No track are currently playing...")
        return

    elapsed = fmt_duration(info.elapsed)
    duration = fmt_duration(info.duration)
    print(f"Currently playing: '{info.track}' [{elapsed}/{duration}]")

    queue = await speaker.queue()
    if not queue:
        print("There are no tracks coming after that.")
    elif len(queue) == 1:
        print("1 track in queue:")
    else:
        print(f"{len(queue)} tracks in queue:")

    for track in queue[:_QUEUE_PREVIEW]:
        print(f" - {track}")
    if len(queue) > _QUEUE_PREVIEW:
        print(" - ...")


async def _group_state(speaker: Speaker) -> None:
    state = await speaker.zone_group_state()
    groups = [(coordinator, members) for coordinator, members in state.items() if len(members) > 1]
    if not groups:
        return

    print()
    print("Groups: ")
    for coordinator, members in groups:
        leader = next(
            (member for member in members if member.uuid.lower() == coordinator.lower()),
            None,
        )
        if leader is None:
            raise InvalidResponseError("no coordinator for group")
        print(f" - {leader.name}")
        for member in members:
            print(f"   - {member.name} : {member.uuid}")


async def _show_room(roomname: str, timeout: float) -> int:
    speaker = await find(roomname, timeout)
    if speaker is None:
        print(f"speaker '{roomname}' doesn't exist", file=sys.stderr)
        return 1
    await _general(speaker)
    await _currently_playing(speaker)
    await _group_state(speaker)
    return 0


def main(argv: list[str] | None = None) -> int:
    """List the speakers on the network, or describe the room given as argument."""
    parser = argparse.ArgumentParser(
        prog="sonorpy",
        description="List Sonos speakers, or show what a room is playing.",
    )
    parser.add_argument("room", nargs="?", help="room name to show details for")
    parser.add_argument(
        "--timeout", type=float, default=None, help="discovery timeout in seconds"
    )
    args = parser.parse_args(argv)

    try:
        if args.room is None:
            timeout = _DISCOVERY_TIMEOUT if args.timeout is None else args.timeout
            asyncio.run(_list_speakers(timeout))
            return 0
        timeout = _FIND_TIMEOUT if args.timeout is None else args.timeout
        return asyncio.run(_show_room(args.room, timeout))
    except SonorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())