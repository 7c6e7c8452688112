"""Finding Sonos speakers on the local network."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import aclosing

from . import upnp
from .errors import NonSonosDeviceError
from .speaker import SONOS_URN, Speaker


async def _first_speaker(timeout: float) -> Speaker | None:
    async with aclosing(upnp.discover(SONOS_URN, timeout)) as devices:
        async for device in devices:
            speaker = Speaker.from_device(device)
            if speaker is not None:
                return speaker
    return None


async def _speaker_at(location: str) -> Speaker:
    device = await upnp.Device.from_url(location)
    speaker = Speaker.from_device(device)
    if speaker is None:
        raise NonSonosDeviceError()
    return speaker


async def discover(timeout: float) -> AsyncIterator[Speaker]:
    """Yield the Sonos speakers on the network as their descriptions arrive.

    SSDP is only used until the first player answers; the other players are
    taken from that player's zone group state, which is much faster than
    waiting for every device to answer the search.
    """
    first = await _first_speaker(timeout)
    if first is None:
        return

    groups = await first._zone_group_state()
    locations = [info.location for _, members in groups for info in members]
    tasks = [asyncio.ensure_future(_speaker_at(location)) for location in locations]
    try:
        for next_done in asyncio.as_completed(tasks):
            yield await next_done
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


async def find(roomname: str, timeout: float) -> Speaker | None:
    """Return the speaker whose room name matches ``roomname`` case-insensitively."""
    wanted = roomname.lower()
    async with aclosing(discover(timeout)) as speakers:
        async for speaker in speakers:
            if (await speaker.name()).lower() == wanted:
                return speaker
    return None