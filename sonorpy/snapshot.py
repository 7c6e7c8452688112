"""Capturing and restoring what a speaker is doing."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .track import TrackInfo

if TYPE_CHECKING:
    from .speaker import Speaker

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """The volume, transport URI, track position and play state of a speaker.

    Take one with ``Speaker.snapshot`` and restore it with ``Speaker.apply``,
    e.g. to play an announcement and then resume where playback left off.
    """

    volume: int | None = None
    is_playing: bool | None = None
    track_info: TrackInfo | None = None
    transport_uri: str | None = None

    @classmethod
    async def from_speaker(cls, speaker: Speaker) -> Snapshot:
        """Record the current state of ``speaker``."""
        volume, track_info, is_playing, transport_uri = await asyncio.gather(
            speaker.volume(),
            speaker.track(),
            speaker.is_playing(),
            speaker.transport_uri(),
        )
        return cls(
            volume=volume,
            is_playing=is_playing,
            track_info=track_info,
            transport_uri=transport_uri,
        )

    async def apply(self, speaker: Speaker) -> None:
        """Restore this state on ``speaker``."""
        if self.volume is not None:
            await speaker.set_volume(self.volume)

        uri = self.transport_uri
        if uri is not None:
            if uri.startswith("x-sonos-vli"):
                logger.warning("unsupported transport uri: 'x-sonos-vli:...'")
            else:
                await speaker.set_transport_uri(uri, "")

        if self.track_info is not None:
            await asyncio.gather(
                speaker.seek_track(self.track_info.track_no),
                speaker.skip_to(self.track_info.elapsed),
            )

        if self.is_playing is False:
            await speaker.pause()
        elif self.is_playing is True:
            await speaker.play()