import logging

import pytest

from sonorpy.errors import SonorError
from sonorpy.snapshot import Snapshot
from sonorpy.track import Track, TrackInfo

TRACK_INFO = TrackInfo(
    track=Track(title="Song", uri="x-file-cifs://server/song.mp3"),
    metadata="<DIDL-Lite/>",
    track_no=3,
    duration=200,
    elapsed=42,
)


class FakeSpeaker:
    def __init__(self, volume=30, track=None, playing=True, uri=None, fail=False):
        self._volume = volume
        self._track = track
        self._playing = playing
        self._uri = uri
        self._fail = fail
        self.calls = []

    async def volume(self):
        if self._fail:
            raise SonorError("unreachable")
        return self._volume

    async def track(self):
        return self._track

    async def is_playing(self):
        return self._playing

    async def transport_uri(self):
        return self._uri

    async def set_volume(self, volume):
        self.calls.append(("set_volume", volume))

    async def set_transport_uri(self, uri, metadata):
        self.calls.append(("set_transport_uri", uri, metadata))

    async def seek_track(self, track_no):
        self.calls.append(("seek_track", track_no))

    async def skip_to(self, seconds):
        self.calls.append(("skip_to", seconds))

    async def pause(self):
        self.calls.append(("pause",))

    async def play(self):
        self.calls.append(("play",))


@pytest.mark.asyncio
async def test_from_speaker_records_state():
    speaker = FakeSpeaker(volume=25, track=TRACK_INFO, playing=False, uri="x-rincon-queue:q")
    snapshot = await Snapshot.from_speaker(speaker)
    assert snapshot == Snapshot(
        volume=25, is_playing=False, track_info=TRACK_INFO, transport_uri="x-rincon-queue:q"
    )


@pytest.mark.asyncio
async def test_from_speaker_propagates_errors():
    with pytest.raises(SonorError):
        await Snapshot.from_speaker(FakeSpeaker(fail=True))


@pytest.mark.asyncio
async def test_apply_full_snapshot_order():
    speaker = FakeSpeaker()
    snapshot = Snapshot(
        volume=25, is_playing=True, track_info=TRACK_INFO, transport_uri="x-rincon-queue:q"
    )
    await snapshot.apply(speaker)
    assert speaker.calls[0] == ("set_volume", 25)
    assert speaker.calls[1] == ("set_transport_uri", "x-rincon-queue:q", "")
    assert set(speaker.calls[2:4]) == {("seek_track", 3), ("skip_to", 42)}
    assert speaker.calls[-1] == ("play",)
    assert len(speaker.calls) == 5


@pytest.mark.asyncio
async def test_apply_empty_snapshot_does_nothing():
    speaker = FakeSpeaker()
    await Snapshot().apply(speaker)
    assert speaker.calls == []


@pytest.mark.asyncio
async def test_apply_pauses_when_not_playing():
    speaker = FakeSpeaker()
    await Snapshot(is_playing=False).apply(speaker)
    assert speaker.calls == [("pause",)]


@pytest.mark.asyncio
async def test_apply_skips_vli_transport_uri(caplog):
    speaker = FakeSpeaker()
    with caplog.at_level(logging.WARNING, logger="sonorpy.snapshot"):
        await Snapshot(volume=10, transport_uri="x-sonos-vli:abc").apply(speaker)
    assert speaker.calls == [("set_volume", 10)]
    assert "x-sonos-vli" in caplog.text


@pytest.mark.asyncio
async def test_round_trip_through_fake_speaker():
    source = FakeSpeaker(volume=12, track=TRACK_INFO, playing=True, uri="x-rincon-queue:q")
    target = FakeSpeaker()
    await (await Snapshot.from_speaker(source)).apply(target)
    assert ("set_volume", 12) in target.calls
    assert ("set_transport_uri", "x-rincon-queue:q", "") in target.calls
    assert ("seek_track", TRACK_INFO.track_no) in target.calls
    assert ("skip_to", TRACK_INFO.elapsed) in target.calls
    assert target.calls[-1] == ("play",)