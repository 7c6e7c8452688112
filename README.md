# sonorpy

An asynchronous library for controlling Sonos speakers on your local network.
Speakers are found with SSDP discovery and controlled through their UPnP
services over HTTP.

## Installation

```
pip install sonorpy
```

## Finding speakers

```python
import asyncio

from sonorpy.discovery import discover, find


async def main():
    # List every speaker on the network.
    async for speaker in discover(5.0):
        print("-", await speaker.name())

    # Look a speaker up by its room name (case-insensitive).
    speaker = await find("Living Room", 3.0)
    if speaker is None:
        return

    print("Volume:", await speaker.volume())

    info = await speaker.track()
    if info is not None:
        print("Currently playing:", info.track)

    await speaker.clear_queue()
    await speaker.join("Kitchen")


asyncio.run(main())
```

`discover(timeout)` sends an SSDP search and waits for the first Sonos player
to answer; the remaining players are then taken from that player's zone group
state, so the listing is usually much faster than the timeout. `find(roomname,
timeout)` returns the first speaker whose name matches, or `None`.

A speaker can also be reached directly with `Speaker.from_ip("192.0.2.10")`
from `sonorpy.speaker`, which returns `None` if the device found there is not
a Sonos player.

## Controlling a speaker

`sonorpy.speaker.Speaker` offers coroutine methods for:

- transport: `play`, `pause`, `stop`, `next`, `previous`, `skip_to`,
  `skip_by`, `seek_track`, `is_playing`, `track`, `set_transport_uri`,
  `transport_uri`
- play mode: `repeat_mode` / `set_repeat_mode` (a `RepeatMode` from
  `sonorpy.datatypes`), `shuffle` / `set_shuffle`, `crossfade` /
  `set_crossfade`
- sound: `volume`, `set_volume`, `set_volume_relative`, `mute` / `set_mute`,
  `bass` / `set_bass`, `treble` / `set_treble`, `loudness` / `set_loudness`
- queue: `queue`, `queue_end`, `queue_next`, `remove_track`, `clear_queue`
- groups: `zone_group_state`, `join`, `leave`, `uuid`, `name`

`track()` returns a `TrackInfo` (track, raw metadata, track number, duration
and elapsed seconds) or `None` when nothing usable is playing. `queue()`
returns a list of `Track` objects from `sonorpy.track`; `str(track)` gives
`title - creator (album)` with the optional parts left out when unknown.

### Snapshots

A snapshot records volume, transport URI, the current track and position, and
whether the speaker was playing. Use it to play a short clip and then go back
to where you were:

```python
snapshot = await speaker.snapshot()
await speaker.set_volume(10)
await speaker.set_transport_uri("http://host.example.com/clip.mp3", "")
await speaker.play()
# ...
await speaker.apply(snapshot)
```

Transport URIs starting with `x-sonos-vli` are not restored; a warning is
logged instead.

### Raw UPnP actions

Actions that have no dedicated method can be sent directly:

```python
from sonorpy.upnp import URN
from sonorpy.utils import soap_args

service = URN.service("schemas-upnp-org", "GroupRenderingControl", 1)
response = await speaker.action(service, "GetGroupMute", soap_args(InstanceID=0))
print(response["CurrentMute"])
```

### Errors

All errors are subclasses of `sonorpy.errors.SonorError`. Faults reported by
a device raise `ActionError` (with `code` and `description`), unsuccessful
HTTP replies raise `HttpStatusError` (with `status`), and calling an action on
a service the device does not have raises `MissingServiceError`.

## Command line

```
sonorpy
```

lists the speakers found on the network.

```
sonorpy "Living Room"
```

prints the speaker's name, the track it is playing with its position, the
first tracks in the queue, and any groups of more than one speaker. It exits
with status 1 if no such room is found. `--timeout SECONDS` changes the
discovery timeout (5 seconds for the listing, 3 seconds for a room).

## What it does not do

The package sends actions and reads their replies only. It does not subscribe
to UPnP events, so changes made elsewhere are seen only by asking again, and
the command line tool only reports state; it does not change anything on the
speakers.