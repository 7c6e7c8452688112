"""A Sonos speaker and the actions it supports."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass

from .datatypes import ParseRepeatModeError, RepeatMode, SpeakerInfo
from .errors import (
    ActionError,
    HttpStatusError,
    InvalidResponseError,
    MissingServiceError,
    SpeakerNotIncludedInOwnZoneGroupStateError,
)
from .snapshot import Snapshot
from .track import Track, TrackInfo
from .upnp import URN, Device
from .utils import (
    extract,
    find_node_attribute,
    find_root_node,
    local_name,
    parse_bool,
    parse_xml,
    seconds_from_str,
    seconds_to_str,
    soap_args,
)

SONOS_URN = URN.device("schemas-upnp-org", "ZonePlayer", 1)

AV_TRANSPORT = URN.service("schemas-upnp-org", "AVTransport", 1)
DEVICE_PROPERTIES = URN.service("schemas-upnp-org", "DeviceProperties", 1)
RENDERING_CONTROL = URN.service("schemas-upnp-org", "RenderingControl", 1)
ZONE_GROUP_TOPOLOGY = URN.service("schemas-upnp-org", "ZoneGroupTopology", 1)
QUEUE = URN.service("schemas-sonos-com", "Queue", 1)
MUSIC_SERVICES = URN.service("schemas-upnp-org", "MusicServices", 1)

DEFAULT_ARGS = "<InstanceID>0</InstanceID>"

_U16_MAX = 2**16 - 1
_U32_MAX = 2**32 - 1
_INTEGER = re.compile(r"[+-]?[0-9]+")

_PLAY_MODES = {
    "NORMAL": (RepeatMode.NONE, False),
    "REPEAT_ALL": (RepeatMode.ALL, False),
    "REPEAT_ONE": (RepeatMode.ONE, False),
    "SHUFFLE_NOREPEAT": (RepeatMode.NONE, True),
    "SHUFFLE": (RepeatMode.ALL, True),
    "SHUFFLE_REPEAT_ONE": (RepeatMode.ONE, True),
}
_PLAY_MODE_NAMES = {modes: name for name, modes in _PLAY_MODES.items()}


def _parse_int(text: str, low: int, high: int) -> int:
    if not _INTEGER.fullmatch(text) or (low >= 0 and text.startswith("-")):
        raise InvalidResponseError(f"invalid number: {text!r}")
    value = int(text)
    if not low <= value <= high:
        raise InvalidResponseError(f"number out of range: {text!r}")
    return value


@dataclass(frozen=True, eq=False)
class Speaker:
    """A Sonos speaker wrapping a UPnP device."""

    device: Device

    @classmethod
    def from_device(cls, device: Device) -> Speaker | None:
        """Wrap ``device``, or return None when it is not a ZonePlayer."""
        if device.device_type == SONOS_URN:
            return cls(device)
        return None

    @classmethod
    async def from_ip(cls, addr: str | ipaddress.IPv4Address) -> Speaker | None:
        """Connect to the speaker at an IPv4 address; None if it is not a Sonos player."""
        address = ipaddress.IPv4Address(addr)
        url = f"http://{address}:1400/xml/device_description.xml"
        return cls.from_device(await Device.from_url(url))

    async def name(self) -> str:
        response = await self.action(DEVICE_PROPERTIES, "GetZoneAttributes", "")
        return extract(response, "CurrentZoneName")

    async def uuid(self) -> str:
        for _, speakers in await self._zone_group_state():
            for info in speakers:
                if info.location == self.device.url:
                    return info.uuid
        raise SpeakerNotIncludedInOwnZoneGroupStateError()

    # AVTransport

    async def stop(self) -> None:
        await self.action(AV_TRANSPORT, "Stop", DEFAULT_ARGS)

    async def play(self) -> None:
        await self.action(AV_TRANSPORT, "Play", soap_args(InstanceID=0, Speed=1))

    async def pause(self) -> None:
        """Pause playback; pausing a speaker that cannot pause is not an error."""
        try:
            await self.action(AV_TRANSPORT, "Pause", DEFAULT_ARGS)
        except HttpStatusError as exc:
            if exc.status != 500:
                raise
        except ActionError as exc:
            if exc.code != 701:
                raise

    async def next(self) -> None:
        await self.action(AV_TRANSPORT, "Next", DEFAULT_ARGS)

    async def previous(self) -> None:
        await self.action(AV_TRANSPORT, "Previous", DEFAULT_ARGS)

    async def skip_to(self, seconds: int) -> None:
        args = soap_args(InstanceID=0, Unit="REL_TIME", Target=seconds_to_str(seconds))
        await self.action(AV_TRANSPORT, "Seek", args)

    async def skip_by(self, seconds: int) -> None:
        args = soap_args(
            InstanceID=0, Unit="TIME_DELTA", Target=seconds_to_str(seconds)
        )
        await self.action(AV_TRANSPORT, "Seek", args)

    async def seek_track(self, track_no: int) -> None:
        """Jump to a queue position; the first track number is 1."""
        args = soap_args(InstanceID=0, Unit="TRACK_NR", Target=track_no)
        await self.action(AV_TRANSPORT, "Seek", args)

    async def _playback_mode(self) -> tuple[RepeatMode, bool]:
        response = await self.action(
            AV_TRANSPORT, "GetTransportSettings", DEFAULT_ARGS
        )
        play_mode = extract(response, "PlayMode")
        try:
            return _PLAY_MODES[play_mode.upper()]
        except KeyError:
            raise InvalidResponseError(str(ParseRepeatModeError())) from None

    async def repeat_mode(self) -> RepeatMode:
        repeat_mode, _ = await self._playback_mode()
        return repeat_mode

    async def shuffle(self) -> bool:
        _, shuffle = await self._playback_mode()
        return shuffle

    async def _set_playback_mode(self, repeat_mode: RepeatMode, shuffle: bool) -> None:
        mode = _PLAY_MODE_NAMES[(repeat_mode, bool(shuffle))]
        await self.action(
            AV_TRANSPORT, "SetPlayMode", soap_args(InstanceID=0, NewPlayMode=mode)
        )

    async def set_repeat_mode(self, repeat_mode: RepeatMode) -> None:
        await self._set_playback_mode(repeat_mode, await self.shuffle())

    async def set_shuffle(self, shuffle: bool) -> None:
        await self._set_playback_mode(await self.repeat_mode(), shuffle)

    async def crossfade(self) -> bool:
        response = await self.action(AV_TRANSPORT, "GetCrossfadeMode", DEFAULT_ARGS)
        return parse_bool(extract(response, "CrossfadeMode"))

    async def set_crossfade(self, crossfade: bool) -> None:
        args = soap_args(InstanceID=0, CrossfadeMode=bool(crossfade))
        await self.action(AV_TRANSPORT, "SetCrossfadeMode", args)

    async def is_playing(self) -> bool:
        response = await self.action(AV_TRANSPORT, "GetTransportInfo", DEFAULT_ARGS)
        return extract(response, "CurrentTransportState").lower() == "playing"

    async def track(self) -> TrackInfo | None:
        """The currently playing track, or None when nothing usable is playing."""
        response = await self.action(AV_TRANSPORT, "GetPositionInfo", DEFAULT_ARGS)

        track_no = _parse_int(extract(response, "Track"), 0, _U32_MAX)
        duration = response.pop("TrackDuration", "0:0:0")
        elapsed = response.pop("RelTime", "0:0:0")

        # e.g. a streaming source disconnected while the speaker stayed on it
        if duration.lower() == "not_implemented" or elapsed.lower() == "not_implemented":
            return None

        metadata = response.pop("TrackMetaData", None)
        if metadata is None:
            return None

        duration_secs = seconds_from_str(duration)
        elapsed_secs = seconds_from_str(elapsed)

        document = parse_xml(metadata)
        item = find_root_node(document, "item", "Track Metadata")
        return TrackInfo(
            track=Track.from_xml(item),
            metadata=metadata,
            track_no=track_no,
            duration=duration_secs,
            elapsed=elapsed_secs,
        )

    # RenderingControl

    async def volume(self) -> int:
        args = soap_args(InstanceID=0, Channel="Master")
        response = await self.action(RENDERING_CONTROL, "GetVolume", args)
        return _parse_int(extract(response, "CurrentVolume"), 0, _U16_MAX)

    async def set_volume(self, volume: int) -> None:
        args = soap_args(InstanceID=0, Channel="Master", DesiredVolume=volume)
        await self.action(RENDERING_CONTROL, "SetVolume", args)

    async def set_volume_relative(self, adjustment: int) -> int:
        """Change the volume by ``adjustment`` and return the new volume."""
        args = soap_args(InstanceID=0, Channel="Master", Adjustment=adjustment)
        response = await self.action(RENDERING_CONTROL, "SetRelativeVolume", args)
        return _parse_int(extract(response, "NewVolume"), 0, _U16_MAX)

    async def mute(self) -> bool:
        args = soap_args(InstanceID=0, Channel="Master")
        response = await self.action(RENDERING_CONTROL, "GetMute", args)
        return parse_bool(extract(response, "CurrentMute"))

    async def set_mute(self, mute: bool) -> None:
        args = soap_args(InstanceID=0, Channel="Master", DesiredMute=bool(mute))
        await self.action(RENDERING_CONTROL, "SetMute", args)

    async def bass(self) -> int:
        response = await self.action(RENDERING_CONTROL, "GetBass", DEFAULT_ARGS)
        return _parse_int(extract(response, "CurrentBass"), -128, 127)

    async def set_bass(self, bass: int) -> None:
        args = soap_args(InstanceID=0, DesiredBass=bass)
        await self.action(RENDERING_CONTROL, "SetBass", args)

    async def treble(self) -> int:
        response = await self.action(RENDERING_CONTROL, "GetTreble", DEFAULT_ARGS)
        return _parse_int(extract(response, "CurrentTreble"), -128, 127)

    async def set_treble(self, treble: int) -> None:
        args = soap_args(InstanceID=0, DesiredTreble=treble)
        await self.action(RENDERING_CONTROL, "SetTreble", args)

    async def loudness(self) -> bool:
        args = soap_args(InstanceID=0, Channel="Master")
        response = await self.action(RENDERING_CONTROL, "GetLoudness", args)
        return parse_bool(extract(response, "CurrentLoudness"))

    async def set_loudness(self, loudness: bool) -> None:
        args = soap_args(InstanceID=0, Channel="Master", DesiredLoudness=bool(loudness))
        await self.action(RENDERING_CONTROL, "SetLoudness", args)

    # Queue

    async def queue(self) -> list[Track]:
        args = soap_args(QueueID=0, StartingIndex=0, RequestedCount=_U32_MAX)
        response = await self.action(QUEUE, "Browse", args)
        root = parse_xml(extract(response, "Result"))
        return [Track.from_xml(child) for child in root if isinstance(child.tag, str)]

    async def remove_track(self, track_no: int) -> None:
        """Remove a track from the queue; the first track number is 0."""
        args = soap_args(InstanceID=0, ObjectID=f"Q:0/{track_no + 1}")
        await self.action(AV_TRANSPORT, "RemoveTrackFromQueue", args)

    async def queue_end(self, uri: str, metadata: str) -> None:
        """Enqueue a track at the end of the queue."""
        await self._enqueue(uri, metadata, as_next=False)

    async def queue_next(self, uri: str, metadata: str) -> None:
        """Enqueue a track to play next."""
        await self._enqueue(uri, metadata, as_next=True)

    async def _enqueue(self, uri: str, metadata: str, as_next: bool) -> None:
        args = soap_args(
            InstanceID=0,
            EnqueuedURI=uri,
            EnqueuedURIMetaData=metadata,
            DesiredFirstTrackNumberEnqueued=0,
            EnqueueAsNext=as_next,
        )
        await self.action(AV_TRANSPORT, "AddURIToQueue", args)

    async def clear_queue(self) -> None:
        await self.action(AV_TRANSPORT, "RemoveAllTracksFromQueue", DEFAULT_ARGS)

    # ZoneGroupTopology

    async def _zone_group_state(self) -> list[tuple[str, list[SpeakerInfo]]]:
        response = await self.action(ZONE_GROUP_TOPOLOGY, "GetZoneGroupState", "")
        document = parse_xml(extract(response, "ZoneGroupState"))
        groups = find_root_node(document, "ZoneGroups", "Zone Group Topology")

        def elements_named(node, name):
            return (
                child
                for child in node
                if isinstance(child.tag, str) and local_name(child.tag).lower() == name
            )

        return [
            (
                find_node_attribute(group, "Coordinator"),
                [
                    SpeakerInfo.from_xml(member)
                    for member in elements_named(group, "zonegroupmember")
                ],
            )
            for group in elements_named(groups, "zonegroup")
        ]

    async def zone_group_state(self) -> dict[str, list[SpeakerInfo]]:
        """Map each group coordinator's UUID to the speakers in its group."""
        return dict(await self._zone_group_state())

    async def _join_uuid(self, uuid: str) -> None:
        args = soap_args(
            InstanceID=0, CurrentURI=f"x-rincon:{uuid}", CurrentURIMetaData=""
        )
        await self.action(AV_TRANSPORT, "SetAVTransportURI", args)

    async def join(self, roomname: str) -> bool:
        """Join the group of the room named ``roomname`` (case-insensitive).

        Returns False when no such room exists.
        """
        wanted = roomname.lower()
        for _, speakers in await self._zone_group_state():
            for info in speakers:
                if info.name.lower() == wanted:
                    await self._join_uuid(info.uuid)
                    return True
        return False

    async def leave(self) -> None:
        """Leave the current group; does nothing when not grouped."""
        await self.action(
            AV_TRANSPORT, "BecomeCoordinatorOfStandaloneGroup", DEFAULT_ARGS
        )

    async def set_transport_uri(self, uri: str, metadata: str) -> None:
        args = soap_args(InstanceID=0, CurrentURI=uri, CurrentURIMetaData=metadata)
        await self.action(AV_TRANSPORT, "SetAVTransportURI", args)

    async def transport_uri(self) -> str | None:
        response = await self.action(AV_TRANSPORT, "GetMediaInfo", DEFAULT_ARGS)
        return response.pop("CurrentURI", None)

    async def _music_services(
        self,
    ) -> tuple[list[int], dict[str, tuple[int, int, int]]]:
        """Available service types, and lowercase service name to (id, capabilities, type)."""
        response = await self.action(MUSIC_SERVICES, "ListAvailableServices", "")
        descriptor_list = extract(response, "AvailableServiceDescriptorList")
        service_type_list = extract(response, "AvailableServiceTypeList")

        available = [
            _parse_int(part, 0, _U32_MAX) for part in service_type_list.split(",")
        ]

        document = parse_xml(descriptor_list)
        root = find_root_node(document, "Services", "DescriptorList")
        services = {}
        for node in root:
            if not isinstance(node.tag, str):
                continue
            service_id = _parse_int(find_node_attribute(node, "Id"), 0, _U32_MAX)
            name = find_node_attribute(node, "Name")
            capabilities = _parse_int(
                find_node_attribute(node, "Capabilities"), 0, _U32_MAX
            )
            s_type = (service_id << 15) & _U32_MAX
            services[name.lower()] = (service_id, capabilities, s_type)
        return available, services

    async def snapshot(self) -> Snapshot:
        """Record volume, track, position and play state."""
        return await Snapshot.from_speaker(self)

    async def apply(self, snapshot: Snapshot) -> None:
        """Restore a snapshot taken earlier."""
        await snapshot.apply(self)

    async def action(self, service: URN, action: str, payload: str) -> dict[str, str]:
        """Invoke a raw UPnP action and return its output arguments."""
        found = self.device.find_service(service)
        if found is None:
            raise MissingServiceError(service, action, payload)
        return await found.action(self.device.url, action, payload)