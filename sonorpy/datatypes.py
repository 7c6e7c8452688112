"""Small value types shared by the speaker API."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum

from .errors import SonorError, XmlMissingElementError
from .utils import local_name


class ParseRepeatModeError(SonorError, ValueError):
    """A string did not name a repeat mode."""

    def __init__(
        self, message: str = "provided string was not `NONE` or `ONE` or `ALL`"
    ) -> None:
        super().__init__(message)


class RepeatMode(Enum):
    """How the current playlist is repeated."""

    NONE = "None"
    ONE = "One"
    ALL = "All"

    @classmethod
    def from_str(cls, s: str) -> RepeatMode:
        """Parse ``none``, ``one`` or ``all`` in any letter case."""
        for mode in cls:
            if mode.value.lower() == s.lower():
                return mode
        raise ParseRepeatModeError()

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class SpeakerInfo:
    """Name, UUID and description location of a speaker in a zone group."""

    name: str
    uuid: str
    location: str

    @classmethod
    def from_xml(cls, node: ET.Element) -> SpeakerInfo:
        """Build from a ``ZoneGroupMember`` element."""
        uuid = name = location = None
        for attr, value in node.attrib.items():
            key = local_name(attr).lower()
            if key == "uuid":
                uuid = value
            elif key == "location":
                location = value
            elif key == "zonename":
                name = value
        if name is None:
            raise XmlMissingElementError("RoomName", "ZoneGroupMember")
        if uuid is None:
            raise XmlMissingElementError("UUID", "ZoneGroupMember")
        if location is None:
            raise XmlMissingElementError("Location", "ZoneGroupMember")
        return cls(name=name, uuid=uuid, location=location)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpeakerInfo):
            return NotImplemented
        return self.uuid.lower() == other.uuid.lower()

    def __hash__(self) -> int:
        return hash(self.uuid.lower())