"""Tracks and the information about what is currently playing."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from .errors import XmlMissingElementError
from .utils import local_name, seconds_from_str


@dataclass(frozen=True)
class Track:
    """A piece of music: always a title and a URI, other fields when known."""

    title: str
    uri: str
    creator: str | None = None
    album: str | None = None
    duration: int | None = None

    @classmethod
    def from_xml(cls, node: ET.Element) -> Track:
        """Build from a DIDL-Lite ``item`` element."""
        title = creator = album = None
        res = None
        for child in node:
            if not isinstance(child.tag, str):
                continue
            name = local_name(child.tag)
            if name == "title":
                title = child.text or ""
            elif name == "creator":
                creator = child.text or ""
            elif name == "album":
                album = child.text or ""
            elif name == "res":
                res = child

        node_name = local_name(node.tag)
        if title is None:
            raise XmlMissingElementError(node_name, "title")
        if res is None:
            raise XmlMissingElementError(node_name, "res")

        duration = None
        for attr, value in res.attrib.items():
            if local_name(attr).lower() == "duration":
                duration = seconds_from_str(value)
                break

        return cls(
            title=title,
            uri=res.text or "",
            creator=creator,
            album=album,
            duration=duration,
        )

    def __str__(self) -> str:
        text = self.title
        if self.creator is not None:
            text += f" - {self.creator}"
        if self.album is not None:
            text += f" ({self.album})"
        return text


@dataclass(frozen=True)
class TrackInfo:
    """A track with its raw metadata, queue position, duration and elapsed time."""

    track: Track
    metadata: str
    track_no: int
    duration: int
    elapsed: int