"""Helpers for building SOAP arguments and reading XML responses."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import MutableMapping
from typing import Any

from .errors import ParseError, XmlError, XmlMissingElementError

_U32_MAX = 2**32 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")


def soap_args(**kwargs: Any) -> str:
    """Render keyword arguments as consecutive XML elements, in order."""
    parts = []
    for name, value in kwargs.items():
        if isinstance(value, bool):
            value = int(value)
        parts.append(f"<{name}>{value}</{name}>")
    return "".join(parts)


def extract(mapping: MutableMapping[str, str], key: str) -> str:
    """Remove and return ``key`` from a response mapping."""
    try:
        return mapping.pop(key)
    except KeyError:
        raise XmlMissingElementError("UPnP Response", key) from None


def seconds_to_str(seconds_total: int) -> str:
    """Format seconds as ``[-]HH:MM:SS``."""
    sign = "-" if seconds_total < 0 else ""
    seconds_total = abs(seconds_total)
    hours, rest = divmod(seconds_total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{sign}{hours:02}:{minutes:02}:{seconds:02}"


def _parse_u32(text: str) -> int:
    if not _UNSIGNED.fullmatch(text):
        raise ValueError(text)
    value = int(text)
    if value > _U32_MAX:
        raise ValueError(text)
    return value


def seconds_from_str(s: str) -> int:
    """Parse an ``H:M:S`` duration into seconds."""
    parts = s.split(":", 2)
    if len(parts) != 3:
        raise ParseError("invalid duration")
    try:
        hours, minutes, seconds = (_parse_u32(part) for part in parts)
    except ValueError:
        raise ParseError("invalid duration") from None
    return hours * 3600 + minutes * 60 + seconds


def parse_bool(s: str) -> bool:
    """Parse the ``0``/``1`` booleans used by UPnP responses."""
    value = s.strip()
    if value == "0":
        return False
    if value == "1":
        return True
    raise ParseError("bool was neither `0` nor `1`")


def local_name(tag: str) -> str:
    """Strip an ElementTree namespace prefix from a tag or attribute name."""
    if tag.startswith("{"):
        return tag.rpartition("}")[2]
    return tag


def parse_xml(text: str) -> ET.Element:
    """Parse an XML document, returning its root element."""
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise XmlError(str(exc)) from exc


def find_node_attribute(node: ET.Element, attr: str) -> str:
    """Return the value of an attribute, matching its name case-insensitively."""
    wanted = attr.lower()
    for name, value in node.attrib.items():
        if local_name(name).lower() == wanted:
            return value
    raise XmlMissingElementError(local_name(node.tag), attr)


def find_root_node(document: ET.Element, element: str, docname: str) -> ET.Element:
    """Find the first element in document order whose name matches ``element``."""
    wanted = element.lower()
    for node in document.iter():
        if isinstance(node.tag, str) and local_name(node.tag).lower() == wanted:
            return node
    raise XmlMissingElementError(docname, element)