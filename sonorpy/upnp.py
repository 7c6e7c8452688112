"""A small UPnP client: URNs, device descriptions, SOAP actions and SSDP search."""

from __future__ import annotations

import asyncio
import xml.etree.ElementTree as ET
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from urllib.parse import urljoin, urlsplit

import httpx

from .errors import (
    ActionError,
    HttpStatusError,
    InvalidResponseError,
    InvalidUriError,
    ParseError,
    SonorError,
    UPnPError,
    XmlMissingElementError,
)
from .utils import find_root_node, local_name, parse_xml

SSDP_ADDRESS = "239.255.255.250"
SSDP_PORT = 1900

_HTTP_TIMEOUT = 10.0
_SOAP_ENVELOPE_NS = "http://schemas.xmlsoap.org/soap/envelope/"
_SOAP_ENCODING = "http://schemas.xmlsoap.org/soap/encoding/"
_URN_KINDS = ("device", "service")


@dataclass(frozen=True)
class URN:
    """A UPnP uniform resource name such as ``urn:domain:device:Type:1``."""

    kind: str
    domain: str
    typ: str
    version: int

    @classmethod
    def device(cls, domain: str, typ: str, version: int) -> URN:
        """A device type URN."""
        return cls("device", domain, typ, version)

    @classmethod
    def service(cls, domain: str, typ: str, version: int) -> URN:
        """A service type URN."""
        return cls("service", domain, typ, version)

    @classmethod
    def parse(cls, s: str) -> URN:
        """Parse the textual form of a device or service URN."""
        parts = s.strip().split(":")
        if len(parts) != 5 or parts[0].lower() != "urn":
            raise ParseError(f"invalid urn: {s!r}")
        _, domain, kind, typ, version = parts
        if kind not in _URN_KINDS or not domain or not typ or not version.isdigit():
            raise ParseError(f"invalid urn: {s!r}")
        return cls(kind, domain, typ, int(version))

    def __str__(self) -> str:
        return f"urn:{self.domain}:{self.kind}:{self.typ}:{self.version}"


def _check_url(url: str) -> None:
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise InvalidUriError(str(exc)) from exc
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidUriError(f"invalid uri: {url!r}")


def build_soap_envelope(service: URN, action: str, payload: str) -> str:
    """Wrap an action's argument elements in a SOAP envelope."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f'<s:Envelope xmlns:s="{_SOAP_ENVELOPE_NS}" s:encodingStyle="{_SOAP_ENCODING}">'
        "<s:Body>"
        f'<u:{action} xmlns:u="{service}">{payload}</u:{action}>'
        "</s:Body>"
        "</s:Envelope>"
    )


def _first_element_child(node: ET.Element) -> ET.Element | None:
    return next((child for child in node if isinstance(child.tag, str)), None)


def _fault_error(fault: ET.Element) -> ActionError:
    code_text = None
    description = ""
    for node in fault.iter():
        if not isinstance(node.tag, str):
            continue
        name = local_name(node.tag)
        if name == "errorCode":
            code_text = (node.text or "").strip()
        elif name == "errorDescription":
            description = (node.text or "").strip()
    if code_text is None:
        raise InvalidResponseError("UPnP fault without an error code")
    try:
        code = int(code_text)
    except ValueError:
        raise ParseError(f"invalid UPnP error code: {code_text!r}") from None
    return ActionError(code, description)


def parse_action_response(text: str, action: str) -> dict[str, str]:
    """Read the output arguments of a SOAP action response, raising on faults."""
    root = parse_xml(text)
    body = find_root_node(root, "Body", "UPnP Response")
    response = _first_element_child(body)
    expected = f"{action}Response"
    if response is not None and local_name(response.tag) == "Fault":
        raise _fault_error(response)
    if response is None or local_name(response.tag).lower() != expected.lower():
        raise XmlMissingElementError("UPnP Response", expected)
    return {
        local_name(child.tag): child.text or ""
        for child in response
        if isinstance(child.tag, str)
    }


def _fault_from_body(text: str) -> ActionError | None:
    try:
        root = parse_xml(text)
        body = find_root_node(root, "Body", "UPnP Response")
    except SonorError:
        return None
    response = _first_element_child(body)
    if response is None or local_name(response.tag) != "Fault":
        return None
    try:
        return _fault_error(response)
    except SonorError:
        return None


@dataclass(frozen=True)
class Service:
    """A service offered by a UPnP device."""

    service_type: URN
    control_url: str
    service_id: str = ""
    event_sub_url: str = ""
    scpd_url: str = ""

    async def action(self, url: str, action: str, payload: str) -> dict[str, str]:
        """Invoke ``action`` on the device at ``url`` and return its output arguments."""
        _check_url(url)
        endpoint = urljoin(url, self.control_url)
        body = build_soap_envelope(self.service_type, action, payload)
        headers = {
            "Content-Type": 'text/xml; charset="utf-8"',
            "SOAPAction": f'"{self.service_type}#{action}"',
        }
        try:
            async with httpx.AsyncClient(timeout=_HTTP_TIMEOUT) as client:
                response = await client.post(
                    endpoint, content=body.encode("utf-8"), headers=headers
                )
        except httpx.InvalidURL as exc:
            raise InvalidUriError(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise UPnPError(str(exc)) from exc

        if response.is_success:
            return parse_action_response(response.text, action)
        fault = _fault_from_body(response.text)
        if fault is not None:
            raise fault
        raise HttpStatusError(response.status_code)


def _child(node: ET.Element, name: str) -> ET.Element | None:
    for child in node:
        if isinstance(child.tag, str) and local_name(child.tag) == name:
            return child
    return None


def _child_text(node: ET.Element, name: str) -> str | None:
    child = _child(node, name)
    if child is None:
        return None
    return (child.text or "").strip()


def _required_text(node: ET.Element, name: str) -> str:
    text = _child_text(node, name)
    if text is None:
        raise XmlMissingElementError(local_name(node.tag), name)
    return text


def _parse_service(node: ET.Element) -> Service:
    return Service(
        service_type=URN.parse(_required_text(node, "serviceType")),
        control_url=_required_text(node, "controlURL"),
        service_id=_child_text(node, "serviceId") or "",
        event_sub_url=_child_text(node, "eventSubURL") or "",
        scpd_url=_child_text(node, "SCPDURL") or "",
    )


@dataclass(frozen=True)
class Device:
    """A UPnP device as described by its description document."""

    url: str
    device_type: URN
    friendly_name: str = ""
    udn: str = ""
    services: list[Service] = field(default_factory=list)
    devices: list[Device] = field(default_factory=list)

    @classmethod
    def _from_node(cls, url: str, node: ET.Element) -> Device:
        service_list = _child(node, "serviceList")
        device_list = _child(node, "deviceList")
        services = (
            [
                _parse_service(child)
                for child in service_list
                if isinstance(child.tag, str) and local_name(child.tag) == "service"
            ]
            if service_list is not None
            else []
        )
        devices = (
            [
                cls._from_node(url, child)
                for child in device_list
                if isinstance(child.tag, str) and local_name(child.tag) == "device"
            ]
            if device_list is not None
            else []
        )
        return cls(
            url=url,
            device_type=URN.parse(_required_text(node, "deviceType")),
            friendly_name=_child_text(node, "friendlyName") or "",
            udn=_child_text(node, "UDN") or "",
            services=services,
            devices=devices,
        )

    @classmethod
    def from_xml(cls, url: str, text: str) -> Device:
        """Build a device from the description document served at ``url``."""
        root = parse_xml(text)
        return cls._from_node(url, find_root_node(root, "device", "Device Description"))

    @classmethod
    async def from_url(cls, url: str) -> Device:
        """Fetch and parse the description document at ``url``."""
        _check_url(url)
        try:
            async with httpx.AsyncClient(timeout=_HTTP_TIMEOUT) as client:
                response = await client.get(url)
        except httpx.InvalidURL as exc:
            raise InvalidUriError(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise UPnPError(str(exc)) from exc
        if not response.is_success:
            raise HttpStatusError(response.status_code)
        return cls.from_xml(url, response.text)

    def find_service(self, urn: URN) -> Service | None:
        """Search this device and its embedded devices for a service of type ``urn``."""
        for service in self.services:
            if service.service_type == urn:
                return service
        for device in self.devices:
            found = device.find_service(urn)
            if found is not None:
                return found
        return None


def _search_request(search_target: URN | str, timeout: float) -> bytes:
    mx = max(1, int(timeout))
    return (
        "M-SEARCH * HTTP/1.1\r\n"
        f"Host: {SSDP_ADDRESS}:{SSDP_PORT}\r\n"
        'Man: "ssdp:discover"\r\n'
        f"ST: {search_target}\r\n"
        f"MX: {mx}\r\n"
        "\r\n"
    ).encode("ascii")


def _parse_ssdp_response(data: bytes) -> dict[str, str] | None:
    lines = data.decode("utf-8", errors="replace").splitlines()
    if not lines or not lines[0].upper().startswith("HTTP/1.1 200"):
        return None
    headers = {}
    for line in lines[1:]:
        name, sep, value = line.partition(":")
        if sep:
            headers[name.strip().lower()] = value.strip()
    return headers


class _SsdpProtocol(asyncio.DatagramProtocol):
    def __init__(self, queue: asyncio.Queue[bytes]) -> None:
        self._queue = queue

    def datagram_received(self, data: bytes, addr: tuple) -> None:
        self._queue.put_nowait(data)


async def discover(search_target: URN | str, timeout: float) -> AsyncIterator[Device]:
    """Search the network via SSDP and yield each responding device once."""
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[bytes] = asyncio.Queue()
    try:
        transport, _ = await loop.create_datagram_endpoint(
            lambda: _SsdpProtocol(queue), local_addr=("0.0.0.0", 0)
        )
    except OSError as exc:
        raise UPnPError(f"could not open SSDP socket: {exc}") from exc

    try:
        try:
            transport.sendto(
                _search_request(search_target, timeout), (SSDP_ADDRESS, SSDP_PORT)
            )
        except OSError as exc:
            raise UPnPError(f"could not send SSDP search: {exc}") from exc

        deadline = loop.time() + timeout
        seen: set[str] = set()
        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            try:
                data = await asyncio.wait_for(queue.get(), remaining)
            except asyncio.TimeoutError:
                break
            headers = _parse_ssdp_response(data)
            if headers is None:
                continue
            location = headers.get("location")
            if not location or location in seen:
                continue
            seen.add(location)
            yield await Device.from_url(location)
    finally:
        transport.close()