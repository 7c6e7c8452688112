"""Exception hierarchy used throughout the package."""

from __future__ import annotations

from typing import Any


class SonorError(Exception):
    """Base class for every error raised by this package."""


class UPnPError(SonorError):
    """An error raised while talking UPnP to a device."""


class HttpStatusError(UPnPError):
    """The device answered with an unsuccessful HTTP status code."""

    def __init__(self, status: int) -> None:
        super().__init__(f"HTTP error code {status}")
        self.status = status


class ActionError(UPnPError):
    """The device reported a UPnP fault for an action."""

    def __init__(self, code: int, description: str = "") -> None:
        message = f"UPnP error {code}"
        if description:
            message = f"{message}: {description}"
        super().__init__(message)
        self.code = code
        self.description = description


class XmlMissingElementError(UPnPError):
    """An expected element or attribute is missing from an XML document."""

    def __init__(self, parent: str, element: str) -> None:
        super().__init__(f"{parent} does not contain a `{element}` element")
        self.parent = parent
        self.element = element


class ParseError(UPnPError):
    """A value in a response could not be parsed."""


class InvalidResponseError(UPnPError):
    """The device sent a response that does not make sense."""


class XmlError(SonorError):
    """A document could not be parsed as XML."""


class InvalidUriError(SonorError):
    """A URI could not be parsed."""


class MissingServiceError(SonorError):
    """The device lacks the service an action needs."""

    def __init__(self, service: Any, action: str, payload: str) -> None:
        super().__init__(
            f"Service {service} was not found when performing {action} with {payload}"
        )
        self.service = service
        self.action = action
        self.payload = payload


class SpeakerNotIncludedInOwnZoneGroupStateError(SonorError):
    """The speaker is missing from the zone group state it reported."""

    def __init__(
        self,
        message: str = "asked for zone group state but the speaker doesn't seem "
        "to be included there",
    ) -> None:
        super().__init__(message)


class NonSonosDeviceError(SonorError):
    """GetZoneGroupState pointed at a device that is not a Sonos player."""

    def __init__(
        self,
        message: str = "The Sonos-specific GetZoneGroupState action returned "
        "non-Sonos devices",
    ) -> None:
        super().__init__(message)


class NonSonosDevicesInDiscoveryError(SonorError):
    """Discovery for Sonos players answered with some other device."""

    def __init__(
        self,
        message: str = "UPnP discovery for Sonos devices returned non-Sonos devices",
    ) -> None:
        super().__init__(message)