"""Asynchronous discovery and control of Sonos speakers over UPnP."""

__version__ = "2.0.0"