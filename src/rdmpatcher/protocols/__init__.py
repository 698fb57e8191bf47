"""Protocol definitions for patch events, observers and the update channel."""

from .channel import DeviceUpdateChannel
from .events import PatchEvent
from .observers import PatchObserver

__all__ = [
    "DeviceUpdateChannel",
    "PatchEvent",
    "PatchObserver",
]
