"""Device registries implementing the DeviceUpdateChannel protocol."""

from .json_file import JsonFileRegistry
from .memory import InMemoryRegistry

__all__ = ["InMemoryRegistry", "JsonFileRegistry"]
