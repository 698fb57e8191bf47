"""Data models for the patcher."""

from .address_space import DEFAULT_ADDRESS_SPACE, AddressSpace
from .config import AppConfig
from .device import PatchDevice, create_device, parse_start_address, validate_start_address
from .lanes import LaneAssignment, RowSegment
from .patch_file import DeviceRecord, PatchFile

__all__ = [
    "DEFAULT_ADDRESS_SPACE",
    "AddressSpace",
    "AppConfig",
    "DeviceRecord",
    "LaneAssignment",
    "PatchDevice",
    "PatchFile",
    "RowSegment",
    "create_device",
    "parse_start_address",
    "validate_start_address",
]
