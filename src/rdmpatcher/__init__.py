"""rdmpatcher: view and edit the start-address patch of devices on a DMX universe."""

__version__ = "0.1.0"

# Layout core
from .layout import DragController, GeometryMapper, LayoutEngine, compute_drop_address
from .models import AddressSpace, LaneAssignment, PatchDevice, create_device

# Editing
from .services import PatchService

__all__ = [
    "AddressSpace",
    "DragController",
    "GeometryMapper",
    "LaneAssignment",
    "LayoutEngine",
    "PatchDevice",
    "PatchService",
    "compute_drop_address",
    "create_device",
]
