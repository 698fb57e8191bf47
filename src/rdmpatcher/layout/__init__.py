"""Layout core: lane packing, geometry and drag-to-address."""

from .drag import DragController, DragLimits, DragSession, clamp_delta, compute_drop_address
from .engine import LayoutEngine
from .geometry import GeometryMapper

__all__ = [
    "DragController",
    "DragLimits",
    "DragSession",
    "GeometryMapper",
    "LayoutEngine",
    "clamp_delta",
    "compute_drop_address",
]
