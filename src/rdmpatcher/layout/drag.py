"""Turning pointer drags into proposed start addresses."""

import logging
import math
from dataclasses import dataclass

from rdmpatcher.models import LaneAssignment, PatchDevice

from .geometry import GeometryMapper

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DragLimits:
    """Rectangle the dragged element's top-left corner may move within."""

    left: float
    top: float
    width: float
    height: float


def clamp_delta(delta: float) -> float:
    """Drags above or left of the origin snap to the origin edge."""
    return max(0.0, delta)


def compute_drop_address(
    delta_x: float,
    delta_y: float,
    cell_width_px: float,
    cell_height_px: float,
    slots_per_row: int,
    row_count: int,
    half_width_px: float = 0.0,
    half_height_px: float = 0.0,
) -> int:
    """
    Compute the 1-based start address under the centre of a dropped device.

    Args:
        delta_x: Horizontal drag distance from the patch origin (>= 0)
        delta_y: Vertical drag distance from the patch origin (>= 0)
        cell_width_px: Width of one slot cell
        cell_height_px: Height of one row (header plus lanes)
        slots_per_row: Slots per visual row
        row_count: Number of visual rows
        half_width_px: Half the dragged element's width
        half_height_px: Half the dragged element's height

    Returns:
        Start address in [1, slots_per_row * row_count]
    """
    center_x = min(delta_x + half_width_px, cell_width_px * slots_per_row - 1)
    center_y = min(delta_y + half_height_px, cell_height_px * row_count - 1)
    slot = math.floor(center_x / cell_width_px) + slots_per_row * math.floor(center_y / cell_height_px)
    return slot + 1


class DragController:
    """
    Proposes start addresses for drag gestures.

    The controller only computes; committing the address goes through
    PatchService and the device update channel.
    """

    def __init__(self, mapper: GeometryMapper):
        self.mapper = mapper

    def drag_limits(
        self,
        row_width_px: float,
        cell_height_px: float,
        device_width_px: float,
        device_height_px: float,
    ) -> DragLimits:
        """Bounds for the dragged element so it never leaves the patch area."""
        patcher_height = self.mapper.row_count * cell_height_px
        return DragLimits(
            left=0,
            top=0,
            width=row_width_px - device_width_px - 1,
            height=patcher_height - device_height_px - 1,
        )

    def propose(
        self,
        delta_x: float,
        delta_y: float,
        row_width_px: float,
        lane_count: int,
        half_width_px: float = 0.0,
        half_height_px: float = 0.0,
    ) -> int:
        """Compute a drop address using the mapper's current geometry."""
        return compute_drop_address(
            clamp_delta(delta_x),
            clamp_delta(delta_y),
            cell_width_px=self.mapper.cell_width_px(row_width_px),
            cell_height_px=self.mapper.row_height_px(lane_count),
            slots_per_row=self.mapper.slots_per_row,
            row_count=self.mapper.row_count,
            half_width_px=half_width_px,
            half_height_px=half_height_px,
        )

    def begin(self, device: PatchDevice, assignment: LaneAssignment, row_width_px: float) -> "DragSession":
        """Start dragging a device with the geometry of the current layout."""
        logger.debug(f"Drag started for {device.uid}")
        return DragSession(
            controller=self,
            device=device,
            row_width_px=row_width_px,
            lane_count=assignment.lane_count,
        )


class DragSession:
    """
    One drag gesture.

    Geometry is captured when the drag begins; a re-pack during the
    gesture does not change where the drop lands.
    """

    def __init__(self, controller: DragController, device: PatchDevice, row_width_px: float, lane_count: int):
        self.controller = controller
        self.device = device
        self.row_width_px = row_width_px
        self.lane_count = lane_count
        self.active = True

        mapper = controller.mapper
        self.device_width_px = mapper.cell_width_px(row_width_px)
        self.device_height_px = mapper.address_space.height_per_device_px
        self.limits = controller.drag_limits(
            row_width_px,
            mapper.row_height_px(lane_count),
            self.device_width_px,
            self.device_height_px,
        )

    def drop(self, delta_x: float, delta_y: float) -> int | None:
        """
        Finish the drag and return the proposed start address.

        Returns None if the session was already cancelled or dropped.
        """
        if not self.active:
            return None
        self.active = False
        address = self.controller.propose(
            delta_x,
            delta_y,
            self.row_width_px,
            self.lane_count,
            half_width_px=self.device_width_px / 2,
            half_height_px=self.device_height_px / 2,
        )
        logger.debug(f"Drag of {self.device.uid} dropped at address {address}")
        return address

    def cancel(self) -> None:
        """Abort the drag without proposing an address."""
        if self.active:
            logger.debug(f"Drag of {self.device.uid} cancelled")
        self.active = False
