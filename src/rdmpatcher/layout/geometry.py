"""Mapping between grid coordinates and pixel coordinates."""

import math

from rdmpatcher.models import DEFAULT_ADDRESS_SPACE, AddressSpace


class GeometryMapper:
    """
    Converts between (row, lane, slot offset) and pixels.

    Rows hold `slots_per_row` slots side by side. Each row is one header
    line (slot numbers) plus one line per lane, each `height_per_device_px`
    tall. Forward transforms size the layout; inverse transforms turn a
    pointer position back into a slot.

    The pixel -> slot transforms bucket with floor, so
    `pixel_x_to_slot_offset(slot_to_pixel_x(n))` is always `n`.
    """

    def __init__(self, address_space: AddressSpace = DEFAULT_ADDRESS_SPACE):
        self.address_space = address_space

    @property
    def slots_per_row(self) -> int:
        return self.address_space.slots_per_row

    @property
    def row_count(self) -> int:
        return self.address_space.row_count

    def row_height_px(self, lane_count: int) -> int:
        """Height of one row: a header line plus at least one lane."""
        return (1 + max(1, lane_count)) * self.address_space.height_per_device_px

    def patcher_height_px(self, lane_count: int) -> int:
        """Height of the whole patch view."""
        return self.row_count * self.row_height_px(lane_count)

    def cell_width_px(self, row_width_px: float) -> float:
        """Width of one slot cell."""
        return row_width_px / self.slots_per_row

    def slot_to_pixel_x(self, slot_offset: int, row_width_px: float) -> float:
        """Left edge of a slot offset within a row."""
        return slot_offset * self.cell_width_px(row_width_px)

    def pixel_x_to_slot_offset(self, x_px: float, row_width_px: float) -> int:
        """Slot offset under an x position, clamped to the row."""
        offset = math.floor(x_px / self.cell_width_px(row_width_px))
        return _clamp(offset, 0, self.slots_per_row - 1)

    def pixel_y_to_lane(self, y_px: float, lane_height_px: float) -> int:
        """Band index under a y position, clamped to the row count."""
        band = math.floor(y_px / lane_height_px)
        return _clamp(band, 0, self.row_count - 1)

    def slot_to_grid(self, slot: int) -> tuple[int, int]:
        """Convert a 0-based slot to (row, offset)."""
        return divmod(slot, self.slots_per_row)

    def grid_to_slot(self, row: int, offset: int) -> int:
        """Convert (row, offset) to a 0-based slot."""
        return row * self.slots_per_row + offset

    def slot_to_pixel(self, slot: int, lane: int, row_width_px: float, lane_count: int) -> tuple[float, int]:
        """
        Top-left pixel of a device cell.

        Lane 0 sits directly below the row's header line.
        """
        row, offset = self.slot_to_grid(slot)
        height = self.address_space.height_per_device_px
        y = row * self.row_height_px(lane_count) + (1 + lane) * height
        return self.slot_to_pixel_x(offset, row_width_px), y


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))
