"""Lane assignment produced by a layout pass.

A LaneAssignment is runtime data: it is rebuilt on every pack and never
persisted, so it is a frozen dataclass rather than a pydantic model.
"""

from dataclasses import dataclass, field

from .address_space import AddressSpace
from .device import PatchDevice


@dataclass(frozen=True, slots=True)
class RowSegment:
    """A run of cells inside one visual row of one lane.

    `device` is None for an empty cell (span 1). A device crossing a row
    boundary produces one segment in each row it touches.
    """

    start_slot: int
    span: int
    device: PatchDevice | None = None

    @property
    def is_occupied(self) -> bool:
        return self.device is not None


@dataclass(frozen=True, slots=True)
class LaneAssignment:
    """
    Result of packing devices into lanes.

    Attributes:
        address_space: Bus the assignment was computed for
        occupancy: occupancy[lane][slot] is the device in that cell or None
        lanes: uid -> lane index
    """

    address_space: AddressSpace
    occupancy: tuple[tuple[PatchDevice | None, ...], ...]
    lanes: dict[str, int] = field(default_factory=dict)

    @property
    def lane_count(self) -> int:
        """Number of lanes (always >= 1)."""
        return len(self.occupancy)

    @property
    def device_count(self) -> int:
        return len(self.lanes)

    def device_at(self, lane: int, slot: int) -> PatchDevice | None:
        """Get the device occupying a cell, or None."""
        return self.occupancy[lane][slot]

    def lane_of(self, uid: str) -> int:
        """
        Get the lane a device was assigned to.

        Raises:
            KeyError: If the device was not part of this pass
        """
        return self.lanes[uid]

    def devices_in_lane(self, lane: int) -> list[PatchDevice]:
        """Devices in a lane, ordered by start slot."""
        seen: list[PatchDevice] = []
        for device in self.occupancy[lane]:
            if device is not None and (not seen or seen[-1] is not device):
                seen.append(device)
        return seen

    def max_coverage(self) -> int:
        """Highest number of devices covering any single slot."""
        if not self.lanes:
            return 0
        return max(
            sum(1 for lane in self.occupancy if lane[slot] is not None)
            for slot in range(self.address_space.total_slots)
        )

    def segments_for_row(self, row: int, lane: int) -> list[RowSegment]:
        """
        Split one lane of one visual row into cell runs.

        Args:
            row: Visual row index (0 to row_count - 1)
            lane: Lane index (0 to lane_count - 1)

        Returns:
            Segments covering exactly slots_per_row cells, left to right
        """
        per_row = self.address_space.slots_per_row
        row_start = row * per_row
        row_end = row_start + per_row
        cells = self.occupancy[lane]

        segments: list[RowSegment] = []
        slot = row_start
        while slot < row_end:
            device = cells[slot]
            if device is None:
                segments.append(RowSegment(start_slot=slot, span=1))
                slot += 1
                continue
            span = min(device.end - slot + 1, row_end - slot)
            segments.append(RowSegment(start_slot=slot, span=span, device=device))
            slot += span
        return segments
