"""First-fit lane packing for devices on the bus."""

import logging
from collections.abc import Iterable

from rdmpatcher.models import DEFAULT_ADDRESS_SPACE, AddressSpace, LaneAssignment, PatchDevice

logger = logging.getLogger(__name__)


class LayoutEngine:
    """
    Packs devices into lanes so devices sharing a lane never overlap.

    Devices are taken in ascending start order (stable, so equal starts keep
    their input order) and each goes into the first lane with all of
    `[start, end]` free; a new lane is opened when none is. First-fit is not
    optimal interval colouring, but it keeps earlier-addressed devices in
    the top lanes, which makes the stacking predictable while editing.

    The engine assumes validated devices (see create_device) and never
    mutates them.
    """

    def __init__(self, address_space: AddressSpace = DEFAULT_ADDRESS_SPACE):
        self.address_space = address_space

    def pack(self, devices: Iterable[PatchDevice]) -> LaneAssignment:
        """
        Assign every device to a lane.

        Args:
            devices: Devices in any order; uids must be unique

        Returns:
            A fresh LaneAssignment with at least one lane
        """
        total_slots = self.address_space.total_slots
        ordered = sorted(devices, key=lambda device: device.start)

        lanes: list[list[PatchDevice | None]] = [[None] * total_slots]
        assigned: dict[str, int] = {}

        for device in ordered:
            lane_index = self._first_free_lane(lanes, device)
            if lane_index is None:
                lanes.append([None] * total_slots)
                lane_index = len(lanes) - 1

            cells = lanes[lane_index]
            for slot in range(device.start, device.end + 1):
                cells[slot] = device
            assigned[device.uid] = lane_index

        logger.debug(f"Packed {len(ordered)} devices into {len(lanes)} lane(s)")
        return LaneAssignment(
            address_space=self.address_space,
            occupancy=tuple(tuple(cells) for cells in lanes),
            lanes=assigned,
        )

    @staticmethod
    def _first_free_lane(
        lanes: list[list[PatchDevice | None]], device: PatchDevice
    ) -> int | None:
        for index, cells in enumerate(lanes):
            if all(cells[slot] is None for slot in range(device.start, device.end + 1)):
                return index
        return None
