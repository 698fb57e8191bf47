"""Patch service: owns the device collection and keeps its layout current."""

import logging
from collections.abc import Iterable

from rdmpatcher.exceptions import (
    DeviceNotFoundError,
    MovePendingError,
    RemoteUpdateFailedError,
    wrap_registry_error,
)
from rdmpatcher.layout import DragController, DragSession, GeometryMapper, LayoutEngine
from rdmpatcher.models import (
    DEFAULT_ADDRESS_SPACE,
    AddressSpace,
    LaneAssignment,
    PatchDevice,
    create_device,
    validate_start_address,
)
from rdmpatcher.protocols import DeviceUpdateChannel, PatchEvent, PatchObserver
from rdmpatcher.utils import ObserverManager

logger = logging.getLogger(__name__)


class PatchService:
    """
    Manages editing of a universe's patch.

    Every mutation re-packs the devices and notifies observers with the new
    LaneAssignment, so views never render a stale layout.

    Address and personality changes go through the injected
    DeviceUpdateChannel. The flow for a move is:

    1. validate the address (InvalidAddressError, nothing changes)
    2. emit MOVE_PENDING so a view can drop the dragged element
    3. await the channel
    4. success: set_start, re-pack, emit DEVICE_MOVED
       failure: re-pack with the old start, emit MOVE_REVERTED and raise
       RemoteUpdateFailedError. A cancelled request also reverts.

    Threading:
        Not thread-safe. The caller serializes edit -> re-pack -> render,
        typically from a single event loop.
    """

    def __init__(
        self,
        channel: DeviceUpdateChannel,
        address_space: AddressSpace = DEFAULT_ADDRESS_SPACE,
        universe: int = 1,
    ):
        """
        Initialize the patch service.

        Args:
            channel: Registry that confirms address/identify/personality changes
            address_space: Bus geometry
            universe: Universe being edited
        """
        self.channel = channel
        self.universe = universe
        self._devices: dict[str, PatchDevice] = {}
        self._pending: set[str] = set()
        self._observers = ObserverManager[PatchObserver](observer_type_name="patch")
        self._configure(address_space)
        self._assignment = self.engine.pack([])
        logger.info(f"PatchService initialized for universe {universe}")

    def _configure(self, address_space: AddressSpace) -> None:
        self.address_space = address_space
        self.engine = LayoutEngine(address_space)
        self.mapper = GeometryMapper(address_space)
        self.drag_controller = DragController(self.mapper)

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: PatchObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: PatchObserver) -> None:
        self._observers.unregister(observer)

    def _notify(self, event: PatchEvent, uids: list[str]) -> None:
        self._observers.notify("on_patch_event", event, self._assignment, uids)

    # =================================================================
    # Queries
    # =================================================================

    @property
    def devices(self) -> list[PatchDevice]:
        """Devices in insertion order."""
        return list(self._devices.values())

    @property
    def assignment(self) -> LaneAssignment:
        """Layout for the current device state."""
        return self._assignment

    @property
    def pending_uids(self) -> frozenset[str]:
        """Devices with an address change awaiting the registry."""
        return frozenset(self._pending)

    def get_device(self, uid: str) -> PatchDevice:
        """
        Get a device by uid.

        Raises:
            DeviceNotFoundError: If no such device exists
        """
        try:
            return self._devices[uid]
        except KeyError:
            raise DeviceNotFoundError(uid) from None

    def repack(self) -> LaneAssignment:
        """Recompute the lane assignment from current device state."""
        self._assignment = self.engine.pack(self._devices.values())
        return self._assignment

    def _ensure_not_pending(self, operation: str, uids: Iterable[str]) -> None:
        for uid in uids:
            if uid in self._pending:
                raise MovePendingError(uid, operation)

    # =================================================================
    # Collection edits
    # =================================================================

    def set_devices(self, devices: Iterable[PatchDevice]) -> LaneAssignment:
        """
        Replace the whole collection.

        Raises:
            ValueError: If two devices share a uid
            MovePendingError: If a move is still awaiting the registry
        """
        self._ensure_not_pending("reload devices", sorted(self._pending))
        by_uid: dict[str, PatchDevice] = {}
        for device in devices:
            if device.uid in by_uid:
                raise ValueError(f"Duplicate device uid: {device.uid}")
            by_uid[device.uid] = device

        self._devices = by_uid
        self.repack()
        self._notify(PatchEvent.DEVICES_LOADED, [])
        logger.info(
            f"Loaded {len(by_uid)} devices into {self._assignment.lane_count} lane(s)"
        )
        return self._assignment

    def add_device(self, device: PatchDevice) -> LaneAssignment:
        """
        Add a device to the patch.

        Raises:
            ValueError: If the uid is already present
        """
        if device.uid in self._devices:
            raise ValueError(f"Duplicate device uid: {device.uid}")
        self._devices[device.uid] = device
        self.repack()
        self._notify(PatchEvent.DEVICE_ADDED, [device.uid])
        logger.info(f"Added device {device.uid} at {device.start_address}")
        return self._assignment

    def remove_device(self, uid: str) -> PatchDevice:
        """
        Remove a device from the patch.

        Raises:
            DeviceNotFoundError: If no such device exists
            MovePendingError: If the device is still being moved
        """
        device = self.get_device(uid)
        self._ensure_not_pending("remove device", [uid])
        del self._devices[uid]
        self.repack()
        self._notify(PatchEvent.DEVICE_REMOVED, [uid])
        logger.info(f"Removed device {uid}")
        return device

    def update_address_space(self, address_space: AddressSpace) -> LaneAssignment:
        """
        Switch to a new bus geometry.

        Every device is re-validated against the new space first; if any
        no longer fits, nothing changes. The channel is told about the new
        space so it accepts addresses on the resized bus.

        Raises:
            InvalidAddressError: If a device start is outside the new space
            MovePendingError: If a move is still awaiting the registry
        """
        self._ensure_not_pending("change address space", sorted(self._pending))
        rebuilt = [
            create_device(
                uid=d.uid,
                label=d.label,
                start_address=d.start_address,
                footprint=d.footprint,
                personality=d.current_personality,
                personality_count=d.personality_count,
                address_space=address_space,
            )
            for d in self._devices.values()
        ]
        self.channel.update_address_space(address_space)
        self._configure(address_space)
        self._devices = {d.uid: d for d in rebuilt}
        self.repack()
        self._notify(PatchEvent.LAYOUT_CHANGED, [])
        logger.info(
            f"Address space changed to {address_space.total_slots} slots, "
            f"{address_space.slots_per_row} per row"
        )
        return self._assignment

    # =================================================================
    # Registry-backed edits
    # =================================================================

    async def set_start_address(self, uid: str, start_address: int) -> PatchDevice:
        """
        Move a device, committing through the update channel.

        Args:
            uid: Device to move
            start_address: New 1-based start address

        Returns:
            The moved device

        Raises:
            DeviceNotFoundError: If no such device exists
            InvalidAddressError: If the address is outside the bus
            RemoteUpdateFailedError: If the registry refused; device unchanged
            MovePendingError: If an earlier move of the device is still pending
        """
        device = self.get_device(uid)
        validate_start_address(start_address, self.address_space, uid=uid)
        operation = f"set start address to {start_address}"

        if uid in self._pending:
            raise MovePendingError(uid, operation)

        self._pending.add(uid)
        self._notify(PatchEvent.MOVE_PENDING, [uid])
        moved = False
        try:
            try:
                confirmed = await self.channel.request_address_change(uid, start_address)
            except Exception as e:
                logger.error(f"Registry error while trying to {operation} for {uid}: {e}")
                raise wrap_registry_error(e, uid, operation) from e
            if not confirmed:
                raise RemoteUpdateFailedError(uid=uid, operation=operation)
            device.set_start(start_address)
            moved = True
        finally:
            # Every exit, cancellation included, ends the pending state with an event
            self._pending.discard(uid)
            self.repack()
            if moved:
                self._notify(PatchEvent.DEVICE_MOVED, [uid])
            else:
                logger.warning(f"Move of {uid} to {start_address} reverted")
                self._notify(PatchEvent.MOVE_REVERTED, [uid])

        logger.info(
            f"Moved {uid} to {start_address} (lane {self._assignment.lane_of(uid)} "
            f"of {self._assignment.lane_count})"
        )
        return device

    async def move_by(self, uid: str, slots: int) -> PatchDevice:
        """
        Nudge a device by a number of slots, stopping at the bus edges.

        Raises:
            RemoteUpdateFailedError: If the registry refused
        """
        device = self.get_device(uid)
        target = max(1, min(device.start_address + slots, self.address_space.total_slots))
        if target == device.start_address:
            return device
        return await self.set_start_address(uid, target)

    def begin_drag(self, uid: str, row_width_px: float) -> DragSession:
        """Start a drag gesture for a device using the current layout."""
        return self.drag_controller.begin(self.get_device(uid), self._assignment, row_width_px)

    async def complete_drag(self, session: DragSession, delta_x: float, delta_y: float) -> PatchDevice | None:
        """
        Drop a dragged device and commit the address under its centre.

        Returns:
            The moved device, or None if the session was no longer active
        """
        address = session.drop(delta_x, delta_y)
        if address is None:
            return None
        return await self.set_start_address(session.device.uid, address)

    async def get_identify_mode(self, uid: str) -> bool:
        self.get_device(uid)
        try:
            return await self.channel.get_identify_mode(uid)
        except Exception as e:
            raise wrap_registry_error(e, uid, "read identify mode") from e

    async def set_identify(self, uid: str, on: bool) -> bool:
        """
        Turn identify on or off.

        Raises:
            RemoteUpdateFailedError: If the registry refused
        """
        self.get_device(uid)
        operation = f"turn identify {'on' if on else 'off'}"
        try:
            confirmed = await self.channel.set_identify(uid, on)
        except Exception as e:
            raise wrap_registry_error(e, uid, operation) from e
        if not confirmed:
            raise RemoteUpdateFailedError(uid=uid, operation=operation)

        self._notify(PatchEvent.IDENTIFY_CHANGED, [uid])
        return on

    async def toggle_identify(self, uid: str) -> bool:
        """Flip identify mode; returns the new state."""
        current = await self.get_identify_mode(uid)
        return await self.set_identify(uid, not current)

    async def set_personality(self, uid: str, personality: int) -> PatchDevice:
        """
        Select a personality on a device.

        Raises:
            ValueError: If the device has no such personality
            RemoteUpdateFailedError: If the registry refused
        """
        device = self.get_device(uid)
        if not device.has_personalities or not 1 <= personality <= device.personality_count:
            raise ValueError(
                f"Device {uid} has no personality {personality} "
                f"(count={device.personality_count})"
            )

        operation = f"set personality to {personality}"
        try:
            confirmed = await self.channel.set_personality(uid, personality)
        except Exception as e:
            raise wrap_registry_error(e, uid, operation) from e
        if not confirmed:
            raise RemoteUpdateFailedError(uid=uid, operation=operation)

        device.current_personality = personality
        self._notify(PatchEvent.PERSONALITY_CHANGED, [uid])
        logger.info(f"Set {uid} personality to {personality}")
        return device
