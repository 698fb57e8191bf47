"""Patch validation exceptions.

Raised when a device record is built or moved with values that fall
outside the address space:
- PatchValidationError: Base class for structural patch errors
- InvalidAddressError: Start address outside [1, total_slots]
- InvalidFootprintError: Footprint smaller than one slot

Overlapping devices are never an error; they are stacked into lanes.
"""

from typing import Any, Optional

from .base import RdmPatcherError


class PatchValidationError(RdmPatcherError):
    """A device record violates the address-space rules."""
    pass


class InvalidAddressError(PatchValidationError):
    """Start address is not a slot on the bus."""

    def __init__(self, start_address: Any, total_slots: int, uid: Optional[str] = None):
        """
        Initialize invalid address error.

        Args:
            start_address: The rejected 1-based start address (may be raw user text)
            total_slots: Number of slots on the bus
            uid: Device the address was meant for (optional)
        """
        target = f" for device {uid}" if uid else ""
        super().__init__(
            user_message=f"Must be between 1 and {total_slots}",
            technical_message=(
                f"Invalid start address{target}: {start_address!r} "
                f"(valid range 1-{total_slots})"
            ),
            recoverable=True,
            recovery_hint=f"Enter a whole number from 1 to {total_slots}",
        )
        self.start_address = start_address
        self.total_slots = total_slots
        self.uid = uid


class InvalidFootprintError(PatchValidationError):
    """Footprint is smaller than one slot."""

    def __init__(self, footprint: Any, uid: Optional[str] = None):
        """
        Initialize invalid footprint error.

        Args:
            footprint: The rejected footprint
            uid: Device the footprint belongs to (optional)
        """
        target = f" for device {uid}" if uid else ""
        super().__init__(
            user_message=f"Device footprint must be at least 1 slot (got {footprint})",
            technical_message=f"Invalid footprint{target}: {footprint!r}",
            recoverable=True,
            recovery_hint="Check the device's slot count in the patch file",
        )
        self.footprint = footprint
        self.uid = uid
