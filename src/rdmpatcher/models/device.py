"""Device model representing a single patchable entity on the bus."""

import logging
from typing import Any

from pydantic import BaseModel, Field, model_validator

from rdmpatcher.exceptions import InvalidAddressError, InvalidFootprintError

from .address_space import DEFAULT_ADDRESS_SPACE, AddressSpace

logger = logging.getLogger(__name__)


class PatchDevice(BaseModel):
    """
    A device occupying a contiguous range of slots.

    `start` is 0-based internally; everything user facing (dialogs, patch
    files, the registry) uses the 1-based `start_address`.

    Build devices with `create_device()` to get InvalidAddressError /
    InvalidFootprintError instead of a generic pydantic ValidationError.
    """

    uid: str = Field(min_length=1, description="Stable identifier, unique within a patch")
    label: str = Field(default="", description="Display label")
    start: int = Field(ge=0, description="0-based start slot")
    footprint: int = Field(ge=1, description="Number of contiguous slots consumed")
    current_personality: int | None = Field(default=None, description="Active personality")
    personality_count: int | None = Field(default=None, description="Number of personalities")
    address_space: AddressSpace = Field(
        default=DEFAULT_ADDRESS_SPACE, exclude=True, description="Bus the device lives on"
    )

    @model_validator(mode="after")
    def validate_start_in_space(self) -> "PatchDevice":
        """Ensure the start slot exists on the bus."""
        if self.start >= self.address_space.total_slots:
            raise ValueError(
                f"start {self.start} outside 0-{self.address_space.last_slot}"
            )
        return self

    @property
    def start_address(self) -> int:
        """1-based start address."""
        return self.start + 1

    @property
    def end(self) -> int:
        """Last occupied 0-based slot, clamped to the bus."""
        return min(self.start + self.footprint - 1, self.address_space.last_slot)

    @property
    def overflows(self) -> bool:
        """True when the footprint runs past the last slot."""
        return self.start + self.footprint > self.address_space.total_slots

    @property
    def slots(self) -> range:
        """Occupied 0-based slots (clamped)."""
        return range(self.start, self.end + 1)

    @property
    def has_personalities(self) -> bool:
        """Check if the device offers a choice of personality."""
        return self.personality_count is not None and self.personality_count >= 2

    @property
    def display_label(self) -> str:
        """Label to render, falling back to the uid."""
        return self.label or self.uid

    def overlaps(self, other: "PatchDevice") -> bool:
        """Check if two devices share at least one slot."""
        return self.start <= other.end and other.start <= self.end

    def set_start(self, start_address: int) -> None:
        """
        Move the device to a new 1-based start address.

        `end` and `overflows` follow automatically. Any LaneAssignment built
        before this call is stale and must be re-packed before rendering.

        Args:
            start_address: New start address (1 to total_slots)

        Raises:
            InvalidAddressError: If start_address is outside the bus
        """
        validate_start_address(start_address, self.address_space, uid=self.uid)
        old_address = self.start_address
        self.start = start_address - 1
        logger.debug(f"Device {self.uid} start {old_address} -> {start_address}")


def validate_start_address(
    start_address: Any, address_space: AddressSpace, uid: str | None = None
) -> int:
    """
    Validate a 1-based start address.

    Returns:
        The address, unchanged

    Raises:
        InvalidAddressError: If the address is not an int in [1, total_slots]
    """
    if (
        isinstance(start_address, bool)
        or not isinstance(start_address, int)
        or not address_space.contains_address(start_address)
    ):
        raise InvalidAddressError(start_address, address_space.total_slots, uid=uid)
    return start_address


def parse_start_address(
    text: str, address_space: AddressSpace = DEFAULT_ADDRESS_SPACE
) -> int:
    """
    Parse a start address typed by a user.

    Raises:
        InvalidAddressError: If the text is not a whole number in range
    """
    try:
        value = int(text.strip())
    except (ValueError, AttributeError):
        raise InvalidAddressError(text, address_space.total_slots) from None
    return validate_start_address(value, address_space)


def create_device(
    uid: str,
    label: str,
    start_address: int,
    footprint: int,
    personality: int | None = None,
    personality_count: int | None = None,
    address_space: AddressSpace = DEFAULT_ADDRESS_SPACE,
) -> PatchDevice:
    """
    Create a validated device.

    Args:
        uid: Stable device identifier
        label: Display label
        start_address: 1-based start address
        footprint: Slot count (>= 1)
        personality: Current personality, if the device has any
        personality_count: Number of personalities, if known
        address_space: Bus to validate against

    Raises:
        InvalidAddressError: If start_address is not in [1, total_slots]
        InvalidFootprintError: If footprint < 1
    """
    validate_start_address(start_address, address_space, uid=uid)
    if isinstance(footprint, bool) or not isinstance(footprint, int) or footprint < 1:
        raise InvalidFootprintError(footprint, uid=uid)

    return PatchDevice(
        uid=uid,
        label=label,
        start=start_address - 1,
        footprint=footprint,
        current_personality=personality,
        personality_count=personality_count,
        address_space=address_space,
    )
