"""Address space model describing the fixed-size control bus."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

# DMX512 defaults
TOTAL_SLOTS = 512
SLOTS_PER_ROW = 8
HEIGHT_PER_DEVICE_PX = 14


class AddressSpace(BaseModel):
    """Static parameters of the bus: slot count, row width and lane height.

    The model is frozen so a single instance can be shared by every device,
    the layout engine and the geometry mapper. Changing any value means
    building a new AddressSpace and re-packing.
    """

    model_config = ConfigDict(frozen=True)

    total_slots: int = Field(default=TOTAL_SLOTS, gt=0, description="Number of slots on the bus")
    slots_per_row: int = Field(default=SLOTS_PER_ROW, gt=0, description="Slots shown per visual row")
    height_per_device_px: int = Field(
        default=HEIGHT_PER_DEVICE_PX, gt=0, description="Pixel height of one lane"
    )

    @model_validator(mode="after")
    def validate_row_width(self) -> "AddressSpace":
        """Ensure rows tile the bus exactly."""
        if self.total_slots % self.slots_per_row != 0:
            raise ValueError(
                f"slots_per_row ({self.slots_per_row}) must divide "
                f"total_slots ({self.total_slots}) evenly"
            )
        return self

    @property
    def row_count(self) -> int:
        """Number of visual rows needed to show every slot."""
        return self.total_slots // self.slots_per_row

    @property
    def last_slot(self) -> int:
        """Highest valid 0-based slot index."""
        return self.total_slots - 1

    def contains_address(self, start_address: int) -> bool:
        """Check if a 1-based address is a slot on this bus."""
        return 1 <= start_address <= self.total_slots


DEFAULT_ADDRESS_SPACE = AddressSpace()
