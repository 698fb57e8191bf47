"""Patch file model: the on-disk form of a universe's device records."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from rdmpatcher.exceptions import ConfigValidationError, collect_errors
from rdmpatcher.utils.persistence import PydanticPersistence

from .address_space import AddressSpace
from .device import PatchDevice, create_device

logger = logging.getLogger(__name__)


class DeviceRecord(BaseModel):
    """A device as stored in a patch file (1-based addressing)."""

    uid: str = Field(min_length=1, description="Device identifier")
    label: str = Field(default="", description="Display label")
    start_address: int = Field(description="1-based start address")
    footprint: int = Field(description="Slot count")
    current_personality: int | None = Field(default=None)
    personality_count: int | None = Field(default=None)

    def to_device(self, address_space: AddressSpace) -> PatchDevice:
        """Build a validated PatchDevice from this record."""
        return create_device(
            uid=self.uid,
            label=self.label,
            start_address=self.start_address,
            footprint=self.footprint,
            personality=self.current_personality,
            personality_count=self.personality_count,
            address_space=address_space,
        )

    @classmethod
    def from_device(cls, device: PatchDevice) -> "DeviceRecord":
        return cls(
            uid=device.uid,
            label=device.label,
            start_address=device.start_address,
            footprint=device.footprint,
            current_personality=device.current_personality,
            personality_count=device.personality_count,
        )


class PatchFile(BaseModel):
    """All device records for one universe."""

    universe: int = Field(default=1, ge=0, description="Universe id")
    devices: list[DeviceRecord] = Field(default_factory=list, description="Device records")

    def to_devices(self, address_space: AddressSpace, path: Path | None = None) -> list[PatchDevice]:
        """
        Validate every record and build devices.

        All bad records are reported together rather than stopping at the
        first one.

        Raises:
            ConfigValidationError: If any record is invalid or uids repeat
        """
        collector = collect_errors("load devices")
        devices: list[PatchDevice] = []
        seen: set[str] = set()

        for record in self.devices:
            with collector.try_operation(f"device {record.uid}"):
                if record.uid in seen:
                    raise ConfigValidationError(
                        field=f"devices.{record.uid}",
                        value=record.uid,
                        error_msg="duplicate uid",
                        file_path=str(path) if path else None,
                    )
                devices.append(record.to_device(address_space))
                seen.add(record.uid)

        if collector.has_errors:
            raise ConfigValidationError(
                field="devices",
                value=None,
                error_msg=collector.get_summary(),
                file_path=str(path) if path else None,
            )

        logger.debug(f"Built {len(devices)} devices for universe {self.universe}")
        return devices

    @classmethod
    def from_devices(cls, devices: list[PatchDevice], universe: int = 1) -> "PatchFile":
        return cls(universe=universe, devices=[DeviceRecord.from_device(d) for d in devices])

    @classmethod
    def load(cls, path: Path) -> "PatchFile":
        """
        Load a patch file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigFileInvalidError: If the JSON syntax is invalid
            ConfigValidationError: If a field fails validation
        """
        return PydanticPersistence.load_json(path, cls)

    def save(self, path: Path) -> None:
        """Save with backup and atomic write."""
        PydanticPersistence.save_json(self, path)
