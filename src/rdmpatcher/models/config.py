"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_serializer

from rdmpatcher.utils.persistence import PydanticPersistence

from .address_space import AddressSpace

CONFIG_DIR = Path.home() / ".rdmpatcher"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.json"


class AppConfig(BaseModel):
    """Application configuration and settings."""

    address_space: AddressSpace = Field(
        default_factory=AddressSpace,
        description=(
            "Bus geometry: total_slots (512), slots_per_row (8), "
            "height_per_device_px (14). Changing it requires a fresh layout pass."
        ),
    )
    universe: int = Field(default=1, ge=0, description="Universe shown by default")
    patch_file: Path = Field(
        default_factory=lambda: CONFIG_DIR / "patch.json",
        description="Patch file used when none is given on the command line",
    )
    row_width_px: int = Field(
        default=400, gt=0, description="Pixel width of one row for drag calculations"
    )

    @field_serializer("patch_file")
    def serialize_path(self, path: Path) -> str:
        """Serialize Path to string."""
        return str(path)

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.rdmpatcher/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH
        return PydanticPersistence.load_json_or_default(path, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        if path is None:
            path = DEFAULT_CONFIG_PATH
        PydanticPersistence.save_json(self, path)
