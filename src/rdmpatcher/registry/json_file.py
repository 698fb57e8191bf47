"""Device registry backed by a patch file on disk."""

import logging
from pathlib import Path

from rdmpatcher.exceptions import ErrorContext
from rdmpatcher.models import DEFAULT_ADDRESS_SPACE, AddressSpace, PatchDevice, PatchFile

from .memory import InMemoryRegistry

logger = logging.getLogger(__name__)


class JsonFileRegistry(InMemoryRegistry):
    """
    Registry that writes every accepted change back to its patch file.

    Identify state is not persisted.
    """

    def __init__(
        self,
        path: Path,
        patch: PatchFile,
        address_space: AddressSpace = DEFAULT_ADDRESS_SPACE,
    ):
        super().__init__(patch.devices, address_space=address_space)
        self.path = path
        self.universe = patch.universe

    @classmethod
    def open(cls, path: Path, address_space: AddressSpace = DEFAULT_ADDRESS_SPACE) -> "JsonFileRegistry":
        """
        Load a patch file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigFileInvalidError: If the JSON is malformed
            ConfigValidationError: If records fail validation
        """
        patch = PatchFile.load(path)
        logger.info(f"Opened patch {path} (universe {patch.universe}, {len(patch.devices)} devices)")
        return cls(path, patch, address_space=address_space)

    def to_patch_file(self) -> PatchFile:
        return PatchFile(universe=self.universe, devices=self.records)

    def load_devices(self) -> list[PatchDevice]:
        """Build validated devices from the current records."""
        return self.to_patch_file().to_devices(self.address_space, path=self.path)

    def _commit(self) -> None:
        with ErrorContext(f"commit patch file {self.path}", logger_instance=logger):
            self.to_patch_file().save(self.path)
