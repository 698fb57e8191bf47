"""Device registry exceptions.

This module defines exceptions for the external device update channel:
- RegistryError: Base class for registry errors
- RemoteUpdateFailedError: The registry refused or failed to apply a change
- DeviceNotFoundError: The device uid is not known
- MovePendingError: The device is still waiting on an earlier address change
"""

from typing import Optional

from .base import RdmPatcherError


class RegistryError(RdmPatcherError):
    """The device registry could not complete a request."""

    def __init__(self, user_message: str, uid: Optional[str] = None, **kwargs):
        super().__init__(user_message=user_message, **kwargs)
        self.uid = uid


class RemoteUpdateFailedError(RegistryError):
    """The device registry reported failure for a requested change."""

    def __init__(self, uid: str, operation: str, original_error: Optional[str] = None):
        """
        Initialize remote update failure.

        Args:
            uid: Device the change was requested for
            operation: What was requested (e.g. "set start address to 17")
            original_error: Error text returned by the registry, if any
        """
        technical = f"Registry failed to {operation} for {uid}"
        if original_error:
            technical += f": {original_error}"

        super().__init__(
            user_message=f"Failed to {operation} for device {uid}",
            uid=uid,
            technical_message=technical,
            recoverable=True,
            recovery_hint="The device was left unchanged. Check that it is still responding and try again.",
        )
        self.operation = operation
        self.original_error = original_error


class DeviceNotFoundError(RegistryError):
    """No device with the given uid exists in the collection."""

    def __init__(self, uid: str):
        super().__init__(
            user_message=f"Device {uid} not found",
            uid=uid,
            technical_message=f"Unknown device uid: {uid}",
            recoverable=True,
            recovery_hint="Run 'rdmpatcher lanes <patch file>' to list known devices",
        )


class MovePendingError(RegistryError):
    """A device has an address change still awaiting the registry."""

    def __init__(self, uid: str, operation: str):
        super().__init__(
            user_message=f"Cannot {operation}: device {uid} is still being moved",
            uid=uid,
            technical_message=f"Rejected {operation} for {uid}: address change pending",
            recoverable=True,
            recovery_hint="Wait for the registry to confirm or refuse the move, then try again",
        )
        self.operation = operation
