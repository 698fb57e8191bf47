"""Device update channel protocol.

The channel is the boundary to whatever owns the device records (an RDM
responder gateway, a remote registry, a patch file). Calls are async and
return a plain success flag; the patch service decides what to do with a
failure. Implementations may also raise, which is treated as failure.
The bus geometry is pushed to the channel when it changes.
"""

from typing import Protocol, runtime_checkable

from rdmpatcher.models import AddressSpace


@runtime_checkable
class DeviceUpdateChannel(Protocol):
    """Asynchronous requests against the device registry."""

    async def request_address_change(self, uid: str, start_address: int) -> bool:
        """Ask the registry to move a device to a 1-based start address."""
        ...

    async def get_identify_mode(self, uid: str) -> bool:
        """Read whether the device is currently identifying."""
        ...

    async def set_identify(self, uid: str, on: bool) -> bool:
        """Turn identify mode on or off."""
        ...

    async def set_personality(self, uid: str, personality: int) -> bool:
        """Select a personality on the device."""
        ...

    def update_address_space(self, address_space: AddressSpace) -> None:
        """Accept addresses on a resized bus from now on."""
        ...
