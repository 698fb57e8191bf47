"""In-memory device registry."""

import asyncio
import logging

from rdmpatcher.models import DEFAULT_ADDRESS_SPACE, AddressSpace, DeviceRecord, PatchDevice

logger = logging.getLogger(__name__)


class InMemoryRegistry:
    """
    Device registry holding records in memory.

    Implements DeviceUpdateChannel. Useful as a stand-in for a remote
    registry: `latency` delays every request and `fail_uids` makes requests
    for those devices report failure.

    Subclasses persist changes by overriding `_commit()`.
    """

    def __init__(
        self,
        records: list[DeviceRecord] | None = None,
        address_space: AddressSpace = DEFAULT_ADDRESS_SPACE,
        latency: float = 0.0,
    ):
        self.address_space = address_space
        self.latency = latency
        self.fail_uids: set[str] = set()
        self._records: dict[str, DeviceRecord] = {r.uid: r for r in records or []}
        self._identify: dict[str, bool] = {}

    @classmethod
    def from_devices(
        cls, devices: list[PatchDevice], address_space: AddressSpace = DEFAULT_ADDRESS_SPACE
    ) -> "InMemoryRegistry":
        return cls([DeviceRecord.from_device(d) for d in devices], address_space=address_space)

    @property
    def records(self) -> list[DeviceRecord]:
        """Current records, in insertion order."""
        return list(self._records.values())

    def get_record(self, uid: str) -> DeviceRecord | None:
        return self._records.get(uid)

    async def request_address_change(self, uid: str, start_address: int) -> bool:
        record = await self._lookup(uid, f"address change to {start_address}")
        if record is None:
            return False
        if not self.address_space.contains_address(start_address):
            logger.warning(f"Rejected address {start_address} for {uid}")
            return False

        self._replace(record, record.model_copy(update={"start_address": start_address}))
        logger.info(f"Registry moved {uid} to address {start_address}")
        return True

    async def get_identify_mode(self, uid: str) -> bool:
        await self._pause()
        return self._identify.get(uid, False)

    async def set_identify(self, uid: str, on: bool) -> bool:
        record = await self._lookup(uid, f"identify {'on' if on else 'off'}")
        if record is None:
            return False
        self._identify[uid] = on
        logger.info(f"Registry identify {uid} -> {on}")
        return True

    async def set_personality(self, uid: str, personality: int) -> bool:
        record = await self._lookup(uid, f"personality {personality}")
        if record is None:
            return False
        count = record.personality_count
        if count is None or not 1 <= personality <= count:
            logger.warning(f"Rejected personality {personality} for {uid} (count={count})")
            return False

        self._replace(record, record.model_copy(update={"current_personality": personality}))
        logger.info(f"Registry set {uid} personality to {personality}")
        return True

    def update_address_space(self, address_space: AddressSpace) -> None:
        self.address_space = address_space
        logger.info(f"Registry now accepts addresses 1-{address_space.total_slots}")

    async def _lookup(self, uid: str, operation: str) -> DeviceRecord | None:
        await self._pause()
        if uid in self.fail_uids:
            logger.warning(f"Registry failing {operation} for {uid}")
            return None
        record = self._records.get(uid)
        if record is None:
            logger.warning(f"Registry has no device {uid} for {operation}")
        return record

    async def _pause(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    def _replace(self, old: DeviceRecord, new: DeviceRecord) -> None:
        """Swap in a changed record; a failed commit restores the old one."""
        self._records[old.uid] = new
        try:
            self._commit()
        except Exception:
            self._records[old.uid] = old
            raise

    def _commit(self) -> None:
        """Hook for subclasses that persist records."""
