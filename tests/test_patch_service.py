"""Tests for PatchService, including the optimistic move flow."""

import asyncio

import pytest

from rdmpatcher.exceptions import (
    DeviceNotFoundError,
    InvalidAddressError,
    MovePendingError,
    RemoteUpdateFailedError,
)
from rdmpatcher.models import AddressSpace, create_device
from rdmpatcher.protocols import PatchEvent
from rdmpatcher.registry import InMemoryRegistry
from rdmpatcher.services import PatchService


class RecordingObserver:
    """Observer that records every event with the state seen at the time."""

    def __init__(self, service: PatchService):
        self.service = service
        self.events: list[tuple[PatchEvent, list[str]]] = []
        self.pending_at_event: list[frozenset[str]] = []
        self.lane_counts: list[int] = []

    def on_patch_event(self, event, assignment, uids):
        self.events.append((event, uids))
        self.pending_at_event.append(self.service.pending_uids)
        self.lane_counts.append(assignment.lane_count)

    @property
    def kinds(self) -> list[PatchEvent]:
        return [event for event, _ in self.events]


class RaisingChannel(InMemoryRegistry):
    """Registry whose address changes blow up."""

    async def request_address_change(self, uid, start_address):
        raise ConnectionError("gateway unreachable")


@pytest.fixture
def observer(service):
    observer = RecordingObserver(service)
    service.register_observer(observer)
    return observer


class TestCollection:
    """Loading and editing the device collection."""

    @pytest.mark.unit
    def test_initial_assignment(self, service):
        assert service.assignment.lane_count == 2
        assert [d.uid for d in service.devices] == ["a", "b", "c"]

    @pytest.mark.unit
    def test_empty_service_has_one_lane(self):
        service = PatchService(InMemoryRegistry())
        assert service.assignment.lane_count == 1
        assert service.devices == []

    @pytest.mark.unit
    def test_duplicate_uid_rejected(self, service, dimmer):
        with pytest.raises(ValueError):
            service.set_devices([dimmer, dimmer])
        with pytest.raises(ValueError):
            service.add_device(create_device("a", "Other", 100, 1))

    @pytest.mark.unit
    def test_add_and_remove(self, service, observer):
        service.add_device(create_device("d", "Haze", 6, 1))
        assert service.assignment.lane_count == 3
        assert service.assignment.lane_of("d") == 2

        service.remove_device("d")
        assert service.assignment.lane_count == 2
        assert observer.kinds == [PatchEvent.DEVICE_ADDED, PatchEvent.DEVICE_REMOVED]
        assert observer.lane_counts == [3, 2]

    @pytest.mark.unit
    def test_unknown_device(self, service):
        with pytest.raises(DeviceNotFoundError):
            service.get_device("nope")
        with pytest.raises(DeviceNotFoundError):
            service.remove_device("nope")

    @pytest.mark.unit
    def test_update_address_space(self, service, observer):
        space = AddressSpace(total_slots=512, slots_per_row=16)
        service.update_address_space(space)
        assert service.mapper.row_count == 32
        assert service.get_device("a").address_space == space
        assert observer.kinds == [PatchEvent.LAYOUT_CHANGED]

    @pytest.mark.unit
    def test_update_address_space_rejects_misfit(self, service):
        service.add_device(create_device("far", "Far", 300, 1))
        with pytest.raises(InvalidAddressError):
            service.update_address_space(AddressSpace(total_slots=256))
        assert service.address_space.total_slots == 512
        assert len(service.devices) == 4
        assert service.channel.address_space.total_slots == 512

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_larger_address_space_reaches_registry(self, service, registry):
        service.update_address_space(AddressSpace(total_slots=1024))
        assert registry.address_space.total_slots == 1024

        device = await service.set_start_address("a", 900)
        assert device.start_address == 900
        assert registry.get_record("a").start_address == 900


class TestMove:
    """Address changes through the update channel."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_move_success(self, service, registry, observer):
        device = await service.set_start_address("b", 100)

        assert device.start_address == 100
        assert registry.get_record("b").start_address == 100
        assert service.assignment.lane_count == 1
        assert observer.kinds == [PatchEvent.MOVE_PENDING, PatchEvent.DEVICE_MOVED]
        assert observer.pending_at_event == [frozenset({"b"}), frozenset()]
        assert observer.lane_counts == [2, 1]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_move_refused(self, service, registry, observer):
        registry.fail_uids.add("b")

        with pytest.raises(RemoteUpdateFailedError) as exc_info:
            await service.set_start_address("b", 100)

        assert exc_info.value.uid == "b"
        assert exc_info.value.recoverable
        assert service.get_device("b").start_address == 5
        assert registry.get_record("b").start_address == 5
        assert service.assignment.lane_of("b") == 1
        assert observer.kinds == [PatchEvent.MOVE_PENDING, PatchEvent.MOVE_REVERTED]
        assert service.pending_uids == frozenset()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_move_channel_raises(self, dimmer):
        service = PatchService(RaisingChannel.from_devices([dimmer]))
        service.set_devices([dimmer])
        recorder = RecordingObserver(service)
        service.register_observer(recorder)

        with pytest.raises(RemoteUpdateFailedError) as exc_info:
            await service.set_start_address("a", 50)

        assert "gateway unreachable" in exc_info.value.technical_message
        assert dimmer.start_address == 1
        assert recorder.kinds == [PatchEvent.MOVE_PENDING, PatchEvent.MOVE_REVERTED]

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("address", [0, 513])
    async def test_invalid_address_sends_nothing(self, service, registry, observer, address):
        with pytest.raises(InvalidAddressError):
            await service.set_start_address("a", address)
        assert observer.events == []
        assert registry.get_record("a").start_address == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_move_to_last_address_overflows(self, service):
        device = await service.set_start_address("a", 512)
        assert device.overflows
        assert device.end == 511

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_pending_while_awaiting(self, dimmer):
        registry = InMemoryRegistry.from_devices([dimmer])
        registry.latency = 0.05
        service = PatchService(registry)
        service.set_devices([dimmer])

        task = asyncio.create_task(service.set_start_address("a", 20))
        await asyncio.sleep(0.01)
        assert service.pending_uids == frozenset({"a"})
        assert dimmer.start_address == 1

        await task
        assert service.pending_uids == frozenset()
        assert dimmer.start_address == 20

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_move_by_clamps(self, service):
        await service.move_by("a", -5)
        assert service.get_device("a").start_address == 1

        await service.move_by("c", 1000)
        assert service.get_device("c").start_address == 512

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_move_by_no_change_sends_nothing(self, service, observer):
        await service.move_by("a", -1)
        assert observer.events == []


class TestPendingMoves:
    """Edits that overlap a move still awaiting the registry."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancelled_move_reverts(self, service, registry, observer):
        registry.latency = 0.5
        task = asyncio.create_task(service.set_start_address("a", 20))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert observer.kinds == [PatchEvent.MOVE_PENDING, PatchEvent.MOVE_REVERTED]
        assert observer.pending_at_event == [frozenset({"a"}), frozenset()]
        assert service.pending_uids == frozenset()
        assert service.get_device("a").start_address == 1
        assert registry.get_record("a").start_address == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_second_move_of_same_device_rejected(self, service, registry, observer):
        registry.latency = 0.05
        task = asyncio.create_task(service.set_start_address("a", 20))
        await asyncio.sleep(0.01)

        with pytest.raises(MovePendingError) as exc_info:
            await service.set_start_address("a", 40)
        assert exc_info.value.uid == "a"
        assert service.pending_uids == frozenset({"a"})

        await task
        assert service.get_device("a").start_address == 20
        assert observer.kinds == [PatchEvent.MOVE_PENDING, PatchEvent.DEVICE_MOVED]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_other_device_can_move_meanwhile(self, service, registry):
        registry.latency = 0.02
        await asyncio.gather(
            service.set_start_address("a", 20),
            service.set_start_address("b", 40),
        )
        assert service.get_device("a").start_address == 20
        assert service.get_device("b").start_address == 40
        assert service.pending_uids == frozenset()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_remove_rejected_while_moving(self, service, registry, observer):
        registry.latency = 0.05
        task = asyncio.create_task(service.set_start_address("a", 20))
        await asyncio.sleep(0.01)

        with pytest.raises(MovePendingError):
            service.remove_device("a")
        service.remove_device("b")

        device = await task
        assert device.start_address == 20
        assert service.assignment.lane_of("a") == 0
        assert [d.uid for d in service.devices] == ["a", "c"]
        assert observer.kinds == [
            PatchEvent.MOVE_PENDING,
            PatchEvent.DEVICE_REMOVED,
            PatchEvent.DEVICE_MOVED,
        ]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reload_rejected_while_moving(self, service, registry, dimmer):
        registry.latency = 0.05
        task = asyncio.create_task(service.set_start_address("a", 20))
        await asyncio.sleep(0.01)

        with pytest.raises(MovePendingError):
            service.set_devices([dimmer])
        with pytest.raises(MovePendingError):
            service.update_address_space(AddressSpace(total_slots=1024))

        await task
        assert len(service.devices) == 3
        assert service.address_space.total_slots == 512
        service.set_devices([dimmer])
        assert [d.uid for d in service.devices] == ["a"]


class TestDrag:
    """Drag gestures ending in a move."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_complete_drag(self, service):
        session = service.begin_drag("c", 400)
        # Two lanes: rows are 42px. Centre at (25, 7 + 84) -> row 2, cell 0
        device = await service.complete_drag(session, 0, 84)
        assert device.start_address == 17

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancelled_drag(self, service, observer):
        session = service.begin_drag("c", 400)
        session.cancel()
        assert await service.complete_drag(session, 0, 84) is None
        assert observer.events == []


class TestIdentifyAndPersonality:
    """Other registry-backed requests."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_toggle_identify(self, service, observer):
        assert await service.get_identify_mode("a") is False
        assert await service.toggle_identify("a") is True
        assert await service.get_identify_mode("a") is True
        assert await service.toggle_identify("a") is False
        assert observer.kinds == [PatchEvent.IDENTIFY_CHANGED] * 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_identify_refused(self, service, registry):
        registry.fail_uids.add("a")
        with pytest.raises(RemoteUpdateFailedError):
            await service.set_identify("a", True)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_set_personality(self, service, registry, observer):
        device = await service.set_personality("c", 3)
        assert device.current_personality == 3
        assert registry.get_record("c").current_personality == 3
        assert observer.kinds == [PatchEvent.PERSONALITY_CHANGED]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_set_personality_out_of_range(self, service):
        with pytest.raises(ValueError):
            await service.set_personality("c", 4)
        with pytest.raises(ValueError):
            await service.set_personality("a", 1)


class TestObservers:
    """Observer registration."""

    @pytest.mark.unit
    def test_unregistered_observer_not_called(self, service, observer, dimmer):
        service.unregister_observer(observer)
        service.set_devices([dimmer])
        assert observer.events == []

    @pytest.mark.unit
    def test_events_carry_current_assignment(self, service, observer, dimmer):
        service.set_devices([dimmer])
        assert observer.kinds == [PatchEvent.DEVICES_LOADED]
        assert observer.lane_counts == [1]
