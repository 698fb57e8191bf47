"""Textual patch view."""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header

from rdmpatcher.models import LaneAssignment
from rdmpatcher.protocols import PatchEvent
from rdmpatcher.render import TextPatchRenderer
from rdmpatcher.services import PatchService

from .decorators import handle_action_errors
from .widgets import PatchRowWidget, StartAddressModal, StatusBar

logger = logging.getLogger(__name__)


class PatchScroll(VerticalScroll, can_focus=False):
    """Scroll container that leaves arrow keys to the app bindings."""


class PatchView(App):
    """
    Textual TUI for editing a universe's patch.

    A pure view: every edit goes through PatchService, and the view redraws
    from the LaneAssignment delivered with each PatchEvent. Implements the
    PatchObserver protocol structurally.

    Devices are addressed by uid everywhere (selection, actions), so no
    per-device callbacks are created on redraw.
    """

    TITLE = "RDM Patcher"

    BINDINGS = [
        Binding("n", "select_next", "Next Device", show=True),
        Binding("b", "select_previous", "Previous Device", show=True),
        Binding("enter", "edit_address", "Start Address", show=True),
        Binding("i", "toggle_identify", "Identify", show=True),
        Binding("left", "nudge(-1)", "Left", show=False),
        Binding("right", "nudge(1)", "Right", show=False),
        Binding("up", "nudge_row(-1)", "Up", show=False),
        Binding("down", "nudge_row(1)", "Down", show=False),
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    def __init__(self, service: PatchService, cell_width: int = 8):
        """
        Initialize the patch view.

        Args:
            service: Patch service holding the devices
            cell_width: Characters per slot cell
        """
        super().__init__()
        self.service = service
        self.renderer = TextPatchRenderer(cell_width=cell_width)
        self.selected_uid: str | None = None
        self._rows: list[PatchRowWidget] = []
        self.sub_title = f"Universe {service.universe}"
        logger.info("PatchView created")

    def compose(self) -> ComposeResult:
        yield Header()
        self._rows = [
            PatchRowWidget(row, self.renderer)
            for row in range(self.service.address_space.row_count)
        ]
        yield PatchScroll(*self._rows, id="patch")
        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        self.service.register_observer(self)
        devices = self._ordered_uids()
        if devices:
            self.selected_uid = devices[0]
        self.redraw(self.service.assignment)

    def on_unmount(self) -> None:
        self.service.unregister_observer(self)

    # =================================================================
    # PatchObserver
    # =================================================================

    def on_patch_event(self, event: PatchEvent, assignment: LaneAssignment, uids: list[str]) -> None:
        """Redraw after any patch change."""
        logger.debug(f"Patch event {event.value} for {uids}")
        if event == PatchEvent.DEVICE_REMOVED and self.selected_uid in uids:
            self.selected_uid = None
        elif event in (PatchEvent.DEVICES_LOADED, PatchEvent.LAYOUT_CHANGED):
            if self.selected_uid not in assignment.lanes:
                self.selected_uid = None
        self.redraw(assignment)

    def redraw(self, assignment: LaneAssignment) -> None:
        """Redraw every row and the status bar."""
        hidden = self.service.pending_uids
        for row_widget in self._rows:
            row_widget.show(assignment, hidden, self.selected_uid)

        device = self.service.get_device(self.selected_uid) if self.selected_uid else None
        self.query_one(StatusBar).update_state(
            self.service.universe, assignment, device, pending=len(hidden)
        )

    # =================================================================
    # Selection
    # =================================================================

    def _ordered_uids(self) -> list[str]:
        return [d.uid for d in sorted(self.service.devices, key=lambda d: d.start)]

    def _step_selection(self, step: int) -> None:
        uids = self._ordered_uids()
        if not uids:
            self.notify("No devices in this universe", severity="warning")
            return
        if self.selected_uid in uids:
            index = (uids.index(self.selected_uid) + step) % len(uids)
        else:
            index = 0
        self.select_device(uids[index])

    def select_device(self, uid: str) -> None:
        """Select a device by uid and scroll its row into view."""
        device = self.service.get_device(uid)
        self.selected_uid = uid
        self.redraw(self.service.assignment)
        row, _ = self.service.mapper.slot_to_grid(device.start)
        self._rows[row].scroll_visible()

    def action_select_next(self) -> None:
        self._step_selection(1)

    def action_select_previous(self) -> None:
        self._step_selection(-1)

    # =================================================================
    # Edits
    # =================================================================

    def _require_selection(self) -> str | None:
        if self.selected_uid is None:
            self.notify("Select a device first", severity="warning")
        return self.selected_uid

    @handle_action_errors("move device")
    async def action_nudge(self, slots: int) -> None:
        uid = self._require_selection()
        if uid is None:
            return
        await self.service.move_by(uid, slots)
        self.select_device(uid)

    async def action_nudge_row(self, rows: int) -> None:
        await self.action_nudge(rows * self.service.address_space.slots_per_row)

    def action_edit_address(self) -> None:
        uid = self._require_selection()
        if uid is None:
            return
        device = self.service.get_device(uid)

        async def handle_address(address: int | None) -> None:
            if address is not None:
                await self.set_address(uid, address)

        self.push_screen(StartAddressModal(device, self.service.address_space), handle_address)

    @handle_action_errors("set start address")
    async def set_address(self, uid: str, address: int) -> None:
        device = await self.service.set_start_address(uid, address)
        self.notify(f"{device.display_label} patched to {device.start_address}")
        self.select_device(uid)

    @handle_action_errors("toggle identify")
    async def action_toggle_identify(self) -> None:
        uid = self._require_selection()
        if uid is None:
            return
        on = await self.service.toggle_identify(uid)
        self.notify(f"Identify {'on' if on else 'off'}")
