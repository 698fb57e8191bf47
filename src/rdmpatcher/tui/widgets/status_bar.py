"""Status bar widget showing the selected device and layout summary."""

from rich.text import Text
from textual.widgets import Static

from rdmpatcher.models import LaneAssignment, PatchDevice


class StatusBar(Static):
    """
    Status bar displaying current patch state.

    Shows:
    - Universe and lane count
    - Selected device address range
    - Pending registry requests
    """

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $panel;
        color: $text;
        padding: 0 1;
    }

    StatusBar.overflow {
        background: $error 40%;
    }
    """

    def update_state(
        self,
        universe: int,
        assignment: LaneAssignment,
        device: PatchDevice | None,
        pending: int = 0,
    ) -> None:
        """Redraw the status line."""
        parts = [f"Universe {universe}", f"{assignment.device_count} devices", f"{assignment.lane_count} lanes"]

        if device is not None:
            end_address = device.end + 1
            text = f"{device.display_label}: {device.start_address}-{end_address} ({device.footprint} slots)"
            if device.overflows:
                text += " overflows"
            if device.uid in assignment.lanes:
                text += f", lane {assignment.lane_of(device.uid) + 1}"
            parts.append(text)

        if pending:
            parts.append(f"{pending} pending")

        self.set_class(device is not None and device.overflows, "overflow")
        self.update(Text(" | ".join(parts)))
