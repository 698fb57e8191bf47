"""Widget showing one visual row of the patch (header plus lanes)."""

from collections.abc import Collection

from rich.text import Text
from textual.widgets import Static

from rdmpatcher.models import LaneAssignment
from rdmpatcher.render import TextPatchRenderer


class PatchRowWidget(Static):
    """
    One row of `slots_per_row` slots.

    Stateless: the assignment is passed in on every refresh. The row's
    height follows the lane count, so every row in the view stays the
    same height.
    """

    DEFAULT_CSS = """
    PatchRowWidget {
        height: auto;
        padding: 0 1;
        border-bottom: solid $surface;
    }

    PatchRowWidget.selected {
        background: $warning 15%;
    }

    PatchRowWidget.empty {
        color: $text-muted;
    }
    """

    def __init__(self, row: int, renderer: TextPatchRenderer) -> None:
        super().__init__(id=f"patch-row-{row}")
        self.row = row
        self.renderer = renderer

    def show(
        self,
        assignment: LaneAssignment,
        hidden: Collection[str] = (),
        selected_uid: str | None = None,
    ) -> None:
        """Redraw from an assignment."""
        lines = self.renderer.render_row(assignment, self.row, hidden)
        self.update(Text("\n".join(lines)))

        uids = {
            segment.device.uid
            for lane in range(assignment.lane_count)
            for segment in assignment.segments_for_row(self.row, lane)
            if segment.device is not None and segment.device.uid not in hidden
        }
        self.set_class(not uids, "empty")
        self.set_class(selected_uid is not None and selected_uid in uids, "selected")
