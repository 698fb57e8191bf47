"""Plain-text rendering of a lane assignment.

Used by the CLI `show` command and by the Textual patch view, one visual
row at a time. Each row is a header line of slot numbers followed by one
line per lane:

```
   1   2   3   4   5   6   7   8
 [Dimmer   ] .   .  [Spot      ]
  .   .  [Par]  .   .   .   .   .
```

Overflowing devices are drawn with braces instead of brackets.
"""

import logging
from collections.abc import Collection

from rdmpatcher.models import LaneAssignment, RowSegment

logger = logging.getLogger(__name__)

MIN_CELL_WIDTH = 3


class TextPatchRenderer:
    """Renders a LaneAssignment as fixed-width text."""

    def __init__(self, cell_width: int = 6):
        """
        Args:
            cell_width: Characters per slot cell (at least 3)

        Raises:
            ValueError: If cell_width is too small to draw a device
        """
        if cell_width < MIN_CELL_WIDTH:
            raise ValueError(f"cell_width must be at least {MIN_CELL_WIDTH}, got {cell_width}")
        self.cell_width = cell_width

    def header_line(self, assignment: LaneAssignment, row: int) -> str:
        """Slot numbers (1-based) for one visual row."""
        per_row = assignment.address_space.slots_per_row
        first = row * per_row
        return "".join(str(first + i + 1).center(self.cell_width) for i in range(per_row))

    def lane_line(
        self,
        assignment: LaneAssignment,
        row: int,
        lane: int,
        hidden: Collection[str] = (),
    ) -> str:
        """One lane of one visual row."""
        return "".join(
            self._segment_text(segment, hidden)
            for segment in assignment.segments_for_row(row, lane)
        )

    def render_row(
        self, assignment: LaneAssignment, row: int, hidden: Collection[str] = ()
    ) -> list[str]:
        """Header plus every lane for one visual row."""
        lines = [self.header_line(assignment, row)]
        lines.extend(
            self.lane_line(assignment, row, lane, hidden)
            for lane in range(assignment.lane_count)
        )
        return lines

    def render(
        self,
        assignment: LaneAssignment,
        hidden: Collection[str] = (),
        skip_empty_rows: bool = False,
    ) -> str:
        """
        Render the whole patch.

        Args:
            assignment: Layout to draw
            hidden: Device uids to leave out (e.g. moves awaiting the registry)
            skip_empty_rows: Omit rows with no visible device

        Returns:
            Multi-line string
        """
        blocks: list[str] = []
        for row in range(assignment.address_space.row_count):
            if skip_empty_rows and not self._row_has_devices(assignment, row, hidden):
                continue
            blocks.append("\n".join(self.render_row(assignment, row, hidden)))
        logger.debug(f"Rendered {len(blocks)} row(s) with {assignment.lane_count} lane(s)")
        return "\n".join(blocks)

    def _row_has_devices(self, assignment: LaneAssignment, row: int, hidden: Collection[str]) -> bool:
        return any(
            segment.device is not None and segment.device.uid not in hidden
            for lane in range(assignment.lane_count)
            for segment in assignment.segments_for_row(row, lane)
        )

    def _segment_text(self, segment: RowSegment, hidden: Collection[str]) -> str:
        width = segment.span * self.cell_width
        device = segment.device
        if device is None or device.uid in hidden:
            return ".".center(self.cell_width) * segment.span

        opening, closing = ("{", "}") if device.overflows else ("[", "]")
        inner = width - 2
        label = device.display_label[:inner].ljust(inner)
        return f"{opening}{label}{closing}"
