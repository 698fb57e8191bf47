"""Observer protocol for patch changes."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rdmpatcher.models import LaneAssignment

from .events import PatchEvent


@runtime_checkable
class PatchObserver(Protocol):
    """
    Observer that receives patch events.

    Views implement this to redraw after every mutation; the service
    always supplies a complete, consistent assignment.
    """

    def on_patch_event(
        self, event: PatchEvent, assignment: "LaneAssignment", uids: list[str]
    ) -> None:
        """
        Handle a patch change.

        Args:
            event: What happened
            assignment: Layout after the change
            uids: Devices affected (empty for whole-patch events)
        """
        ...
