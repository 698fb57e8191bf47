"""Patch events for the observer pattern."""

from enum import Enum


class PatchEvent(Enum):
    """
    Events emitted by PatchService.

    Every event is delivered with the LaneAssignment that is current after
    the change, so a view can redraw from the event alone.
    """

    DEVICES_LOADED = "devices_loaded"        # Whole collection replaced
    DEVICE_ADDED = "device_added"            # Device added to the patch
    DEVICE_REMOVED = "device_removed"        # Device removed from the patch
    MOVE_PENDING = "move_pending"            # Address change sent, awaiting registry
    DEVICE_MOVED = "device_moved"            # Registry confirmed, start committed
    MOVE_REVERTED = "move_reverted"          # Registry refused, start unchanged
    LAYOUT_CHANGED = "layout_changed"        # Address space changed, fresh layout
    IDENTIFY_CHANGED = "identify_changed"    # Identify mode toggled on a device
    PERSONALITY_CHANGED = "personality_changed"  # Personality committed
