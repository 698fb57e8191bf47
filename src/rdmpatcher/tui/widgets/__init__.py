"""Reusable UI widgets for the TUI."""

from .address_modal import StartAddressModal
from .patch_row import PatchRowWidget
from .status_bar import StatusBar

__all__ = [
    "PatchRowWidget",
    "StartAddressModal",
    "StatusBar",
]
