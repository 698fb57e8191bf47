"""Textual user interface for the patcher."""

from .app import PatchView

__all__ = ["PatchView"]
