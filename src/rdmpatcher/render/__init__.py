"""Rendering sinks for lane assignments."""

from .text import TextPatchRenderer

__all__ = ["TextPatchRenderer"]
