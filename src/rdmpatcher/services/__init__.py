"""Application services."""

from .patch_service import PatchService

__all__ = ["PatchService"]
