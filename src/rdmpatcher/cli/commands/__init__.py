"""CLI commands for rdmpatcher."""

from .config import config
from .patch import drop, edit, lanes, move, show

__all__ = ["config", "drop", "edit", "lanes", "move", "show"]
