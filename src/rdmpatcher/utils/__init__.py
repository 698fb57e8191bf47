"""Generic utility modules for rdmpatcher.

- observer: Thread-safe observer list
- persistence: JSON load/save for Pydantic models
"""

from .observer import ObserverManager
from .persistence import PydanticPersistence

__all__ = ["ObserverManager", "PydanticPersistence"]
