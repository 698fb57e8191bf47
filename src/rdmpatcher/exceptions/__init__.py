"""
Custom exception hierarchy for rdmpatcher.

## Exception Hierarchy

```
RdmPatcherError (base)
├── PatchValidationError
│   ├── InvalidAddressError
│   └── InvalidFootprintError
├── RegistryError
│   ├── RemoteUpdateFailedError
│   ├── DeviceNotFoundError
│   └── MovePendingError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

All custom exceptions inherit from `RdmPatcherError`, which provides:

- `user_message`: Human-friendly message for display to users
- `technical_message`: Detailed message for logging
- `recoverable`: Whether the error can be recovered from
- `recovery_hint`: Optional suggestion for how to fix the issue

### Example: Out-of-range start address

```python
from rdmpatcher.exceptions import InvalidAddressError

raise InvalidAddressError(start_address=513, total_slots=512, uid="7a70:00000001")

# User sees: "Must be between 1 and 512"
```

Overlapping devices are not an error: they are stacked into lanes by
`rdmpatcher.layout.LayoutEngine`.

See `rdmpatcher.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .base import RdmPatcherError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .handlers import (
    ErrorCollector,
    ErrorContext,
    collect_errors,
    format_error_for_display,
    handle_errors,
    wrap_pydantic_error,
    wrap_registry_error,
)
from .patch import InvalidAddressError, InvalidFootprintError, PatchValidationError
from .registry import DeviceNotFoundError, MovePendingError, RegistryError, RemoteUpdateFailedError

__all__ = [
    # Base
    "RdmPatcherError",
    # Patch
    "PatchValidationError",
    "InvalidAddressError",
    "InvalidFootprintError",
    # Registry
    "RegistryError",
    "RemoteUpdateFailedError",
    "DeviceNotFoundError",
    "MovePendingError",
    # Config
    "ConfigurationError",
    "ConfigFileInvalidError",
    "ConfigValidationError",
    # Handlers
    "ErrorCollector",
    "ErrorContext",
    "collect_errors",
    "format_error_for_display",
    "handle_errors",
    "wrap_pydantic_error",
    "wrap_registry_error",
]
