"""
Centralized error handling utilities.

This module provides a layered approach to error handling:

1. **Custom Exceptions** - Typed, user-friendly error classes (see base, patch, registry, config)
2. **Error Context** - Preserve technical details for logging, show friendly messages to users
3. **Recovery Hints** - Tell users what to do when things fail
4. **Error Isolation** - One bad device record shouldn't hide the others

## Quick Reference

| Scenario | Use This |
|----------|----------|
| Address outside the bus | `InvalidAddressError` |
| Footprint below one slot | `InvalidFootprintError` |
| Registry refused a change | `RemoteUpdateFailedError` |
| Config/patch file syntax error | `ConfigFileInvalidError` |
| Config/patch value invalid | `ConfigValidationError` |

### Handling Patterns

| Pattern | Code |
|---------|------|
| Show error to user, continue | `@handle_errors(operation_name="move device", user_notification=self.notify, re_raise=False)` |
| Log and re-raise | `@handle_errors(operation_name="load patch", re_raise=True)` |
| Try many records, collect errors | `collector = collect_errors("load devices"); with collector.try_operation(...): ...` |
| Critical section with auto-logging | `with ErrorContext("commit patch file"): ...` |

## Architecture: The Three-Layer Model

```
┌─────────────────────────────────────┐
│  USER LAYER (CLI/TUI)               │
│  - Formats error.user_message       │
│  - Shows error.recovery_hint        │
└─────────────────────────────────────┘
                  ↑ RdmPatcherError
┌─────────────────────────────────────┐
│  APPLICATION LAYER (Services)       │
│  - Converts low-level exceptions    │
│  - Adds context and recovery hints  │
└─────────────────────────────────────┘
                  ↑ Exception, OSError, etc.
┌─────────────────────────────────────┐
│  LOW LEVEL (registry, files)        │
└─────────────────────────────────────┘
```
"""

import inspect
import logging
from typing import Callable, TypeVar, Optional

from functools import wraps

from .base import RdmPatcherError
from .config import ConfigFileInvalidError, ConfigValidationError
from .registry import RemoteUpdateFailedError


logger = logging.getLogger(__name__)

T = TypeVar('T')


def handle_errors(
    *,
    operation_name: str,
    user_notification: Optional[Callable[[str], None]] = None,
    fallback_value: Optional[T] = None,
    re_raise: bool = True,
    log_level: int = logging.ERROR
) -> Callable:
    """
    Decorator for consistent error handling.

    Args:
        operation_name: Name of the operation for logging (e.g., "move device")
        user_notification: Optional callback to notify user (e.g., self.notify)
        fallback_value: Value to return if error occurs and re_raise=False
        re_raise: Whether to re-raise the exception after handling
        log_level: Logging level for the error (default: ERROR)

    Coroutine functions are wrapped with an async wrapper, so the same
    decorator works on async Textual actions.

    Returns:
        Decorated function
    """
    def report(e: Exception) -> None:
        if isinstance(e, RdmPatcherError):
            logger.log(log_level, f"Failed to {operation_name}: {e.technical_message}")
            if user_notification:
                user_notification(e.get_full_message())
        else:
            logger.log(
                log_level,
                f"Unexpected error during {operation_name}: {e}",
                exc_info=True
            )
            if user_notification:
                user_notification(f"Error: {e}")

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    report(e)
                    if re_raise:
                        raise
                    return fallback_value

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                report(e)
                if re_raise:
                    raise
                return fallback_value

        return wrapper
    return decorator


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("commit patch file") as ctx:
            registry.save()

        if ctx.error:
            print(f"Failed: {ctx.error}")
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True
    ):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
            re_raise: Whether to re-raise exceptions
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[Exception] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val

        if isinstance(exc_val, RdmPatcherError):
            self.logger.error(
                f"Failed to {self.operation}: {exc_val.technical_message}"
            )
        else:
            self.logger.error(
                f"Failed to {self.operation}: {exc_val}",
                exc_info=True
            )

        # True suppresses the exception
        return not self.re_raise


def wrap_pydantic_error(error: Exception, file_path: str) -> RdmPatcherError:
    """
    Convert Pydantic validation errors to rdmpatcher exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if errors:
            if len(errors) == 1:
                first_error = errors[0]
                field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
                reason = first_error.get('msg', 'validation failed')
                value = first_error.get('input', None)

                return ConfigValidationError(
                    field=field,
                    value=value,
                    error_msg=reason,
                    file_path=file_path
                )
            else:
                error_lines = []
                for err in errors:
                    field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                    msg = err.get('msg', 'validation failed')
                    error_lines.append(f"  - {field}: {msg}")

                combined_msg = f"{len(errors)} validation errors:\n" + "\n".join(error_lines)

                return ConfigValidationError(
                    field="multiple fields",
                    value=None,
                    error_msg=combined_msg,
                    file_path=file_path
                )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path
    )


def wrap_registry_error(error: Exception, uid: str, operation: str) -> RdmPatcherError:
    """
    Convert an exception raised by a device registry into an rdmpatcher exception.

    Errors that are already RdmPatcherError pass through unchanged.

    Args:
        error: The exception raised by the registry
        uid: Device the request was for
        operation: What was requested

    Returns:
        An RdmPatcherError with a user-facing message
    """
    if isinstance(error, RdmPatcherError):
        return error
    return RemoteUpdateFailedError(uid=uid, operation=operation, original_error=str(error))


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, RdmPatcherError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None


def collect_errors(operation: str) -> "ErrorCollector":
    """
    Create an error collector for batch operations.

    Example:
        ```python
        collector = collect_errors("load devices")

        for record in records:
            with collector.try_operation(f"load {record.uid}"):
                devices.append(record.to_device(space))

        if collector.has_errors:
            print(collector.get_summary())
        ```
    """
    return ErrorCollector(operation)


class ErrorCollector:
    """
    Collects multiple errors during batch operations.

    Allows operations to continue even if some fail, then
    report all failures at once.
    """

    def __init__(self, operation: str):
        self.operation = operation
        self.errors: list[tuple[str, Exception]] = []
        self.success_count = 0

    @property
    def has_errors(self) -> bool:
        """Check if any errors were collected."""
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        """Get the number of errors collected."""
        return len(self.errors)

    def try_operation(self, sub_operation: str):
        """
        Context manager for a single operation within the batch.

        Only RdmPatcherError is collected; anything else propagates.

        Args:
            sub_operation: Description of this specific operation
        """
        return self._OperationContext(self, sub_operation)

    def get_summary(self) -> str:
        """Get a multi-line summary of collected errors."""
        if not self.has_errors:
            return f"All operations completed successfully ({self.success_count} total)"

        summary = f"Failed {self.error_count} of {self.error_count + self.success_count} operations:\n"
        for sub_op, error in self.errors:
            if isinstance(error, RdmPatcherError):
                summary += f"  - {sub_op}: {error.user_message}\n"
            else:
                summary += f"  - {sub_op}: {error}\n"

        return summary.rstrip()

    class _OperationContext:
        """Internal context manager for individual operations."""

        def __init__(self, collector: "ErrorCollector", sub_operation: str):
            self.collector = collector
            self.sub_operation = sub_operation

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_type is None:
                self.collector.success_count += 1
                return False

            if not isinstance(exc_val, RdmPatcherError):
                return False

            self.collector.errors.append((self.sub_operation, exc_val))
            return True
