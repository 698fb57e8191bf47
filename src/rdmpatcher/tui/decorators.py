"""Decorators for TUI components."""

import inspect
from functools import wraps

from rdmpatcher.exceptions import handle_errors as _handle_errors


def handle_action_errors(operation_name: str):
    """
    Decorator for TUI action methods that wraps the centralized error handler.

    - Uses self.notify for user notifications
    - Doesn't re-raise exceptions (keeps TUI responsive)
    - Returns None on error

    Works for both plain and async actions.

    Example:
        @handle_action_errors("move device")
        async def action_nudge(self, slots: int):
            ...
    """
    def decorator(func):
        def wrap(self):
            return _handle_errors(
                operation_name=operation_name,
                user_notification=lambda msg: self.notify(msg, severity="error", timeout=5),
                re_raise=False,
                fallback_value=None
            )(func)

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(self, *args, **kwargs):
                return await wrap(self)(self, *args, **kwargs)
            return async_wrapper

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            return wrap(self)(self, *args, **kwargs)
        return wrapper
    return decorator
