from __future__ import annotations

import inspect
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any

from mimeforge.conf import _monkay as monkay_for_settings

if TYPE_CHECKING:
    from mimeforge.conf.global_settings import Settings


class override_settings:
    """
    A context manager that allows overriding Mimeforge settings temporarily.

    Usage:
    ```
    with override_settings(escape_quotes=True):
        # code that uses the overridden settings
    ```

    The `override_settings` class can also be used as a decorator.

    Usage:
    ```
    @override_settings(json_content_type="application/vnd.api+json")
    def test_function():
        # code that uses the overridden settings
    ```
    """

    def __init__(self, **kwargs: Any) -> None:
        self.options = kwargs
        self._innermanager: Any = None

    async def __aenter__(self) -> None:
        return self.__enter__()

    async def __aexit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.__exit__(exc_type, exc_value, traceback)

    def __enter__(self) -> None:
        """
        Saves the original settings and activates a copy with the options applied.
        """
        _original_settings: Settings = monkay_for_settings.settings
        opts = _original_settings.dict()
        opts.update(self.options)
        self._innermanager = monkay_for_settings.with_settings(
            _original_settings.__class__(**opts)
        )
        self._innermanager.__enter__()

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self._innermanager.__exit__(exc_type, exc_value, traceback)

    def __call__(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """
        Decorator that runs the wrapped function inside the context manager.
        """
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                async with self:
                    return await func(*args, **kwargs)

            return async_wrapper
        else:

            @wraps(func)
            def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
                with self:
                    return func(*args, **kwargs)

            return sync_wrapper
