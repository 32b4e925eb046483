from __future__ import annotations

from typing import Any


class MimeforgeException(Exception):
    def __init__(self, *args: Any, detail: str = ""):
        self.detail = detail
        super().__init__(*(str(arg) for arg in args if arg), self.detail)

    def __repr__(self) -> str:  # pragma: no cover
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return "".join(self.args).strip()


class SerializationError(MimeforgeException):
    """
    Raised when a value handed to `add_json` (or `json_encode`) cannot be
    converted into JSON bytes.

    Typical causes:
    - Non-finite floats (`nan`, `inf`).
    - Circular references.
    - Objects no registered encoder knows how to serialize.

    The original exception is always available as `__cause__`.
    """

    ...


class BuilderConsumed(MimeforgeException):
    """
    Raised when a `MultipartBuilder` is used after `build()` was called.
    """

    ...
