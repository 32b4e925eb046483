from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SerializerProtocol(Protocol):
    def dumps(self, obj: Any, **kwargs: Any) -> str | bytes: ...
