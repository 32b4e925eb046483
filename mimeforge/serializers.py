from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from typing import Any, cast

from mimeforge.protocols.serializer import SerializerProtocol


class SerializerProxy:
    """
    Proxy for the JSON backend used by `add_json`.
    """

    def __init__(self) -> None:
        self._serializer: SerializerProtocol | None = None
        self._lock: threading.RLock = threading.RLock()

    def bind_serializer(self, serializer: SerializerProtocol | None) -> None:  # noqa
        with self._lock:
            self._serializer = serializer

    def __getattr__(self, item: str) -> Any:
        with self._lock:
            if not self._serializer:
                setup_serializer()
            return getattr(self._serializer, item)


serializer: SerializerProtocol = cast(SerializerProtocol, SerializerProxy())


class SerializerConfig(ABC):
    """
    Configuration of the JSON backend used for `application/json` parts.

    The backend only needs a `dumps(obj, default=...)` callable returning
    `str` or `bytes`.

    **Example**

    ```python
    import orjson

    from mimeforge.serializers import SerializerConfig, setup_serializer


    class OrjsonSerializer:
        @staticmethod
        def dumps(obj, **kwargs):
            return orjson.dumps(obj, default=kwargs.get("default"))


    class OrjsonSerializerConfig(SerializerConfig):
        def get_serializer(self):
            return OrjsonSerializer


    setup_serializer(OrjsonSerializerConfig())
    ```
    """

    def __init__(self, **kwargs: Any) -> None:
        self.skip_setup_configure: bool = kwargs.get("skip_setup_configure", True)

    def configure(self) -> None:
        """
        Prepares the backend before it is bound. Nothing to do by default.
        """

    @abstractmethod
    def get_serializer(self) -> Any:
        """
        Returns the serializer instance.
        """
        raise NotImplementedError("`get_serializer()` must be implemented in subclasses.")


class CompactSerializer:
    """
    Standard library `json` with canonical output: compact separators, no
    `NaN`/`Infinity` literals and raw UTF-8 text.
    """

    @staticmethod
    def dumps(obj: Any, **kwargs: Any) -> str:
        kwargs.setdefault("ensure_ascii", False)
        kwargs.setdefault("allow_nan", False)
        kwargs.setdefault("separators", (",", ":"))
        return json.dumps(obj, **kwargs)


class StandardSerializerConfig(SerializerConfig):
    def get_serializer(self) -> Any:
        return CompactSerializer


def setup_serializer(serializer_config: SerializerConfig | None = None) -> None:
    """
    Sets up the JSON backend.

    If a custom `SerializerConfig` is provided, it will be used. Otherwise a
    `StandardSerializerConfig` is applied.

    Raises:
        ValueError: If the provided `serializer_config` is not an instance of `SerializerConfig`.
    """
    if serializer_config is not None and not isinstance(serializer_config, SerializerConfig):
        raise ValueError("`serializer_config` must be an instance of SerializerConfig.")

    config = serializer_config or StandardSerializerConfig()

    if not config.skip_setup_configure:
        config.configure()

    serializer.bind_serializer(config.get_serializer())
