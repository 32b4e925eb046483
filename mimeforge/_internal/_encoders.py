from __future__ import annotations

from base64 import b64encode
from collections import deque
from collections.abc import Iterable, Sequence
from contextvars import Token
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from inspect import isclass
from pathlib import PurePath
from types import GeneratorType
from typing import Any, Protocol, cast, runtime_checkable
from uuid import UUID

from monkay import TransparentCage

from mimeforge.exceptions import SerializationError
from mimeforge.serializers import serializer


@runtime_checkable
class EncoderProtocol(Protocol):
    def is_type(self, value: Any) -> bool:
        """Check if encoder is applicable for values of this type"""

    def serialize(self, value: Any) -> Any:
        """Prepare for serialization."""


class Encoder:
    """
    The base class for any custom encoder
    added to the system.
    """

    name: str | None = None
    __type__: type | tuple[type, ...] | None = None

    def is_type(self, value: Any) -> bool:
        return isinstance(value, self.__type__)


class DataclassEncoder(EncoderProtocol):
    name: str = "DataclassEncoder"

    def is_type(self, value: Any) -> bool:
        return is_dataclass(value) and not isclass(value)

    def serialize(self, obj: Any) -> Any:
        return asdict(obj)


class NamedTupleEncoder(EncoderProtocol):
    name: str = "NamedTupleEncoder"

    def is_type(self, value: Any) -> bool:
        return isinstance(value, tuple) and hasattr(value, "_asdict")

    def serialize(self, obj: Any) -> dict:
        return cast(dict, obj._asdict())


class ModelDumpEncoder(EncoderProtocol):
    name: str = "ModelDumpEncoder"
    # e.g. pydantic

    def is_type(self, value: Any) -> bool:
        return hasattr(value, "model_dump") and not isclass(value)

    def serialize(self, value: Any) -> Any:
        return value.model_dump(mode="json")


class EnumEncoder(Encoder):
    name: str = "EnumEncoder"
    __type__ = Enum

    def serialize(self, obj: Enum) -> Any:
        return obj.value


class PurePathEncoder(Encoder):
    name: str = "PurePathEncoder"
    __type__ = PurePath

    def serialize(self, obj: PurePath) -> str:
        return str(obj)


class DateEncoder(Encoder):
    name: str = "DateEncoder"
    __type__ = date

    def serialize(self, obj: date | datetime) -> str:
        return obj.isoformat()


class BytesEncoder(Encoder):
    name: str = "BytesEncoder"
    __type__ = (bytes, bytearray, memoryview)

    def serialize(self, obj: bytes | bytearray | memoryview) -> str:
        return b64encode(obj).decode()


class StructureEncoder(Encoder):
    name: str = "StructureEncoder"
    __type__ = (set, frozenset, GeneratorType, deque)

    def serialize(self, obj: Iterable) -> list:
        return list(obj)


class UUIDEncoder(Encoder):
    name: str = "UUIDEncoder"
    __type__ = UUID

    def serialize(self, obj: UUID) -> str:
        return str(obj)


class TimedeltaEncoder(Encoder):
    name: str = "TimedeltaEncoder"
    __type__ = timedelta

    def serialize(self, obj: timedelta) -> float:
        return obj.total_seconds()


DEFAULT_ENCODER_TYPES: deque[EncoderProtocol] = deque(
    (
        DataclassEncoder(),
        NamedTupleEncoder(),
        ModelDumpEncoder(),
        EnumEncoder(),
        PurePathEncoder(),
        DateEncoder(),
        BytesEncoder(),
        StructureEncoder(),
        UUIDEncoder(),
        TimedeltaEncoder(),
    )
)


_ENCODER_TYPES_TYPE_BASE = Sequence[EncoderProtocol]


class ENCODER_TYPES_TYPE(_ENCODER_TYPES_TYPE_BASE):
    # ContextVar interface
    name: str

    def set(self, value: _ENCODER_TYPES_TYPE_BASE) -> Token: ...

    def get(
        self, default: _ENCODER_TYPES_TYPE_BASE | None = None
    ) -> _ENCODER_TYPES_TYPE_BASE | None: ...

    def reset(self, token: Token) -> None: ...


# TransparentCage merges the sequence behavior into the ContextVar interface.
ENCODER_TYPES: ENCODER_TYPES_TYPE = DEFAULT_ENCODER_TYPES  # type: ignore
TransparentCage(globals(), name="ENCODER_TYPES")


def get_encoder_name(encoder: Any) -> str:
    if getattr(encoder, "name", None):
        return cast(str, encoder.name)
    else:
        return type(encoder).__name__


def register_encoder(encoder: EncoderProtocol | type[EncoderProtocol]) -> None:
    """
    Registers an encoder ahead of the built-in ones. An already registered
    encoder with the same name is replaced.
    """
    if isclass(encoder):
        encoder = encoder()
    if not isinstance(encoder, EncoderProtocol):
        raise RuntimeError(f'"{encoder}" is not implementing the EncoderProtocol.')

    encoder_types = ENCODER_TYPES.get()
    if not isinstance(encoder_types, deque):
        raise TypeError(
            f'For registering a new encoder a "deque" is required as set "ENCODER_TYPES" value. Found: {encoder_types!r}'
        )

    encoder_name = get_encoder_name(encoder)

    for value in encoder_types:
        if get_encoder_name(value) == encoder_name:
            encoder_types.remove(value)
            break
    encoder_types.appendleft(encoder)


def json_encode_default(value: Any) -> Any:
    """
    The `default=` hook handed to the serializer.

    Raises:
        ValueError: If the value is not serializable by any registered encoder.
    """
    encoder_types = ENCODER_TYPES.get()

    for encoder in encoder_types:
        if encoder.is_type(value):
            return encoder.serialize(value)

    raise ValueError(f"Object of type '{type(value).__name__}' is not JSON serializable.")


def _exclude_none_recursively(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _exclude_none_recursively(v) for k, v in obj.items() if v is not None}
    elif isinstance(obj, list):
        return [_exclude_none_recursively(v) for v in obj if v is not None]
    elif isinstance(obj, tuple):
        return tuple(_exclude_none_recursively(v) for v in obj if v is not None)
    return obj


def json_encode(
    value: Any,
    *,
    with_encoders: Sequence[EncoderProtocol] | None = None,
    exclude_none: bool = False,
) -> bytes:
    """
    Encode a value as canonical UTF-8 JSON bytes.

    Parameters:
    value (Any): The value to encode.
    with_encoders (Sequence[EncoderProtocol]): Overwrite the used encoders for this call only
                                               by providing an own Sequence of encoders.
    exclude_none (bool): If True, exclude keys with None values from the output.

    Returns:
    bytes: The JSON document.

    Raises:
    SerializationError: If the value cannot be represented as JSON.
    """
    if with_encoders is not None:
        token = ENCODER_TYPES.set(with_encoders)
        try:
            return json_encode(value, exclude_none=exclude_none)
        finally:
            ENCODER_TYPES.reset(token)

    if exclude_none:
        value = _exclude_none_recursively(value)

    try:
        result = serializer.dumps(value, default=json_encode_default)
        if isinstance(result, str):
            return result.encode("utf-8")
        return bytes(result)
    except (TypeError, ValueError, RecursionError) as exc:
        raise SerializationError(
            detail=f"Value of type '{type(value).__name__}' cannot be serialized as JSON: {exc}"
        ) from exc
