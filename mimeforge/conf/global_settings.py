from __future__ import annotations

import os
from types import UnionType
from typing import (
    Annotated,
    Any,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from typing_extensions import Doc

from mimeforge.logging import LoggingConfig, StandardLoggingConfig

# `BaseSettings.dict` shadows the builtin inside the class namespace.
_BUILTIN_NAMES: dict[str, Any] = {"dict": dict, "set": set}


def resolve_type_hints(cls: type) -> dict[str, Any]:
    """
    Resolves the settings annotations of `cls` into real types.
    """
    hints = get_type_hints(cls, localns=_BUILTIN_NAMES, include_extras=True)
    return {key: typ for key, typ in hints.items() if not key.startswith("__")}


class BaseSettings:
    """
    Base of all the settings.

    Every annotated attribute is a setting. Its value is taken, in order, from
    the keyword arguments, an environment variable with the upper-cased name,
    or the class default. Keyword arguments that are not settings are set as
    plain attributes.
    """

    __type_hints__: dict[str, Any] = None
    __truthy__: set[str] = {"true", "1", "yes", "on", "y"}

    def __init__(self, **kwargs: Any) -> None:
        cls = self.__class__
        if cls.__dict__.get("__type_hints__") is None:
            cls.__type_hints__ = resolve_type_hints(cls)

        for key, value in kwargs.items():
            setattr(self, key, value)

        for key, typ in cls.__type_hints__.items():
            if key in kwargs:
                continue

            env_value = os.getenv(key.upper(), None)
            if env_value is not None:
                value = self._cast(env_value, self._extract_base_type(typ))
            else:
                value = getattr(self, key, None)
            setattr(self, key, value)

        self.post_init()

    def post_init(self) -> None:
        """
        Post-initialization method that can be overridden by subclasses.
        """
        ...

    def _extract_base_type(self, typ: Any) -> Any:
        origin = get_origin(typ)
        if origin is Annotated:
            return get_args(typ)[0]
        return typ

    def _cast(self, value: str, typ: type[Any]) -> Any:
        """
        Casts an environment value to the annotated type.

        Raises:
            ValueError: If the value cannot be cast to the specified type.
        """
        try:
            origin = get_origin(typ)
            if origin is Union or origin is UnionType:
                non_none_types = [t for t in get_args(typ) if t is not type(None)]
                if len(non_none_types) == 1:
                    typ = non_none_types[0]
                else:
                    raise ValueError(f"Cannot cast to ambiguous Union type: {typ}")

            if typ is bool or str(typ) == "bool":
                return value.lower() in self.__truthy__
            return typ(value)
        except Exception:
            type_name = getattr(typ, "__name__", str(typ))
            raise ValueError(f"Cannot cast value '{value}' to type '{type_name}'") from None

    def dict(
        self,
        exclude_none: bool = False,
        upper: bool = False,
        exclude: set[str] | None = None,
    ) -> dict[str, Any]:
        """
        Dumps all the settings into a python dictionary.
        """
        result = {}
        exclude = exclude or set()

        for key in self.__class__.__type_hints__:
            if key in exclude:
                continue
            value = getattr(self, key, None)
            if exclude_none and value is None:
                continue
            result_key = key.upper() if upper else key
            result[result_key] = value
        return result


class Settings(BaseSettings):
    text_content_type: Annotated[
        str,
        Doc(
            """
            The content type written for parts added with `add_text`.
            """
        ),
    ] = "text/plain"
    json_content_type: Annotated[
        str,
        Doc(
            """
            The content type written for parts added with `add_json`.
            """
        ),
    ] = "application/json"
    escape_quotes: Annotated[
        bool,
        Doc(
            """
            When `True`, double quotes and line breaks inside field names and
            filenames are replaced by `%22`, `%0D` and `%0A`, as browsers do on
            form submission.

            !!! Warning
                This changes the bytes produced for such names. The default
                embeds names and filenames verbatim.
            """
        ),
    ] = False
    logging_level: Annotated[
        str,
        Doc(
            """
            The level used by `setup_logging()` when called without a config.
            """
        ),
    ] = "DEBUG"

    @property
    def logging_config(self) -> LoggingConfig:
        """
        The logging configuration applied by `setup_logging()` when none is given.
        """
        return StandardLoggingConfig(level=self.logging_level)
