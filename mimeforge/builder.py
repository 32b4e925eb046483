from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any

from typing_extensions import Doc

from mimeforge._internal._boundary import generate_boundary
from mimeforge._internal._multipart import encode_multipart, multipart_content_type
from mimeforge.conf import settings
from mimeforge.datastructures import Header, MultipartPayload, Part
from mimeforge.exceptions import BuilderConsumed
from mimeforge.logging import logger

FileValue = bytes | tuple[str, bytes] | tuple[str, bytes, str | None]

DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"


class MultipartBuilder:
    """
    Builds `multipart/form-data` payloads for test requests.

    Parts are appended in call order, which is also the order they appear in
    on the wire. Every `add_*` method returns the builder itself so calls can
    be chained. `build()` consumes the builder.

    **Example**

    ```python
    from mimeforge import MultipartBuilder

    content_type, body = (
        MultipartBuilder()
        .add_json("json", {"name": "MyTestVideo"})
        .add_bytes("file", "test_video.mp4", "video/mp4", b"This is a dummy video file")
        .build()
    )

    response = client.post("/videos", headers=[content_type], content=body)
    ```
    """

    def __init__(
        self,
        boundary: Annotated[
            str | None,
            Doc(
                """
                The boundary token. When not provided, a random one is generated.
                An explicit value is used verbatim, which makes the produced
                bytes fully deterministic.
                """
            ),
        ] = None,
    ) -> None:
        self._boundary: str = boundary if boundary is not None else generate_boundary()
        self._parts: list[Part] = []
        self._consumed: bool = False

    @classmethod
    def from_form(
        cls,
        data: Mapping[str, str] | None = None,
        files: Mapping[str, FileValue] | None = None,
        *,
        boundary: str | None = None,
    ) -> MultipartBuilder:
        """
        Creates a builder from the `data`/`files` mappings HTTP clients accept.

        Text fields from `data` come first, then the `files`. A `files` value
        is either raw bytes (the field name doubles as filename) or a
        `(filename, content)` / `(filename, content, content_type)` tuple.
        """
        builder = cls(boundary=boundary)
        for name, text in (data or {}).items():
            builder.add_text(name, text)

        for name, value in (files or {}).items():
            if isinstance(value, (bytes, bytearray, memoryview)):
                builder.add_bytes(name, name, DEFAULT_FILE_CONTENT_TYPE, value)
                continue

            filename, content, *rest = value
            content_type = rest[0] if rest and rest[0] else DEFAULT_FILE_CONTENT_TYPE
            builder.add_bytes(name, filename, content_type, content)
        return builder

    @property
    def boundary(self) -> str:
        return self._boundary

    @property
    def parts(self) -> tuple[Part, ...]:
        return tuple(self._parts)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def __len__(self) -> int:
        return len(self._parts)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(boundary={self._boundary!r}, parts={len(self._parts)})"

    def _ensure_not_consumed(self) -> None:
        if self._consumed:
            raise BuilderConsumed(
                detail="The builder was already built. Create a new MultipartBuilder instead."
            )

    def add_part(
        self,
        name: str,
        content_type: str,
        filename: str | None,
        content: bytes | bytearray | memoryview,
    ) -> MultipartBuilder:
        """
        Appends a fully specified part. Nothing is validated.
        """
        self._ensure_not_consumed()
        self._parts.append(
            Part(name=name, content_type=content_type, filename=filename, content=bytes(content))
        )
        return self

    def add_text(self, name: str, text: str) -> MultipartBuilder:
        """
        Appends a plain text field, encoded as UTF-8. Lone surrogates are
        kept as their UTF-8 byte sequence.
        """
        content = text.encode("utf-8", errors="surrogatepass")
        return self.add_part(name, settings.text_content_type, None, content)

    def add_bytes(
        self,
        name: str,
        filename: str,
        content_type: str,
        content: bytes | bytearray | memoryview,
    ) -> MultipartBuilder:
        """
        Appends a file-like part.
        """
        return self.add_part(name, content_type, filename, content)

    def add_json(self, name: str, value: Any, *, exclude_none: bool = False) -> MultipartBuilder:
        """
        Appends an `application/json` field.

        The value goes through the registered encoders (dataclasses, pydantic
        models, dates, UUIDs...) and is dumped as compact UTF-8 JSON.

        Raises:
            SerializationError: If the value cannot be serialized. The builder
                is left untouched.
        """
        self._ensure_not_consumed()

        from mimeforge.encoders import json_encode

        content = json_encode(value, exclude_none=exclude_none)
        return self.add_part(name, settings.json_content_type, None, content)

    def build(self) -> MultipartPayload:
        """
        Encodes the collected parts and returns the `Content-Type` header
        together with the body bytes.

        The builder cannot be used afterwards. A build that raises leaves the
        builder untouched.
        """
        self._ensure_not_consumed()

        body = encode_multipart(self._boundary, self._parts, escape_quotes=settings.escape_quotes)
        header = Header("Content-Type", multipart_content_type(self._boundary))

        logger.debug(
            "Built multipart payload with %d part(s), %d bytes, boundary %s",
            len(self._parts),
            len(body),
            self._boundary,
        )
        self._consumed = True
        self._parts = []
        return MultipartPayload(header=header, body=body)
