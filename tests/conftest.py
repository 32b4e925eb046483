from __future__ import annotations

from typing import Any

import pytest
from python_multipart.multipart import MultipartParser, parse_options_header

from mimeforge import logging as mimeforge_logging
from mimeforge.datastructures import MultipartPayload
from mimeforge.serializers import serializer


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_proxies():
    mimeforge_logging.logger.bind_logger(None)
    serializer.bind_serializer(None)
    yield
    mimeforge_logging.logger.bind_logger(None)
    serializer.bind_serializer(None)


def decode_multipart(payload: MultipartPayload) -> list[dict[str, Any]]:
    """
    Decodes a payload with python-multipart, returning one dict per part with
    the name, filename, content type and raw content.
    """
    _, params = parse_options_header(payload.content_type)
    boundary = params[b"boundary"]

    parts: list[dict[str, Any]] = []
    current: dict[str, Any] = {}
    headers: dict[bytes, bytes] = {}
    field: list[bytes] = []
    value: list[bytes] = []

    def on_part_begin() -> None:
        current.clear()
        headers.clear()
        current["content"] = b""

    def on_header_field(data: bytes, start: int, end: int) -> None:
        field.append(data[start:end])

    def on_header_value(data: bytes, start: int, end: int) -> None:
        value.append(data[start:end])

    def on_header_end() -> None:
        headers[b"".join(field).lower()] = b"".join(value)
        field.clear()
        value.clear()

    def on_headers_finished() -> None:
        _, options = parse_options_header(headers[b"content-disposition"])
        current["name"] = options[b"name"].decode()
        filename = options.get(b"filename")
        current["filename"] = filename.decode() if filename is not None else None
        current["content_type"] = headers[b"content-type"].decode()

    def on_part_data(data: bytes, start: int, end: int) -> None:
        current["content"] += data[start:end]

    def on_part_end() -> None:
        parts.append(dict(current))

    parser = MultipartParser(
        boundary,
        {
            "on_part_begin": on_part_begin,
            "on_header_field": on_header_field,
            "on_header_value": on_header_value,
            "on_header_end": on_header_end,
            "on_headers_finished": on_headers_finished,
            "on_part_data": on_part_data,
            "on_part_end": on_part_end,
        },
    )
    parser.write(payload.body)
    parser.finalize()
    return parts


@pytest.fixture
def decode():
    return decode_multipart
