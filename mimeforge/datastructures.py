from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple


@dataclass(frozen=True)
class Part:
    """
    One field of a `multipart/form-data` body.

    A part carrying a `filename` is rendered as a file upload, any other part
    as a plain form field. The content is kept as-is and never inspected.
    """

    name: str
    content_type: str
    filename: str | None = None
    content: bytes = field(default=b"", repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.content, bytes):
            object.__setattr__(self, "content", bytes(self.content))

    @property
    def is_file(self) -> bool:
        return self.filename is not None

    @property
    def size(self) -> int:
        return len(self.content)


class Header(NamedTuple):
    name: str
    value: str


class MultipartPayload(NamedTuple):
    """
    The result of `MultipartBuilder.build()`.

    Unpacks as `(header, body)` where `header` is the `Content-Type` pair to
    send along with the raw `body` bytes.

    **Example**

    ```python
    payload = MultipartBuilder().add_text("name", "lilya").build()

    response = client.post("/upload", headers=payload.headers, content=payload.body)
    ```
    """

    header: Header
    body: bytes

    @property
    def content_type(self) -> str:
        return self.header.value

    @property
    def boundary(self) -> str:
        return self.header.value.split("boundary=", 1)[1]

    @property
    def headers(self) -> dict[str, str]:
        return {self.header.name: self.header.value}

    @property
    def size(self) -> int:
        return len(self.body)
