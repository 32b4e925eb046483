from __future__ import annotations

from collections.abc import Iterable

from mimeforge.datastructures import Part

CRLF = b"\r\n"

# Replacements applied by browsers to names and filenames on form submission.
_HTML5_REPLACEMENTS = {
    '"': "%22",
    "\r": "%0D",
    "\n": "%0A",
}


def escape_header_param(value: str) -> str:
    for char, replacement in _HTML5_REPLACEMENTS.items():
        value = value.replace(char, replacement)
    return value


def multipart_content_type(boundary: str) -> str:
    return f"multipart/form-data; boundary={boundary}"


def render_part(boundary: str, part: Part, *, escape_quotes: bool = False) -> bytes:
    """
    Renders a single part, from its delimiter line down to the CRLF that
    follows the content.
    """
    name, filename = part.name, part.filename
    if escape_quotes:
        name = escape_header_param(name)
        filename = escape_header_param(filename) if filename is not None else None

    disposition = f'form-data; name="{name}"'
    if filename is not None:
        disposition += f'; filename="{filename}"'

    head = (
        f"--{boundary}\r\n"
        f"Content-Disposition: {disposition}\r\n"
        f"Content-Type: {part.content_type}\r\n"
        "\r\n"
    ).encode("utf-8")
    return head + part.content + CRLF


def encode_multipart(
    boundary: str, parts: Iterable[Part], *, escape_quotes: bool = False
) -> bytes:
    """
    Encodes the parts, in order, into a `multipart/form-data` body delimited
    by `boundary`.

    Names, filenames and content types are written verbatim unless
    `escape_quotes` is set. The content bytes are never transformed.
    """
    chunks: list[bytes] = [
        render_part(boundary, part, escape_quotes=escape_quotes) for part in parts
    ]
    chunks.append(f"--{boundary}--\r\n".encode("utf-8"))
    return b"".join(chunks)
