from mimeforge._internal._boundary import generate_boundary
from mimeforge._internal._multipart import (
    encode_multipart,
    escape_header_param,
    multipart_content_type,
    render_part,
)

__all__ = [
    "encode_multipart",
    "escape_header_param",
    "generate_boundary",
    "multipart_content_type",
    "render_part",
]
