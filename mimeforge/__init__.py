__version__ = "0.1.0"

from mimeforge.builder import MultipartBuilder
from mimeforge.datastructures import Header, MultipartPayload, Part
from mimeforge.exceptions import BuilderConsumed, MimeforgeException, SerializationError

__all__ = [
    "BuilderConsumed",
    "Header",
    "MimeforgeException",
    "MultipartBuilder",
    "MultipartPayload",
    "Part",
    "SerializationError",
]
