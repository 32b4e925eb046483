from __future__ import annotations

import uuid


def generate_boundary() -> str:
    """
    Returns a fresh boundary token.

    The canonical form of a random UUID4: 36 characters out of `[0-9a-f-]`,
    safe to use unquoted as a `Content-Type` parameter.
    """
    return str(uuid.uuid4())
