from __future__ import annotations

from urllib.parse import urlsplit

_BASE_URL = "http://example.com/"


def is_invalid_name(name: str) -> bool:
    """True if name cannot be used as a single URL path segment (flight or config name)."""
    if not name or "/" in name or "." in name or " " in name:
        return True
    try:
        parts = urlsplit(_BASE_URL + name)
    except ValueError:
        return True
    return parts.path != "/" + name
