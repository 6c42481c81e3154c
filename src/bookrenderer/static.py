from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .render import NO_CACHE_HEADERS
from .resolver import guard_path
from .store import ContentStore

SHARED_STATIC_DIR = "static"

# suffix -> (media type, disable caching)
_CONTENT_TYPES: dict[str, tuple[str, bool]] = {
    ".jpg": ("image/jpeg", False),
    ".jpeg": ("image/jpeg", False),
    ".png": ("image/png", False),
    ".html": ("text/html", True),
    ".js": ("text/javascript", True),
    ".css": ("text/css", False),
    ".json": ("application/json", False),
}


@dataclass(slots=True)
class StaticAsset:
    path: Path
    data: bytes
    media_type: str | None
    headers: dict[str, str] = field(default_factory=dict)


def content_headers(path: str | Path) -> tuple[str | None, dict[str, str]]:
    """Return the media type and extra headers for a file, keyed on its suffix."""
    name = str(path)
    for suffix, (media_type, no_cache) in _CONTENT_TYPES.items():
        if name.endswith(suffix):
            return media_type, dict(NO_CACHE_HEADERS) if no_cache else {}
    return None, {}


def load_static(store: ContentStore, *parts: str) -> StaticAsset:
    relative = guard_path(*parts)
    path = store.path(*(part.lstrip("/") for part in parts))
    if not store.exists(path):
        raise FileNotFoundError(f"File not found: {relative}")
    if store.is_dir(path):
        raise IsADirectoryError(f"Is a directory: {relative}")
    data = store.read_bytes(path)
    media_type, headers = content_headers(path)
    return StaticAsset(path=path, data=data, media_type=media_type, headers=headers)


__all__ = ["SHARED_STATIC_DIR", "StaticAsset", "content_headers", "load_static"]
