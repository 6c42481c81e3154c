from __future__ import annotations

from .indexer import ChapterIndex, ChapterRecord, chapter_key

TRAVERSAL_MARKER = ".."


class InvalidPathError(ValueError):
    """Raised when a request-supplied identifier would escape the content root."""


class ChapterNotFoundError(LookupError):
    """Raised when a story/chapter pair is absent from the index."""


def guard_path(*parts: str) -> str:
    """Return the joined path, rejecting any traversal marker before storage is touched."""
    joined = "/".join(parts)
    if TRAVERSAL_MARKER in joined:
        raise InvalidPathError("Invalid path")
    return joined


def resolve(index: ChapterIndex, story: str, chapter: str) -> ChapterRecord:
    key = guard_path(chapter_key(story, chapter))
    record = index.get(key)
    if record is None:
        raise ChapterNotFoundError(f"Chapter not found: {key}")
    return record


__all__ = [
    "ChapterNotFoundError",
    "InvalidPathError",
    "TRAVERSAL_MARKER",
    "guard_path",
    "resolve",
]
