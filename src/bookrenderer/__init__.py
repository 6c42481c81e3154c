from .config import ConfigError, WebConfig, load_config
from .indexer import (
    ChapterIndex,
    ChapterRecord,
    StopReason,
    build_index,
    discover_story,
)
from .resolver import ChapterNotFoundError, InvalidPathError, resolve
from .store import ContentStore
from .web import create_app

__all__ = [
    "ChapterIndex",
    "ChapterRecord",
    "StopReason",
    "build_index",
    "discover_story",
    "ContentStore",
    "resolve",
    "InvalidPathError",
    "ChapterNotFoundError",
    "WebConfig",
    "ConfigError",
    "load_config",
    "create_app",
]
