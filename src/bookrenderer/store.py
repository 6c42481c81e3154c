from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

EXCLUDED_DIR_NAMES = frozenset({"static", "build"})


@dataclass(slots=True)
class ContentStore:
    """Read-only access to files below the content root."""

    root: Path

    def path(self, *parts: str | os.PathLike[str]) -> Path:
        return self.root.joinpath(*parts)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def read_text(self, path: Path) -> str:
        return path.read_bytes().decode("utf-8", errors="replace")

    def iter_story_dirs(self) -> Iterator[Path]:
        """Yield every directory below the root, skipping shared asset trees."""
        for dirpath, dirnames, _ in os.walk(self.root, onerror=_log_walk_error):
            dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIR_NAMES)
            current = Path(dirpath)
            if current == self.root:
                continue
            yield current

    def relative_name(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()


def _log_walk_error(exc: OSError) -> None:
    logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc)


__all__ = ["ContentStore", "EXCLUDED_DIR_NAMES"]
