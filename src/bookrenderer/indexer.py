from __future__ import annotations

import enum
import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType

from .store import ContentStore

logger = logging.getLogger(__name__)

CHAPTER_SUFFIX = ".html"
METADATA_SUFFIX = ".dat"


def chapter_key(story: str, chapter: str | int) -> str:
    return f"{story}/{chapter}{CHAPTER_SUFFIX}"


@dataclass(frozen=True, slots=True)
class ChapterMetadata:
    title: str
    description: str


@dataclass(frozen=True, slots=True)
class ChapterRecord:
    story: str
    number: int
    title: str
    description: str
    body: str
    has_prev: bool
    has_next: bool

    @property
    def key(self) -> str:
        return chapter_key(self.story, self.number)

    def as_payload(self) -> dict[str, object]:
        return {
            "title": self.title,
            "description": self.description,
            "data": self.body,
            "hasPrev": self.has_prev,
            "hasNext": self.has_next,
        }


class StopReason(enum.Enum):
    END = "end"
    UNREADABLE = "unreadable"
    MISSING_METADATA = "missing-metadata"
    BAD_METADATA = "bad-metadata"


class MetadataError(ValueError):
    """Raised when a chapter .dat file is not a JSON object of strings."""


@dataclass(slots=True)
class StoryScan:
    story: str
    records: list[ChapterRecord] = field(default_factory=list)
    stop_reason: StopReason = StopReason.END
    stop_detail: str | None = None


class ChapterIndex(Mapping[str, ChapterRecord]):
    """Immutable mapping of chapter key to record, built once at startup."""

    __slots__ = ("_records",)

    def __init__(self, records: Mapping[str, ChapterRecord] | None = None) -> None:
        self._records = MappingProxyType(dict(records or {}))

    def __getitem__(self, key: str) -> ChapterRecord:
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"ChapterIndex({len(self)} chapters, {len(self.stories())} stories)"

    def lookup(self, story: str, chapter: str | int) -> ChapterRecord | None:
        return self._records.get(chapter_key(story, chapter))

    def stories(self) -> list[str]:
        return sorted({record.story for record in self._records.values()})

    def chapters(self, story: str) -> list[ChapterRecord]:
        return sorted(
            (record for record in self._records.values() if record.story == story),
            key=lambda record: record.number,
        )


def load_metadata(raw: str) -> ChapterMetadata:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MetadataError(f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MetadataError("metadata must be a JSON object")
    for name, value in payload.items():
        if value is not None and not isinstance(value, str):
            raise MetadataError(f"metadata field {name!r} must be a string")
    return ChapterMetadata(
        title=payload.get("title") or "",
        description=payload.get("description") or "",
    )


def finalize_story(records: list[ChapterRecord]) -> list[ChapterRecord]:
    """Clear ``has_next`` on the final chapter once discovery has stopped."""
    if not records:
        return records
    return [*records[:-1], replace(records[-1], has_next=False)]


def _chapter_exists(scan: StoryScan, store: ContentStore, path: Path) -> bool | None:
    try:
        return store.exists(path)
    except OSError as exc:
        scan.stop_reason = StopReason.UNREADABLE
        scan.stop_detail = f"{path.name}: {exc}"
        return None


def discover_story(store: ContentStore, story_dir: Path) -> StoryScan:
    """Probe ``1.html``, ``2.html``, ... until the first chapter that cannot be loaded."""
    scan = StoryScan(story=store.relative_name(story_dir))
    number = 1
    while True:
        content_path = story_dir / f"{number}{CHAPTER_SUFFIX}"
        metadata_path = story_dir / f"{number}{METADATA_SUFFIX}"
        content_exists = _chapter_exists(scan, store, content_path)
        if content_exists is None:
            break
        if not content_exists:
            scan.stop_reason = StopReason.END
            scan.stop_detail = f"{content_path.name} not found"
            break
        try:
            body = store.read_text(content_path)
        except OSError as exc:
            scan.stop_reason = StopReason.UNREADABLE
            scan.stop_detail = f"{content_path.name}: {exc}"
            break
        metadata_exists = _chapter_exists(scan, store, metadata_path)
        if metadata_exists is None:
            break
        if not metadata_exists:
            scan.stop_reason = StopReason.MISSING_METADATA
            scan.stop_detail = f"{metadata_path.name} not found"
            break
        try:
            metadata = load_metadata(store.read_text(metadata_path))
        except OSError as exc:
            scan.stop_reason = StopReason.UNREADABLE
            scan.stop_detail = f"{metadata_path.name}: {exc}"
            break
        except MetadataError as exc:
            scan.stop_reason = StopReason.BAD_METADATA
            scan.stop_detail = f"{metadata_path.name}: {exc}"
            break
        scan.records.append(
            ChapterRecord(
                story=scan.story,
                number=number,
                title=metadata.title,
                description=metadata.description,
                body=body,
                has_prev=number != 1,
                has_next=True,
            )
        )
        number += 1
    scan.records = finalize_story(scan.records)
    _log_scan(scan)
    return scan


def _log_scan(scan: StoryScan) -> None:
    if scan.stop_reason is StopReason.END:
        logger.debug(
            "Indexed %d chapter(s) for %s (%s)",
            len(scan.records),
            scan.story,
            scan.stop_detail,
        )
        return
    logger.warning(
        "Stopped indexing %s after %d chapter(s): %s (%s)",
        scan.story,
        len(scan.records),
        scan.stop_reason.value,
        scan.stop_detail,
    )


def build_index(source: ContentStore | Path) -> ChapterIndex:
    store = source if isinstance(source, ContentStore) else ContentStore(Path(source))
    records: dict[str, ChapterRecord] = {}
    story_count = 0
    for story_dir in store.iter_story_dirs():
        scan = discover_story(store, story_dir)
        if scan.records:
            story_count += 1
        for record in scan.records:
            records[record.key] = record
    logger.info("Indexed %d chapter(s) across %d story(ies) under %s", len(records), story_count, store.root)
    return ChapterIndex(records)


__all__ = [
    "ChapterIndex",
    "ChapterMetadata",
    "ChapterRecord",
    "MetadataError",
    "StopReason",
    "StoryScan",
    "build_index",
    "chapter_key",
    "discover_story",
    "finalize_story",
    "load_metadata",
]
