from __future__ import annotations

import json
from pathlib import Path

import pytest


def write_chapter(story_dir: Path, number: int, body: str, title: str = "", description: str = "") -> None:
    story_dir.mkdir(parents=True, exist_ok=True)
    (story_dir / f"{number}.html").write_text(body, encoding="utf-8")
    (story_dir / f"{number}.dat").write_text(
        json.dumps({"title": title, "description": description}),
        encoding="utf-8",
    )


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    root = tmp_path / "book"
    alpha = root / "alpha"
    write_chapter(alpha, 1, "A", title="T1", description="D1")
    write_chapter(alpha, 2, "B", title="T2", description="D2")
    return root
