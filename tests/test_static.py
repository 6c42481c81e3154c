from __future__ import annotations

from pathlib import Path

import pytest

from bookrenderer.resolver import InvalidPathError
from bookrenderer.static import content_headers, load_static
from bookrenderer.store import ContentStore

NO_CACHE = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@pytest.mark.parametrize(
    ("name", "media_type", "no_cache"),
    [
        ("photo.jpg", "image/jpeg", False),
        ("photo.jpeg", "image/jpeg", False),
        ("logo.png", "image/png", False),
        ("page.html", "text/html", True),
        ("app.js", "text/javascript", True),
        ("site.css", "text/css", False),
        ("data.json", "application/json", False),
    ],
)
def test_content_headers_by_suffix(name: str, media_type: str, no_cache: bool) -> None:
    actual_type, headers = content_headers(name)

    assert actual_type == media_type
    assert headers == (NO_CACHE if no_cache else {})


def test_unknown_suffix_has_no_content_type() -> None:
    assert content_headers("font.woff2") == (None, {})
    assert content_headers("README") == (None, {})


def test_load_static_reads_shared_asset(tmp_path: Path) -> None:
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "app.js").write_text("console.log(1);", encoding="utf-8")

    asset = load_static(ContentStore(tmp_path), "static", "app.js")

    assert asset.data == b"console.log(1);"
    assert asset.media_type == "text/javascript"
    assert asset.headers == NO_CACHE


def test_load_static_rejects_traversal_without_touching_disk(tmp_path: Path) -> None:
    class _ExplodingStore(ContentStore):
        def exists(self, path: Path) -> bool:
            raise AssertionError("storage must not be consulted")

    with pytest.raises(InvalidPathError):
        load_static(_ExplodingStore(tmp_path), "static", "../secret.txt")


def test_load_static_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_static(ContentStore(tmp_path), "static", "missing.css")


def test_load_static_directory(tmp_path: Path) -> None:
    (tmp_path / "static" / "images").mkdir(parents=True)

    with pytest.raises(IsADirectoryError):
        load_static(ContentStore(tmp_path), "static", "images")


def test_load_static_strips_leading_slash(tmp_path: Path) -> None:
    story_dir = tmp_path / "alpha" / "img"
    story_dir.mkdir(parents=True)
    (story_dir / "cover.png").write_bytes(b"\x89PNG")

    asset = load_static(ContentStore(tmp_path), "alpha", "/img/cover.png")

    assert asset.path == story_dir / "cover.png"
    assert asset.media_type == "image/png"
    assert asset.headers == {}
