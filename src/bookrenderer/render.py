from __future__ import annotations

import html

from .indexer import ChapterRecord
from .store import ContentStore

TEMPLATE_FILENAME = "index.html"

PAGE_TITLE_TOKEN = "XXX_PAGE_TITLE_XXX"
URL_TOKEN = "XXX_URL_XXX"
TITLE_TOKEN = "XXX_TITLE_XXX"
DESCRIPTION_TOKEN = "XXX_DESCRIPTION_XXX"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class TemplateError(RuntimeError):
    """Raised when the page template cannot be loaded."""


def load_template(store: ContentStore) -> str:
    path = store.path(TEMPLATE_FILENAME)
    try:
        return store.read_text(path)
    except OSError as exc:
        raise TemplateError(f"Template unavailable: {exc}") from exc


def chapter_payload(record: ChapterRecord) -> dict[str, object]:
    return record.as_payload()


def _substitute(template: str, values: dict[str, str]) -> str:
    rendered = template
    for token, value in values.items():
        rendered = rendered.replace(token, html.escape(value, quote=True))
    return rendered


def render_start_page(template: str, story: str) -> str:
    return _substitute(template, {PAGE_TITLE_TOKEN: story})


def render_chapter_page(template: str, story: str, url: str, record: ChapterRecord) -> str:
    """Fill the template's title, canonical URL and chapter metadata placeholders."""
    return _substitute(
        template,
        {
            PAGE_TITLE_TOKEN: story,
            URL_TOKEN: url,
            TITLE_TOKEN: record.title,
            DESCRIPTION_TOKEN: record.description,
        },
    )


__all__ = [
    "DESCRIPTION_TOKEN",
    "NO_CACHE_HEADERS",
    "PAGE_TITLE_TOKEN",
    "TEMPLATE_FILENAME",
    "TITLE_TOKEN",
    "TemplateError",
    "URL_TOKEN",
    "chapter_payload",
    "load_template",
    "render_chapter_page",
    "render_start_page",
]
