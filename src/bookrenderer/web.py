from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from .config import WebConfig
from .indexer import ChapterIndex, ChapterRecord, build_index
from .render import (
    NO_CACHE_HEADERS,
    TemplateError,
    chapter_payload,
    load_template,
    render_chapter_page,
    render_start_page,
)
from .resolver import ChapterNotFoundError, InvalidPathError, resolve
from .static import SHARED_STATIC_DIR, StaticAsset, load_static
from .store import ContentStore

logger = logging.getLogger(__name__)

ROOT_FILES = ("service-worker.js", "index.html")


def _asset_response(asset: StaticAsset) -> Response:
    return Response(content=asset.data, media_type=asset.media_type, headers=asset.headers)


def _serve_static(store: ContentStore, *parts: str) -> Response:
    try:
        asset = load_static(store, *parts)
    except InvalidPathError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (FileNotFoundError, IsADirectoryError) as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except OSError as exc:
        logger.error("Failed to read %s: %s", "/".join(parts), exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return _asset_response(asset)


def _load_template_or_500(store: ContentStore) -> str:
    try:
        return load_template(store)
    except TemplateError as exc:
        logger.error("%s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _resolve_or_error(index: ChapterIndex, name: str, chapter: str) -> ChapterRecord:
    try:
        return resolve(index, name, chapter)
    except InvalidPathError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ChapterNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def create_app(config: WebConfig, index: ChapterIndex | None = None) -> FastAPI:
    root = config.root.expanduser().resolve()
    if not root.exists():
        raise FileNotFoundError(f"Content root not found: {root}")
    store = ContentStore(root)
    if index is None:
        index = build_index(store)

    app = FastAPI(title="bookrenderer")
    app.state.config = config
    app.state.root = root
    app.state.store = store
    app.state.index = index

    @app.get("/read/{name}/", response_class=HTMLResponse)
    def read_start(name: str) -> HTMLResponse:
        template = _load_template_or_500(store)
        return HTMLResponse(render_start_page(template, name))

    @app.get("/read/{name}/seo/{chapter}", response_class=HTMLResponse)
    def read_chapter_page(name: str, chapter: str, request: Request) -> HTMLResponse:
        record = _resolve_or_error(index, name, chapter)
        template = _load_template_or_500(store)
        return HTMLResponse(render_chapter_page(template, name, request.url.path, record))

    @app.get("/read/{name}/chapter/{chapter}/")
    def read_chapter(name: str, chapter: str) -> JSONResponse:
        record = _resolve_or_error(index, name, chapter)
        return JSONResponse(chapter_payload(record), headers=dict(NO_CACHE_HEADERS))

    @app.get("/read/{name}/static/{path:path}")
    def story_static(name: str, path: str) -> Response:
        return _serve_static(store, name, path)

    @app.get("/static/{path:path}")
    def shared_static(path: str) -> Response:
        return _serve_static(store, SHARED_STATIC_DIR, path)

    def _root_file_endpoint(filename: str):
        def endpoint() -> Response:
            return _serve_static(store, filename)

        endpoint.__name__ = "root_" + filename.replace("-", "_").replace(".", "_")
        return endpoint

    for filename in ROOT_FILES:
        app.add_api_route(f"/{filename}", _root_file_endpoint(filename), methods=["GET"])

    return app


__all__ = ["create_app"]
