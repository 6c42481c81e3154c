from __future__ import annotations

import argparse
import sys
from importlib import metadata
from pathlib import Path

import tomllib
import uvicorn

from .config import ConfigError, WebConfig, load_config
from .indexer import build_index
from .logging_utils import configure_logging
from .pidfile import PidFileError, write_pid_file
from .web import create_app


def _read_local_version() -> str | None:
    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    except IndexError:  # pragma: no cover
        return None
    try:
        with pyproject_path.open("rb") as fh:
            data = tomllib.load(fh)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return None
    return data.get("project", {}).get("version")


try:
    __version__ = metadata.version("bookrenderer")
except metadata.PackageNotFoundError:
    __version__ = _read_local_version() or "0.0.0+unknown"


def _add_version_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"bookrenderer {__version__}",
    )


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        help="Content root with one subdirectory per story (default: $BOOK_BASE_PATH).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every story's end-of-discovery, not only failures.",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="bookrenderer",
        description="Serve numbered story chapters and their assets over HTTP.",
    )
    _add_version_flag(ap)
    ap.add_argument(
        "command",
        nargs="?",
        choices=("serve", "index"),
        help="Subcommand to run.",
    )
    return ap


def build_serve_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="bookrenderer serve",
        description="Index the content root, then serve chapters, pages and static assets.",
    )
    _add_version_flag(ap)
    _add_common_flags(ap)
    ap.add_argument(
        "--host",
        help="Host interface for the web server (default: $BOOK_HOST or 0.0.0.0).",
    )
    ap.add_argument(
        "--port",
        type=int,
        help="Port for the web server (default: $PORT or 8080).",
    )
    ap.add_argument(
        "--pid-file",
        help="Where to write the process id (default: $BOOK_PID_FILE or ./PID).",
    )
    return ap


def build_index_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="bookrenderer index",
        description="Scan the content root and list the chapters each story exposes.",
    )
    _add_version_flag(ap)
    _add_common_flags(ap)
    return ap


def _load_config_or_exit(args: argparse.Namespace) -> WebConfig:
    try:
        return load_config(
            root=args.root,
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            pid_file=getattr(args, "pid_file", None),
        )
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc


def _run_serve(args: argparse.Namespace) -> int:
    config = _load_config_or_exit(args)
    log_config = configure_logging(debug=args.debug)
    app = create_app(config)
    try:
        write_pid_file(config.pid_file)
    except PidFileError as exc:
        raise SystemExit(str(exc)) from exc
    print(f"Serving bookrenderer from {config.root}")
    print(f"Indexed {len(app.state.index)} chapter(s) in {len(app.state.index.stories())} story(ies)")
    print("Press Ctrl+C to stop.\n")
    uvicorn.run(app, host=config.host, port=config.port, log_config=log_config)
    return 0


def _run_index(args: argparse.Namespace) -> int:
    config = _load_config_or_exit(args)
    configure_logging(debug=args.debug)
    index = build_index(config.root)
    stories = index.stories()
    if not stories:
        print(f"No stories found under {config.root}")
        return 0
    for story in stories:
        chapters = index.chapters(story)
        print(f"{story}: {len(chapters)} chapter(s)")
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] == "serve":
        serve_args = build_serve_parser().parse_args(argv[1:])
        return _run_serve(serve_args)
    if argv and argv[0] == "index":
        index_args = build_index_parser().parse_args(argv[1:])
        return _run_index(index_args)

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0
    parser.parse_args(argv)
    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
