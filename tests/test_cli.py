from __future__ import annotations

from pathlib import Path

import pytest

import bookrenderer.cli as cli
from bookrenderer.logging_utils import build_uvicorn_log_config


@pytest.fixture(autouse=True)
def _no_logging_config(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda debug=False: build_uvicorn_log_config(debug))


def test_main_without_arguments_prints_help(capsys) -> None:
    assert cli.main([]) == 0
    assert "usage: bookrenderer" in capsys.readouterr().out


def test_index_command_lists_story_chapter_counts(content_root: Path, capsys) -> None:
    exit_code = cli.main(["index", "--root", str(content_root)])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "alpha: 2 chapter(s)"


def test_index_command_reports_empty_root(tmp_path: Path, capsys) -> None:
    assert cli.main(["index", "--root", str(tmp_path)]) == 0
    assert "No stories found" in capsys.readouterr().out


def test_index_command_missing_root_exits(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("BOOK_BASE_PATH", raising=False)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["index"])
    assert "BOOK_BASE_PATH" in str(excinfo.value)


def test_serve_writes_pid_then_runs_uvicorn(monkeypatch, content_root: Path, tmp_path: Path) -> None:
    calls: dict[str, object] = {}

    def _fake_run(app, host, port, log_config):
        calls["index"] = app.state.index
        calls["host"] = host
        calls["port"] = port
        calls["pid_written"] = pid_path.exists()

    pid_path = tmp_path / "server.pid"
    monkeypatch.setattr(cli.uvicorn, "run", _fake_run)
    monkeypatch.setenv("PORT", "9123")

    exit_code = cli.main(
        ["serve", "--root", str(content_root), "--host", "127.0.0.1", "--pid-file", str(pid_path)]
    )

    assert exit_code == 0
    assert len(calls["index"]) == 2
    assert calls["host"] == "127.0.0.1"
    assert calls["port"] == 9123
    assert calls["pid_written"] is True
    assert pid_path.read_text(encoding="utf-8").strip().isdigit()


def test_serve_pid_failure_is_fatal(monkeypatch, content_root: Path, tmp_path: Path) -> None:
    def _fail_run(*args, **kwargs):
        raise AssertionError("server must not start")

    monkeypatch.setattr(cli.uvicorn, "run", _fail_run)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["serve", "--root", str(content_root), "--pid-file", str(tmp_path / "nope" / "PID")])
    assert "PID" in str(excinfo.value)
