from __future__ import annotations

import os
from pathlib import Path


class PidFileError(RuntimeError):
    """Raised when the process identity marker cannot be written."""


def write_pid_file(path: Path, pid: int | None = None) -> Path:
    pid_value = os.getpid() if pid is None else pid
    try:
        path.write_text(f"{pid_value}\n", encoding="utf-8")
    except OSError as exc:
        raise PidFileError(f"Unable to write PID file {path}: {exc}") from exc
    return path


__all__ = ["PidFileError", "write_pid_file"]
