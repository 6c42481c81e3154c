from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

ROOT_ENV = "BOOK_BASE_PATH"
PORT_ENV = "PORT"
HOST_ENV = "BOOK_HOST"
PID_FILE_ENV = "BOOK_PID_FILE"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_PID_FILE = "PID"


class ConfigError(ValueError):
    """Raised when the server configuration is missing or malformed."""


@dataclass(slots=True)
class WebConfig:
    root: Path
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    pid_file: Path = Path(DEFAULT_PID_FILE)


def _parse_port(value: str | int) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Port must be an integer: {value!r}") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"Port out of range: {port}")
    return port


def load_config(
    env: Mapping[str, str] | None = None,
    *,
    root: str | None = None,
    host: str | None = None,
    port: int | None = None,
    pid_file: str | None = None,
) -> WebConfig:
    """Read settings once from the environment; explicit arguments take precedence."""
    if env is None:
        env = os.environ
    root_value = root or env.get(ROOT_ENV)
    if not root_value:
        raise ConfigError(f"Content root not set; pass --root or export {ROOT_ENV}.")
    root_path = Path(root_value).expanduser().resolve()
    if not root_path.is_dir():
        raise ConfigError(f"Content root not found: {root_path}")
    port_value: str | int = port if port is not None else env.get(PORT_ENV, DEFAULT_PORT)
    return WebConfig(
        root=root_path,
        host=host or env.get(HOST_ENV, DEFAULT_HOST),
        port=_parse_port(port_value),
        pid_file=Path(pid_file or env.get(PID_FILE_ENV, DEFAULT_PID_FILE)),
    )


__all__ = [
    "ConfigError",
    "DEFAULT_HOST",
    "DEFAULT_PID_FILE",
    "DEFAULT_PORT",
    "HOST_ENV",
    "PID_FILE_ENV",
    "PORT_ENV",
    "ROOT_ENV",
    "WebConfig",
    "load_config",
]
