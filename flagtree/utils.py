# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Logging setup for programs built on flagtree.

flagtree itself only writes to the `flagtree` logger and never configures
handlers. Host programs call `setup_logging()` once at startup to get either
Rich console output (interactive use) or JSON lines (containers, log
shippers).

The mode is chosen from, in order:
1. the `mode` argument
2. the `FLAGTREE_LOG_MODE` environment variable
3. `json` when running inside a container, `cli` otherwise
"""
from __future__ import annotations

import logging
import os
from enum import Enum

import pythonjsonlogger.json
from rich.logging import RichHandler

LOG_MODE_ENV = "FLAGTREE_LOG_MODE"
JSON_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
TEXT_LOG_FORMAT = "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
CONTAINER_MARKERS = ("docker", "kubepods", "containerd", "podman")


class LogMode(Enum):
    """Console log output format."""

    CLI = "cli"
    JSON = "json"

    @classmethod
    def _missing_(cls, value: object) -> LogMode:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid log mode: {value}. Must be one of: {valid}")


def running_in_container() -> bool:
    """Best-effort check of PID 1's cgroup for a container runtime."""
    try:
        with open("/proc/1/cgroup", "r", encoding="UTF-8") as cgroup:
            content = cgroup.read()
    except OSError:
        return False
    return any(marker in content for marker in CONTAINER_MARKERS)


def _json_formatter() -> logging.Formatter:
    return pythonjsonlogger.json.JsonFormatter(JSON_LOG_FORMAT)


def _console_handler(mode: LogMode, level: int) -> logging.Handler:
    handler: logging.Handler
    if mode is LogMode.CLI:
        handler = RichHandler(
            rich_tracebacks=True,
            show_path=False,
            markup=False,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(_json_formatter())
    handler.setLevel(level)
    return handler


def _file_handler(filename: str, level: int, as_json: bool) -> logging.Handler:
    handler = logging.FileHandler(filename, "a", "UTF-8")
    handler.setLevel(level)
    if as_json:
        handler.setFormatter(_json_formatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    mode: str | None = None,
    log_filename: str | None = None,
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
) -> None:
    """
    Replace the root logger's handlers with flagtree's console (and optional file) handlers.

    Args:
        mode (str | None): "cli" for Rich console logs or "json" for JSON lines.
        log_filename (str | None): Optional log file. No file handler is added when None.
        json_log_to_file (bool): Write the log file as JSON lines instead of plain text.
        file_log_level (int): Level for the file handler.
        console_log_level (int): Level for the console handler.

    Raises:
        ValueError: If `mode` (or `FLAGTREE_LOG_MODE`) names an unknown mode.
    """
    if not mode:
        mode = os.getenv(LOG_MODE_ENV) or ("json" if running_in_container() else "cli")
    log_mode = LogMode(mode)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()
    root.addHandler(_console_handler(log_mode, console_log_level))
    if log_filename:
        root.addHandler(_file_handler(log_filename, file_log_level, json_log_to_file))

    logging.getLogger("flagtree").debug("Logging initialized in '%s' mode.", log_mode.value)
