"""Editor configuration, read from the environment and CLI flags."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class EditorConfig:
    """Runtime settings.

    Environment variables provide the defaults; the CLI overrides them.
    """

    filename: str | None = None
    log_file: str | None = field(default_factory=lambda: os.environ.get("KILO_LOG_FILE") or None)
    log_level: str = field(default_factory=lambda: os.environ.get("KILO_LOG_LEVEL", "warning"))
    wasd: bool = field(default_factory=lambda: os.environ.get("KILO_WASD") == "1")
    write_log: str = field(default_factory=lambda: os.environ.get("KILO_WRITE_LOG", ""))
    # VTIME, in tenths of a second
    read_timeout_ds: int = 1
