# -*- coding: utf-8 -*-
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    low = raw.strip().lower()
    if low in {"1", "true", "yes", "on"}:
        return True
    if low in {"0", "false", "no", "off"}:
        return False
    return default


# ============================================================
# Config
# ============================================================
@dataclass(frozen=True)
class RenderConfig:
    """Options for one render call.

    - fmt: "ascii" (fixed width, optionally ANSI styled) | "md" (Markdown pipe table)
    - color: emit ANSI styling in ascii output (header style, field colors)
    - line_numbers: prepend a "#" column numbering the dataset items
    - show_invalid: render non-object items as "<invalid line>" instead of skipping them
    """

    fmt: str = "ascii"
    color: bool = True
    header_style: Tuple[str, ...] = ("bold", "yellow")
    include_headers: bool = True
    line_numbers: bool = False
    show_invalid: bool = False
    invalid_style: Tuple[str, ...] = ("red",)

    @staticmethod
    def from_env() -> "RenderConfig":
        fmt = os.getenv("JSON2TABLE_FORMAT", "ascii").strip().lower() or "ascii"
        color = _env_flag("JSON2TABLE_COLOR", True)
        # https://no-color.org
        if os.getenv("NO_COLOR"):
            color = False
        return RenderConfig(
            fmt=fmt,
            color=color,
            line_numbers=_env_flag("JSON2TABLE_LINE_NUMBERS", False),
            show_invalid=_env_flag("JSON2TABLE_SHOW_INVALID", False),
        )


DEFAULT_RENDER_CONFIG = RenderConfig()
