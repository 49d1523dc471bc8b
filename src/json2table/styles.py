# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from typing import Dict, Iterable, List

logger = logging.getLogger(__name__)

RESET = "\x1b[0m"

# SGR parameters by style name
STYLE_CODES: Dict[str, int] = {
    "bold": 1,
    "dim": 2,
    "italic": 3,
    "underline": 4,
    "inverse": 7,
    "strikethrough": 9,
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
    "gray": 90,
    "grey": 90,
    "bright_red": 91,
    "bright_green": 92,
    "bright_yellow": 93,
    "bright_blue": 94,
    "bright_magenta": 95,
    "bright_cyan": 96,
    "bright_white": 97,
    "bg_black": 40,
    "bg_red": 41,
    "bg_green": 42,
    "bg_yellow": 43,
    "bg_blue": 44,
    "bg_magenta": 45,
    "bg_cyan": 46,
    "bg_white": 47,
}


def style_codes(styles: Iterable[str]) -> List[int]:
    codes: List[int] = []
    for name in styles:
        code = STYLE_CODES.get(name.strip().lower())
        if code is None:
            logger.debug("ignoring unknown style %r", name)
            continue
        codes.append(code)
    return codes


def stylize(text: str, styles: Iterable[str]) -> str:
    """Wrap *text* in one SGR sequence for *styles*; unknown names are ignored."""
    if not text:
        return text
    codes = style_codes(styles)
    if not codes:
        return text
    return f"\x1b[{';'.join(str(c) for c in codes)}m{text}{RESET}"
