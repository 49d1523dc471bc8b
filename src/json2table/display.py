"""Display-width utilities: escape stripping, measuring, padding, wrapping.

Every width decision in the table layout goes through these helpers so that
ANSI styling sequences never count towards a column width. Terminal columns
are measured with ``wcwidth`` (wide CJK / emoji take two columns).
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

import wcwidth as _wcwidth

from .styles import RESET

# CSI (ESC[ ... final byte, or the single-byte 0x9B introducer) and OSC 8 hyperlinks
_ESCAPE_PATTERN = (
    r"\x1b\[[0-9;?]*[A-Za-z]"
    r"|\x9b[0-9;?]*[A-Za-z]"
    r"|\x1b\]8;;[^\x07]*\x07"
)
_ESCAPE_RE = re.compile(_ESCAPE_PATTERN)
_SPLIT_RE = re.compile(f"({_ESCAPE_PATTERN})")
_TRAILING_RE = re.compile(rf"(?:\s|{_ESCAPE_PATTERN})+$")
_SPACE_RE = re.compile(r"\s")
_SGR_RE = re.compile(r"\x1b\[([0-9;]*)m")

ELLIPSIS = "..."


def strip_ansi(text: str) -> str:
    return _ESCAPE_RE.sub("", text)


# ============================================================
# SGR state
# ============================================================
class SgrState:
    """Active SGR attributes after scanning styled text.

    Lets a cut piece of styled text be closed with a reset and the next piece
    be reopened with the same attributes, so styling never bleeds into
    neighbouring columns or lines.
    """

    # attribute code -> the code that switches it off
    _OFF = {1: 22, 2: 22, 3: 23, 4: 24, 5: 25, 7: 27, 8: 28, 9: 29}

    def __init__(self) -> None:
        self._attrs: Dict[str, str] = {}

    @classmethod
    def after(cls, text: str) -> "SgrState":
        state = cls()
        state.scan(text)
        return state

    @property
    def active(self) -> bool:
        return bool(self._attrs)

    def codes(self) -> str:
        """Escape sequences that reopen the current attributes."""
        return "".join(self._attrs.values())

    def scan(self, text: str) -> None:
        for m in _SGR_RE.finditer(text):
            self._apply(m.group(1))

    def _apply(self, raw: str) -> None:
        params = [int(p) if p else 0 for p in raw.split(";")] if raw else [0]
        i = 0
        while i < len(params):
            code = params[i]
            if code == 0:
                self._attrs.clear()
            elif code in self._OFF:
                self._attrs[f"attr{code}"] = f"\x1b[{code}m"
            elif 22 <= code <= 29:
                for on, off in self._OFF.items():
                    if off == code:
                        self._attrs.pop(f"attr{on}", None)
            elif 30 <= code <= 37 or 90 <= code <= 97:
                self._attrs["fg"] = f"\x1b[{code}m"
            elif 40 <= code <= 47 or 100 <= code <= 107:
                self._attrs["bg"] = f"\x1b[{code}m"
            elif code == 39:
                self._attrs.pop("fg", None)
            elif code == 49:
                self._attrs.pop("bg", None)
            elif code in (38, 48) and i + 1 < len(params):
                # 38;5;N (256 colours) or 38;2;R;G;B
                size = 3 if params[i + 1] == 5 else 5 if params[i + 1] == 2 else 2
                extended = ";".join(str(p) for p in params[i : i + size])
                self._attrs["fg" if code == 38 else "bg"] = f"\x1b[{extended}m"
                i += size - 1
            i += 1


def balance_lines(lines: List[str]) -> List[str]:
    """Close every line whose styling is still open and reopen it on the next one."""
    state = SgrState()
    out: List[str] = []
    for line in lines:
        if not line:
            out.append(line)
            continue
        reopen = state.codes()
        state.scan(line)
        out.append(reopen + line + (RESET if state.active else ""))
    return out


def split_lines(text: str) -> List[str]:
    """``text.split("\\n")`` with styling balanced per line."""
    return balance_lines(text.split("\n"))


def _char_width(ch: str) -> int:
    w = _wcwidth.wcwidth(ch)
    # non-printable characters report -1
    return w if w > 0 else 0


def _line_width(line: str) -> int:
    stripped = strip_ansi(line)
    if all(" " <= ch <= "~" for ch in stripped):
        return len(stripped)
    return sum(_char_width(ch) for ch in stripped)


def display_length(text: str) -> int:
    """Visible width of *text*; multi-line text measures by its widest line."""
    if not text:
        return 0
    if "\n" in text:
        return max(_line_width(line) for line in text.split("\n"))
    return _line_width(text)


class DisplayMeter:
    """Memoized ``display_length`` scoped to one render call.

    Create one per render and drop it afterwards; nothing is shared between
    renders.
    """

    def __init__(self) -> None:
        self._cache: Dict[str, int] = {}

    def __call__(self, text: str) -> int:
        cached = self._cache.get(text)
        if cached is None:
            cached = self._cache[text] = display_length(text)
        return cached

    def __len__(self) -> int:
        return len(self._cache)


def _tokens(text: str) -> List[Tuple[str, int]]:
    """Split *text* into (piece, width) pairs; escape sequences have width 0."""
    out: List[Tuple[str, int]] = []
    for part in _SPLIT_RE.split(text):
        if not part:
            continue
        if _ESCAPE_RE.fullmatch(part):
            out.append((part, 0))
        else:
            out.extend((ch, _char_width(ch)) for ch in part)
    return out


def slice_to_width(text: str, width: int) -> Tuple[str, str]:
    """Cut *text* after at most *width* visible columns.

    Escape sequences are never split. At least one visible character is taken
    when *width* > 0, so callers looping on the tail always make progress.
    """
    head: List[str] = []
    used = 0
    taken_visible = False
    tokens = _tokens(text)
    i = 0
    while i < len(tokens):
        piece, w = tokens[i]
        if w == 0:
            head.append(piece)
            i += 1
            continue
        if used + w > width and (taken_visible or width <= 0):
            break
        head.append(piece)
        used += w
        taken_visible = True
        i += 1
    return "".join(head), "".join(piece for piece, _ in tokens[i:])


def pad(
    text: str,
    width: int,
    align: str = "left",
    trailing: bool = True,
    meter: Optional[DisplayMeter] = None,
) -> str:
    """Pad *text* to *width* display columns.

    With ``trailing=False`` (rightmost column) nothing is appended after the
    text; right / center alignment still pad on the left.
    """
    measure = meter or display_length
    missing = max(0, width - measure(text))
    if not missing:
        return text
    if align == "right":
        return " " * missing + text
    if align == "center":
        left = missing // 2
        right = missing - left
        return " " * left + text + (" " * right if trailing else "")
    return text + (" " * missing if trailing else "")


def truncate(text: str, width: int) -> str:
    """Hard-cut *text* to exactly *width* columns, ending in ``...``."""
    if display_length(text) <= width:
        return text
    if width <= len(ELLIPSIS):
        return "." * max(width, 0)
    keep = width - len(ELLIPSIS)
    head, _ = slice_to_width(text, keep)
    short = keep - display_length(head)
    if SgrState.after(head).active:
        head += RESET
    return head + " " * short + ELLIPSIS


def _wrap_line(line: str, width: int) -> List[str]:
    out: List[str] = []
    rest = line
    while display_length(rest) > width:
        head, tail = slice_to_width(rest, width)
        if tail[:1].isspace():
            out.append(rstrip_visible(head))
            rest = tail.lstrip()
            continue
        cut = None
        for m in _SPACE_RE.finditer(head):
            cut = m.start()
        if cut is not None and head[:cut].strip():
            out.append(rstrip_visible(head[:cut]))
            rest = (head[cut:] + tail).lstrip()
        else:
            # no whitespace within the limit
            out.append(head)
            rest = tail
    if rest or not out:
        out.append(rest)
    return out


def wrap(text: str, width: int) -> List[str]:
    """Soft-wrap *text* into lines of at most *width* display columns.

    Breaks at the last whitespace that fits; a word longer than *width* is
    broken at the character limit. Embedded newlines are kept as breaks.
    """
    if width <= 0:
        return split_lines(text)
    lines: List[str] = []
    for paragraph in text.split("\n"):
        lines.extend(_wrap_line(paragraph, width))
    return balance_lines(lines)


def rstrip_visible(line: str) -> str:
    """Strip trailing whitespace, keeping any trailing escape sequences intact."""
    m = _TRAILING_RE.search(line)
    if not m:
        return line
    kept = "".join(_ESCAPE_RE.findall(m.group(0)))
    return line[: m.start()] + kept
