from __future__ import annotations

from typing import List, Sequence

from .errors import StructureSyntaxError


def split_path(path: str) -> List[str]:
    """Split a dotted field path into segments.

    ``\\.`` keeps a literal dot inside a segment (``gpt-3\\.5``), ``\\\\`` a
    backslash. Empty segments (``a..b``, ``.a``, ``a.``) are rejected.
    """
    segments: List[str] = []
    buf: List[str] = []
    chars = iter(path)
    for ch in chars:
        if ch == "\\":
            # a trailing backslash stays literal
            buf.append(next(chars, "\\"))
        elif ch == ".":
            segments.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
    segments.append("".join(buf))

    if any(not s.strip() for s in segments):
        raise StructureSyntaxError("empty path segment", path)
    return segments


def _escape(segment: str) -> str:
    return segment.replace("\\", "\\\\").replace(".", "\\.")


def join_path(segments: Sequence[str]) -> str:
    """Inverse of ``split_path``."""
    return ".".join(_escape(s) for s in segments)
