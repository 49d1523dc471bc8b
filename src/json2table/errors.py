# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Optional, Sequence


# ============================================================
# Errors
# ============================================================
class Json2TableError(ValueError):
    pass


class StructureSyntaxError(Json2TableError):
    """The structure string does not match the item grammar.

    ``fragment`` holds the offending substring so callers can point at it.
    """

    def __init__(self, message: str, fragment: str = ""):
        self.fragment = fragment
        if fragment:
            message = f"{message}: {fragment!r}"
        super().__init__(message)


class UnknownFormatError(Json2TableError):
    def __init__(self, fmt: str, supported: Sequence[str]):
        self.fmt = fmt
        super().__init__(f"unsupported format {fmt!r} (supported: {', '.join(supported)})")


class ExtractionMiss(Json2TableError):
    """A field path does not resolve against a data item. Never leaves the extractor."""

    def __init__(self, path: Sequence[str], segment: Optional[str] = None):
        self.path = tuple(path)
        self.segment = segment
        super().__init__(f"path {'.'.join(self.path)!r} missing at {segment!r}")


class UnformattableValue(Json2TableError):
    """A nested object that cannot be flattened without a group spec."""
    pass
