# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Type, runtime_checkable

from .config import DEFAULT_RENDER_CONFIG, RenderConfig
from .display import DisplayMeter, pad, rstrip_visible, strip_ansi
from .errors import UnknownFormatError
from .styles import stylize
from .table import Cell, TableModel, TableRow
from .widths import GUTTER


@runtime_checkable
class TableRendererBackend(Protocol):
    """Turns a populated TableModel into final text. No data interpretation."""
    def render(self, table: TableModel) -> str: ...


# ============================================================
# ASCII
# ============================================================
@dataclass
class AsciiRenderer:
    cfg: RenderConfig = DEFAULT_RENDER_CONFIG
    meter: DisplayMeter = field(default_factory=DisplayMeter)

    def render(self, table: TableModel) -> str:
        out: List[str] = []
        for row in table.rows:
            out.extend(self._row_lines(row))
        return "\n".join(out)

    def _row_lines(self, row: TableRow) -> List[str]:
        lines: List[str] = []
        for i in range(row.height):
            parts = [self._cell_text(cell, i, row.header) for cell in row.cells]
            lines.append(rstrip_visible((" " * GUTTER).join(parts)))
        return lines

    def _cell_text(self, cell: Cell, index: int, header: bool) -> str:
        text = cell.lines[index] if index < cell.height else ""
        styles = self.cfg.header_style if header else cell.style
        if self.cfg.color and styles and text:
            text = stylize(text, styles)
        return pad(text, cell.width, cell.align, trailing=not cell.last, meter=self.meter)


# ============================================================
# Markdown
# ============================================================
@dataclass
class MarkdownRenderer:
    cfg: RenderConfig = DEFAULT_RENDER_CONFIG

    def render(self, table: TableModel) -> str:
        out: List[str] = []
        separator_done = False
        for row in table.rows:
            out.append(self._row_line(row))
            if row.header and not separator_done:
                out.append("| " + " | ".join(["---"] * table.columns) + " |")
                separator_done = True
        return "\n".join(out)

    def _row_line(self, row: TableRow) -> str:
        values: List[str] = []
        for cell in row.cells:
            values.append(_md_escape(" ".join(line for line in cell.lines if line.strip())))
            values.extend([""] * (cell.span - 1))
        return "| " + " | ".join(values) + " |"


def _md_escape(text: str) -> str:
    text = strip_ansi(text).replace("\r", " ").replace("\n", " ")
    return " ".join(text.split()).replace("|", "\\|")


# ============================================================
# Selection
# ============================================================
_RENDERERS: Dict[str, Type] = {
    "ascii": AsciiRenderer,
    "md": MarkdownRenderer,
    "markdown": MarkdownRenderer,
}


def get_renderer(fmt: Optional[str] = None, cfg: RenderConfig = DEFAULT_RENDER_CONFIG) -> TableRendererBackend:
    name = (fmt or cfg.fmt or "ascii").strip().lower()
    try:
        renderer_cls = _RENDERERS[name]
    except KeyError:
        raise UnknownFormatError(name, sorted(_RENDERERS)) from None
    return renderer_cls(cfg)
