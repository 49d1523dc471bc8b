# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, Optional, Sequence, Union

from .config import DEFAULT_RENDER_CONFIG, RenderConfig
from .display import DisplayMeter
from .renderers import AsciiRenderer, get_renderer
from .structure import FieldSpec, parse_structure
from .table import TableBuilder, TableModel

logger = logging.getLogger(__name__)


class TableFormatter:
    """
    Render JSON-like data as a table described by a structure string.

    The structure is parsed once (syntax errors surface here, before any data
    is touched); each ``render`` call measures, builds and renders from scratch
    with its own display-length memo.

    >>> TableFormatter("name,age", RenderConfig(fmt="md")).render([{"name": "Al", "age": 30}])
    '| name | age |\\n| --- | --- |\\n| Al | 30 |'
    """

    def __init__(
        self,
        structure: Union[str, Sequence[FieldSpec], None],
        cfg: Optional[RenderConfig] = None,
    ):
        self.cfg = cfg or DEFAULT_RENDER_CONFIG
        if structure is None or isinstance(structure, str):
            self.fields: List[FieldSpec] = parse_structure(structure)
        else:
            self.fields = list(structure)
        # fail on an unknown format before any data arrives
        get_renderer(self.cfg.fmt, self.cfg)

    def build(self, data: Any, meter: Optional[DisplayMeter] = None) -> TableModel:
        return TableBuilder(self.fields, self.cfg, meter).build(data)

    def render(self, data: Any) -> str:
        meter = DisplayMeter()
        table = self.build(data, meter)
        renderer = get_renderer(self.cfg.fmt, self.cfg)
        if isinstance(renderer, AsciiRenderer):
            renderer.meter = meter
        text = renderer.render(table)
        logger.debug(
            "rendered %d rows x %d columns as %s (%d measured strings)",
            len(table.rows), table.columns, self.cfg.fmt, len(meter),
        )
        return text


def render_table(
    data: Any,
    structure: Union[str, Sequence[FieldSpec], None],
    fmt: Optional[str] = None,
    cfg: Optional[RenderConfig] = None,
) -> str:
    """One-shot helper: ``render_table(data, "name,age", fmt="md")``."""
    cfg = cfg or DEFAULT_RENDER_CONFIG
    if fmt is not None:
        cfg = replace(cfg, fmt=fmt)
    return TableFormatter(structure, cfg).render(data)
