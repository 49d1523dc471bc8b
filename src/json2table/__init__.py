import logging

from .config import RenderConfig, DEFAULT_RENDER_CONFIG
from .errors import (
    Json2TableError,
    StructureSyntaxError,
    UnknownFormatError,
    ExtractionMiss,
    UnformattableValue,
)
from .structure import FieldSpec, FieldProperties, StructureParser, parse_structure, format_structure
from .content import ContentKind, classify, plain_text
from .display import DisplayMeter, display_length, strip_ansi
from .widths import ColumnWidths, WidthCalculator, compute_widths
from .expansion import RowExpander, expand_item
from .formatter import ContentFormatter
from .table import Cell, TableRow, TableModel, HeaderBuilder, TableBuilder
from .renderers import TableRendererBackend, AsciiRenderer, MarkdownRenderer, get_renderer
from .table_formatter import TableFormatter, render_table

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "RenderConfig",
    "DEFAULT_RENDER_CONFIG",
    "Json2TableError",
    "StructureSyntaxError",
    "UnknownFormatError",
    "ExtractionMiss",
    "UnformattableValue",
    "FieldSpec",
    "FieldProperties",
    "StructureParser",
    "parse_structure",
    "format_structure",
    "ContentKind",
    "classify",
    "plain_text",
    "DisplayMeter",
    "display_length",
    "strip_ansi",
    "ColumnWidths",
    "WidthCalculator",
    "compute_widths",
    "RowExpander",
    "expand_item",
    "ContentFormatter",
    "Cell",
    "TableRow",
    "TableModel",
    "HeaderBuilder",
    "TableBuilder",
    "TableRendererBackend",
    "AsciiRenderer",
    "MarkdownRenderer",
    "get_renderer",
    "TableFormatter",
    "render_table",
]
