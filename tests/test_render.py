from __future__ import annotations

import logging

import pytest

from json2table import (
    MarkdownRenderer,
    AsciiRenderer,
    RenderConfig,
    TableFormatter,
    TableRendererBackend,
    UnknownFormatError,
    get_renderer,
    render_table,
    strip_ansi,
)

PEOPLE = [{"name": "Al", "age": 30}, {"name": "B", "age": 7}]
PLAIN = RenderConfig(color=False)


def test_markdown_exact_output():
    out = render_table(PEOPLE, "name,age", fmt="md")
    assert out == "| name | age |\n| --- | --- |\n| Al | 30 |\n| B | 7 |"


def test_ascii_alignment():
    out = render_table(PEOPLE, "name,age", cfg=PLAIN)
    assert out == "name  age\nAl     30\nB      7"


def test_ascii_header_is_styled_and_lines_have_no_trailing_spaces():
    out = render_table(PEOPLE, "name,age")
    header = out.split("\n")[0]
    assert "\x1b[1;33mname\x1b[0m" in header
    assert strip_ansi(out) == render_table(PEOPLE, "name,age", cfg=PLAIN)
    for line in strip_ansi(out).split("\n"):
        assert line == line.rstrip()


def test_field_color_on_data_cells():
    out = render_table(PEOPLE, "name{color:red},age")
    assert "\x1b[31mAl\x1b[0m" in out
    assert strip_ansi(out) == render_table(PEOPLE, "name,age", cfg=PLAIN)


def test_grouped_array_rows():
    data = [{"id": 1, "tags": [{"t": "a"}, {"t": "bb"}]}]
    out = render_table(data, "id,tags[t]", cfg=PLAIN)
    assert out == "id  tags\n    t\n 1  a\n    bb"


def test_grouped_object_columns():
    data = [{"p": {"a": "x", "b": "yy"}}]
    out = render_table(data, "p[a,b]", cfg=PLAIN)
    assert out == "p\na  b\nx  yy"


def test_grouped_array_inside_object_group():
    data = [{"id": 1, "o": {"k": "K", "l": [{"x": "a"}, {"x": "bb"}]}, "z": 9}]
    out = render_table(data, "id,o[k,l[x]],z", cfg=PLAIN)
    assert out.split("\n") == [
        "id  o      z",
        "    k  l",
        "       x",
        " 1  K  a   9",
        "       bb",
    ]


def test_missing_children_of_nested_group():
    data = [{"id": 2, "o": {"l": [{"x": "a"}]}, "z": 3}, {"id": 3, "z": 4}]
    out = render_table(data, "id,o[k,l[x]],z", cfg=PLAIN)
    assert out.split("\n")[3:] == [" 2     a  3", " 3        4"]


def test_markdown_group_values_sit_under_leaf_headers():
    data = [{"id": 1, "o": {"k": "K", "l": [{"x": "a"}, {"x": "bb"}]}, "z": 9}]
    out = render_table(data, "id,o[k,l[x]],z", fmt="md")
    assert out.split("\n") == [
        "| id | o |  | z |",
        "| --- | --- | --- | --- |",
        "|  | k | l |  |",
        "|  |  | x |  |",
        "| 1 | K | a bb | 9 |",
    ]


def test_alt_path_column():
    data = [{"lastBook": {"title": "Dune", "year": 1965}}]
    out = render_table(data, "lastBook:Last Book(title)", cfg=PLAIN)
    assert out == "Last Book\nDune"


def test_missing_values_render_empty():
    data = [{"name": "Al"}, {"age": 4}]
    out = render_table(data, "name,age", cfg=PLAIN)
    assert out == "name  age\nAl\n        4"


def test_nested_object_without_group_is_placeholder():
    out = render_table([{"a": {"x": {"y": 1}}}], "a", cfg=PLAIN)
    assert out == "a\n[object]"


def test_wide_characters_align():
    out = render_table([{"w": "日本", "n": 1}], "w,n", cfg=PLAIN)
    assert out == "w     n\n日本  1"


def test_wrapped_cell_spans_lines():
    out = render_table([{"d": "hello world foo", "n": 1}], "d{width:5},n", cfg=PLAIN)
    assert out == "d      n\nhello  1\nworld\nfoo"


def test_styled_value_does_not_bleed_into_next_column():
    out = render_table([{"d": "\x1b[31mhello world\x1b[0m", "n": 1}], "d{width:5},n", cfg=PLAIN)
    assert out == "d      n\n\x1b[31mhello\x1b[0m  1\n\x1b[31mworld\x1b[0m"


def test_styled_value_truncated_keeps_reset():
    out = render_table([{"d": "\x1b[32mabcdefghij\x1b[0m", "n": 1}], "d{width:6;truncate:true},n", cfg=PLAIN)
    assert out.split("\n")[1] == "\x1b[32mabc\x1b[0m...  1"


def test_non_ascii_digit_segment_renders_empty():
    out = render_table([{"a": [1, 2], "b": "x"}], "a.²,b", cfg=PLAIN)
    assert out == "²  b\n   x"
    assert render_table([{"a": [1, 2]}], "a.1", cfg=PLAIN) == "1\n2"


def test_single_object_is_one_row():
    out = render_table({"name": "Al", "age": 30}, "name,age", fmt="md")
    assert out == "| name | age |\n| --- | --- |\n| Al | 30 |"


def test_empty_structure_renders_nothing():
    assert render_table(PEOPLE, "", cfg=PLAIN) == ""


def test_without_headers():
    cfg = RenderConfig(color=False, include_headers=False)
    assert render_table(PEOPLE, "name,age", cfg=cfg) == "Al     30\nB      7"


def test_line_numbers():
    cfg = RenderConfig(color=False, line_numbers=True)
    out = render_table([{"name": "Al"}, {"name": "Bo"}], "name", cfg=cfg)
    assert out == "#  name\n1  Al\n2  Bo"


def test_line_numbers_leave_item_keys_alone():
    cfg = RenderConfig(color=False, line_numbers=True)
    out = render_table([{"__line__": "mine", "name": "Al"}], "__line__,name", cfg=cfg)
    assert out == "#  __line__  name\n1  mine      Al"


def test_invalid_items_are_skipped_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="json2table"):
        out = render_table([{"name": "Al"}, 5], "name", cfg=PLAIN)
    assert out == "name\nAl"
    assert "expected an object" in caplog.text


def test_invalid_items_shown_when_asked():
    cfg = RenderConfig(color=False, line_numbers=True, show_invalid=True)
    out = render_table([{"n": "a"}, "oops"], "n", cfg=cfg)
    assert out == "#  n\n1  a\n2  <invalid line>"


def test_invalid_line_is_red_when_colored():
    cfg = RenderConfig(show_invalid=True)
    out = render_table([5], "n", cfg=cfg)
    assert out.split("\n")[-1] == "\x1b[31m<invalid line>\x1b[0m"


def test_markdown_escapes_pipes_and_newlines():
    out = render_table([{"a": "x|y", "b": "one\ntwo"}], "a,b", fmt="md")
    assert out.split("\n")[-1] == "| x\\|y | one two |"


def test_markdown_separator_after_first_header_row_only():
    data = [{"p": {"a": "x", "b": "y"}}]
    out = render_table(data, "p[a,b]", fmt="markdown")
    assert out.split("\n") == [
        "| p |  |",
        "| --- | --- |",
        "| a | b |",
        "| x | y |",
    ]


def test_markdown_ignores_color():
    cfg = RenderConfig(fmt="md", color=True)
    out = render_table(PEOPLE, "name{color:red},age", cfg=cfg)
    assert "\x1b" not in out


def test_get_renderer():
    assert isinstance(get_renderer("ascii"), AsciiRenderer)
    assert isinstance(get_renderer("MD"), MarkdownRenderer)
    assert isinstance(get_renderer("markdown"), TableRendererBackend)
    with pytest.raises(UnknownFormatError):
        get_renderer("html")


def test_unknown_format_fails_before_rendering():
    with pytest.raises(ValueError):
        TableFormatter("name", RenderConfig(fmt="csv"))


def test_formatter_reuses_parsed_structure():
    formatter = TableFormatter("name,age", PLAIN)
    assert formatter.render(PEOPLE[:1]) == "name  age\nAl     30"
    assert formatter.render(PEOPLE[1:]) == "name  age\nB      7"
    table = formatter.build(PEOPLE)
    assert table.columns == 2
    assert len(table.header_rows) == 1
    assert len(table.data_rows) == 2


# ============================================================
# Config
# ============================================================
def test_config_from_env(monkeypatch):
    monkeypatch.setenv("JSON2TABLE_FORMAT", "MD")
    monkeypatch.setenv("JSON2TABLE_COLOR", "false")
    monkeypatch.setenv("JSON2TABLE_LINE_NUMBERS", "yes")
    monkeypatch.delenv("NO_COLOR", raising=False)
    cfg = RenderConfig.from_env()
    assert cfg.fmt == "md"
    assert cfg.color is False
    assert cfg.line_numbers is True
    assert cfg.show_invalid is False


def test_config_no_color_convention(monkeypatch):
    monkeypatch.delenv("JSON2TABLE_COLOR", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    assert RenderConfig.from_env().color is False


def test_config_malformed_flag_falls_back(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("JSON2TABLE_COLOR", "maybe")
    assert RenderConfig.from_env().color is True
