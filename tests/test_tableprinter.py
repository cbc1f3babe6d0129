import io

import pytest

from a2squery.tableprinter import (
    RowLengthError,
    TablePrinter,
    escape_special_chars,
    join_with_limit,
)


def _table():
    table = TablePrinter(["Rule", "Value"], "=")
    table.add_rows([["zeta", "1"], ["alpha", "long value here"], ["mid", "x"]])
    return table


def _lines(text):
    assert text.startswith("\n")
    assert text.endswith("\n")
    return text[1:-1].split("\n")


def test_add_row_rejects_wrong_length():
    table = TablePrinter(["a", "b"], "=")
    with pytest.raises(RowLengthError):
        table.add_row(["only"])
    assert table.render().count("\n") == 4


def test_add_rows_stops_at_bad_row():
    table = TablePrinter(["a", "b"], "=")
    with pytest.raises(RowLengthError):
        table.add_rows([["1", "2"], ["3"], ["4", "5"]])
    _, _, *body, _ = _lines(table.render())
    assert len(body) == 1
    assert body[0].split() == ["1", "2"]


def test_render_layout():
    header, top, *body, bottom = _lines(_table().render())
    assert top == bottom
    assert set(top) == {"="}
    assert len(top) == len(header) + 2
    assert header.split() == ["Rule", "Value"]
    assert len(body) == 3
    assert all(len(line) == len(header) for line in body)
    assert [line.split()[0] for line in body] == ["zeta", "alpha", "mid"]


def test_columns_are_aligned():
    header, _, *body, _ = _lines(_table().render())
    start = header.index("Value")
    values = ["1", "long value here", "x"]
    assert [line.index(value) for line, value in zip(body, values)] == [start] * 3


def test_render_sorted_orders_rows_and_keeps_original():
    table = _table()
    _, _, *body, _ = _lines(table.render_sorted(0))
    firsts = [line.split()[0] for line in body]
    assert firsts == sorted(firsts)
    _, _, *original, _ = _lines(table.render())
    assert [line.split()[0] for line in original] == ["zeta", "alpha", "mid"]


def test_render_sorted_invalid_column():
    table = _table()
    with pytest.raises(IndexError):
        table.render_sorted(2)
    out = io.StringIO()
    table.print_sorted(-1, out)
    assert out.getvalue() == "Invalid column index: -1\n"


def test_print_writes_render():
    table = _table()
    out = io.StringIO()
    table.print(out)
    assert out.getvalue() == table.render()
    sorted_out = io.StringIO()
    table.print_sorted(1, sorted_out)
    assert sorted_out.getvalue() == table.render_sorted(1)


def test_empty_headers():
    table = TablePrinter([], "=")
    assert table.render() == "\nNot enough data to display ...\n"


def test_cells_are_escaped():
    table = TablePrinter(["Rule", "Value"], "=")
    table.add_row(['say "hi"', "a"])
    _, _, row, _ = _lines(table.render())
    assert escape_special_chars('say "hi"') in row
    assert '"' not in row.replace('\\"', "")


def test_escape_special_chars():
    assert escape_special_chars("\000") == "\\0"
    assert escape_special_chars('"') == '\\"'
    assert escape_special_chars("plain text") == "plain text"
    escaped = escape_special_chars("a\tb\nc\rd")
    assert not any(ch in escaped for ch in "\t\n\r")
    assert escaped.startswith("a\\") and escaped.endswith("d")


def test_join_with_limit_single_line():
    assert join_with_limit(["a", "b", "c"], ", ", 60) == ["a, b, c"]


def test_join_with_limit_empty():
    assert join_with_limit([], ", ", 10) == []


def test_join_with_limit_long_element_stands_alone():
    assert join_with_limit(["x" * 10, "y"], ", ", 5) == ["x" * 10, "y"]


@pytest.mark.parametrize("limit", [6, 10, 20, 60])
def test_join_with_limit_invariants(limit):
    elems = ["battleye", "no3rd", "shard001", "lqs0", "port777", "isDLC"]
    lines = join_with_limit(elems, ", ", limit)
    assert ", ".join(lines) == ", ".join(elems)
    longest = max(len(e) for e in elems)
    assert all(len(line) <= max(limit, longest) for line in lines)