"""Plain-text tables with aligned columns."""

from __future__ import annotations

import sys
from operator import itemgetter
from typing import Iterable, Sequence, TextIO


class RowLengthError(ValueError):
    """A row does not have one cell for each header."""


_ESCAPES = (
    ("\n", "\\n"),
    ("\t", "\\t"),
    ("\r", "\\r"),
    ("\b", "\\b"),
    ("\f", "\\f"),
    ("\v", "\\v"),
    ("\\", "\\\\"),
    ("'", "\\'"),
    ('"', '\\"'),
    ("\000", "\\0"),
)


def escape_special_chars(s: str) -> str:
    """Escape control characters and quotes so a cell stays on one line."""
    for old, new in _ESCAPES:
        s = s.replace(old, new)
    return s


def join_with_limit(elems: Iterable[str], sep: str, limit: int) -> list[str]:
    """Join ``elems`` with ``sep`` into lines no longer than ``limit`` where possible."""
    result: list[str] = []
    current = ""
    for elem in elems:
        if len(current) + len(elem) + len(sep) > limit:
            if current:
                result.append(current)
            current = elem
        else:
            if current:
                current += sep
            current += elem
    if current:
        result.append(current)
    return result


class TablePrinter:
    """A table of string cells whose columns are padded to a common width."""

    def __init__(self, headers: Sequence[str], delimiter: str = "=") -> None:
        self.headers = list(headers)
        self.delimiter = delimiter
        self._rows: list[list[str]] = []
        self._widths = [len(header) for header in self.headers]

    def add_row(self, row: Sequence[str]) -> None:
        cells = list(row)
        if len(cells) != len(self.headers):
            raise RowLengthError("row length does not match headers length")
        self._widths = [max(width, len(cell)) for width, cell in zip(self._widths, cells)]
        self._rows.append(cells)

    def add_rows(self, rows: Iterable[Sequence[str]]) -> None:
        for row in rows:
            self.add_row(row)

    def _line(self, cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, self._widths))

    def _render(self, rows: Iterable[Sequence[str]]) -> str:
        if not self.headers:
            return "\nNot enough data to display ...\n"
        rule = "".join(self.delimiter * (width + 2) for width in self._widths)
        body = (self._line([escape_special_chars(cell) for cell in row]) for row in rows)
        return "\n".join(["", self._line(self.headers), rule, *body, rule]) + "\n"

    def render(self) -> str:
        """Return the table text with rows in insertion order."""
        return self._render(self._rows)

    def render_sorted(self, col: int) -> str:
        """Return the table text with rows ordered by column ``col``."""
        if not 0 <= col < len(self.headers):
            raise IndexError(f"Invalid column index: {col}")
        return self._render(sorted(self._rows, key=itemgetter(col)))

    def print(self, file: TextIO | None = None) -> None:
        out = file if file is not None else sys.stdout
        out.write(self.render())

    def print_sorted(self, col: int, file: TextIO | None = None) -> None:
        """Print rows ordered by ``col``, or a notice when the column does not exist."""
        out = file if file is not None else sys.stdout
        try:
            text = self.render_sorted(col)
        except IndexError as exc:
            out.write(f"{exc}\n")
            return
        out.write(text)