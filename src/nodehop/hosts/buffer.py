"""
In-memory text buffer.

Text is stored as a list of lines split on "\\n", so a trailing newline
produces a final empty line and every point a parser reports is addressable.
"""

from __future__ import annotations

import logging

from nodehop.core.tree import Buffer, NodePosition, Point

logger = logging.getLogger(__name__)


class TextBuffer(Buffer):
    """
    Mutable list of lines with a change counter.

    `version` increases on every write; hosts compare it against the
    version they last parsed to know when to reparse.
    """

    def __init__(self, text: str = ""):
        self._lines = text.split("\n")
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_lines(self, start_row: int, stop_row: int) -> list[str]:
        if start_row < 0 or stop_row < start_row:
            raise IndexError(f"Invalid line range {start_row}:{stop_row}")
        return list(self._lines[start_row:stop_row])

    def get_text(self, position: NodePosition) -> list[str]:
        self._check_position(position)
        start, stop = position.start, position.stop

        if start.row == stop.row:
            return [self._lines[start.row][start.col:stop.col]]

        return [
            self._lines[start.row][start.col:],
            *self._lines[start.row + 1:stop.row],
            self._lines[stop.row][:stop.col],
        ]

    def set_text(self, position: NodePosition, lines: list[str]) -> None:
        self._check_position(position)
        start, stop = position.start, position.stop
        lines = list(lines) or [""]

        prefix = self._lines[start.row][:start.col]
        suffix = self._lines[stop.row][stop.col:]

        replacement = list(lines)
        replacement[0] = prefix + replacement[0]
        replacement[-1] = replacement[-1] + suffix

        self._lines[start.row:stop.row + 1] = replacement
        self._version += 1
        logger.debug(f"Replaced {position.as_tuple()} with {len(lines)} line(s)")

    def _check_row(self, row: int) -> None:
        if not 0 <= row < len(self._lines):
            raise IndexError(f"Row {row} out of range (buffer has {len(self._lines)} lines)")

    def _check_point(self, point: Point) -> None:
        self._check_row(point.row)
        if not 0 <= point.col <= len(self._lines[point.row]):
            raise IndexError(f"Column {point.col} out of range on row {point.row}")

    def _check_position(self, position: NodePosition) -> None:
        self._check_point(position.start)
        self._check_point(position.stop)
        if position.stop < position.start:
            raise IndexError(f"Position stops before it starts: {position.as_tuple()}")
