"""
Swap engine: exchange the text of two nodes and find the moved node again.

Writing text invalidates every SyntaxNode of the old parse, so all
coordinates are copied into NodePosition values before the first write.
"""

from __future__ import annotations

import logging
import re

from nodehop.core.positions import end_of_text, overlaps
from nodehop.core.tree import Buffer, NodePosition, Point, SyntaxNode, TreeAdapter

logger = logging.getLogger(__name__)

_NON_SPACE = re.compile(r"\S")


def trim_position(buffer: Buffer, position: NodePosition) -> NodePosition:
    """
    Tighten position so it starts and stops on non-whitespace characters.

    A span made only of whitespace collapses to an empty span at its start.
    """
    start_row, start_col = position.start.row, position.start.col
    stop_row, stop_col = position.stop.row, position.stop.col

    lines_full = buffer.get_lines(start_row, stop_row + 1)
    if not lines_full:
        return NodePosition(position.start, position.start)

    # Node ends past the last line of the buffer
    if len(lines_full) < stop_row - start_row + 1:
        stop_row = start_row + len(lines_full) - 1
        stop_col = len(lines_full[-1])
    stop_col = min(stop_col, len(lines_full[-1]))

    fragments = buffer.get_text(NodePosition.from_range(start_row, start_col, stop_row, stop_col))
    # Column where each fragment begins: only the first line is cut on the left
    origins = [start_col] + [0] * (len(fragments) - 1)

    first = None
    for i, fragment in enumerate(fragments):
        match = _NON_SPACE.search(fragment)
        if match:
            first = Point(start_row + i, origins[i] + match.start())
            break
    if first is None:
        return NodePosition(position.start, position.start)

    last = None
    for i in range(len(fragments) - 1, -1, -1):
        width = len(fragments[i].rstrip())
        if width:
            last = Point(start_row + i, origins[i] + width)
            break

    return NodePosition(first, last)


class SwapEngine:
    """
    Swaps the text of two nodes through a TreeAdapter's buffer.

    The later range is always written first so the earlier range's
    coordinates are still valid when it is written.
    """

    def __init__(self, adapter: TreeAdapter):
        self.adapter = adapter

    def swap(self, node_a: SyntaxNode | None, node_b: SyntaxNode | None) -> SyntaxNode | None:
        """
        Exchange the text of node_a and node_b.

        Returns the node now holding node_a's text, from a fresh parse, or
        None when nothing was swapped or no node spans the moved text exactly.
        """
        if node_a is None or node_b is None or node_a == node_b:
            return None

        buffer = self.adapter.buffer
        a_pos = trim_position(buffer, node_a.position)
        b_pos = trim_position(buffer, node_b.position)

        if overlaps(a_pos, b_pos):
            logger.debug(f"Not swapping overlapping ranges {a_pos.as_tuple()} and {b_pos.as_tuple()}")
            return None

        a_text = buffer.get_text(a_pos)
        b_text = buffer.get_text(b_pos)

        if a_pos.start > b_pos.start:
            buffer.set_text(a_pos, b_text)
            buffer.set_text(b_pos, a_text)
        else:
            buffer.set_text(b_pos, a_text)
            buffer.set_text(a_pos, b_text)

        logger.debug(f"Swapped {node_a.type} {a_pos.as_tuple()} with {node_b.type} {b_pos.as_tuple()}")

        target = self._moved_position(a_pos, b_pos, a_text, b_text)
        resolved = self.adapter.descendant_for_range(target)
        if resolved is None or resolved.position != target:
            logger.warning(f"No node spans the swapped text at {target.as_tuple()}")
            return None
        return resolved

    def _moved_position(
        self,
        a_pos: NodePosition,
        b_pos: NodePosition,
        a_text: list[str],
        b_text: list[str],
    ) -> NodePosition:
        """Where a's text lives after the swap."""
        if a_pos.start < b_pos.start:
            # b's text replaced a, shifting everything after it
            row = b_pos.start.row + (len(b_text) - len(a_text))
            col = b_pos.start.col
            if b_pos.start.row == a_pos.stop.row:
                col = end_of_text(a_pos.start, b_text).col + (b_pos.start.col - a_pos.stop.col)
            start = Point(row, col)
        else:
            start = b_pos.start

        return NodePosition(start, end_of_text(start, a_text))


def swap(adapter: TreeAdapter, node_a: SyntaxNode | None, node_b: SyntaxNode | None) -> SyntaxNode | None:
    """Swap the text of two nodes. See SwapEngine.swap."""
    return SwapEngine(adapter).swap(node_a, node_b)
