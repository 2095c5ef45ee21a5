"""
Pure helpers over NodePosition values.
"""

from __future__ import annotations

from nodehop.core.tree import NodePosition, Point


def join_positions(pos_a: NodePosition, pos_b: NodePosition) -> NodePosition:
    """Smallest position covering both inputs."""
    points = sorted([pos_a.start, pos_a.stop, pos_b.start, pos_b.stop])
    return NodePosition(start=points[0], stop=points[-1])


def overlaps(pos_a: NodePosition, pos_b: NodePosition) -> bool:
    """True if the two half-open ranges share at least one character."""
    return pos_a.start < pos_b.stop and pos_b.start < pos_a.stop


def end_of_text(start: Point, lines: list[str]) -> Point:
    """Where text made of lines ends when written at start."""
    if len(lines) <= 1:
        width = len(lines[0]) if lines else 0
        return Point(start.row, start.col + width)
    return Point(start.row + len(lines) - 1, len(lines[-1]))
