"""
Syntax tree interfaces and traversal helpers.

The navigation core never talks to a parser directly. It reads nodes through
the SyntaxNode interface, asks the TreeAdapter for cursor and range lookups,
and edits text through the Buffer interface. Hosts (see nodehop.hosts)
implement all three.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Hashable, Iterator


@dataclass(frozen=True, order=True)
class Point:
    """A (row, col) location in a buffer. Both are zero-based."""
    row: int
    col: int


@dataclass(frozen=True)
class NodePosition:
    """
    A plain copy of a node's range.

    Survives text mutation, unlike the SyntaxNode it was copied from.
    The stop point is exclusive.
    """
    start: Point
    stop: Point

    @classmethod
    def from_range(cls, start_row: int, start_col: int, stop_row: int, stop_col: int) -> "NodePosition":
        return cls(Point(start_row, start_col), Point(stop_row, stop_col))

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.start.row, self.start.col, self.stop.row, self.stop.col)

    @property
    def is_empty(self) -> bool:
        return self.start == self.stop


class SyntaxNode(ABC):
    """
    A node of an immutable parsed tree.

    Equality means identity: the same structural node in the same tree.
    Two distinct nodes may still cover the same range (see same_range).
    """

    @property
    @abstractmethod
    def type(self) -> str:
        ...

    @property
    @abstractmethod
    def named(self) -> bool:
        ...

    @property
    @abstractmethod
    def range(self) -> tuple[int, int, int, int]:
        """(start_row, start_col, stop_row, stop_col), stop exclusive."""
        ...

    @property
    @abstractmethod
    def tree(self) -> Hashable:
        """Identity of the tree owning this node."""
        ...

    @abstractmethod
    def parent(self) -> SyntaxNode | None:
        ...

    @abstractmethod
    def child(self, index: int) -> SyntaxNode | None:
        ...

    @abstractmethod
    def named_child(self, index: int) -> SyntaxNode | None:
        ...

    @property
    @abstractmethod
    def child_count(self) -> int:
        ...

    @property
    @abstractmethod
    def named_child_count(self) -> int:
        ...

    @abstractmethod
    def next_sibling(self) -> SyntaxNode | None:
        ...

    @abstractmethod
    def prev_sibling(self) -> SyntaxNode | None:
        ...

    @abstractmethod
    def next_named_sibling(self) -> SyntaxNode | None:
        ...

    @abstractmethod
    def prev_named_sibling(self) -> SyntaxNode | None:
        ...

    @property
    def position(self) -> NodePosition:
        return NodePosition.from_range(*self.range)

    def children(self) -> list[SyntaxNode]:
        return [self.child(i) for i in range(self.child_count)]

    def named_children(self) -> list[SyntaxNode]:
        return [self.named_child(i) for i in range(self.named_child_count)]


class TreeAdapter(ABC):
    """
    Host-side queries the navigation core needs beyond node relations.

    The cursor is the host's single insertion point. Injection lookups are
    made relative to it, so callers keep it on the node they are visiting.
    """

    @property
    @abstractmethod
    def cursor(self) -> Point:
        ...

    @cursor.setter
    @abstractmethod
    def cursor(self, point: Point) -> None:
        ...

    @abstractmethod
    def smallest_node_at_cursor(self, ignore_injections: bool = True) -> SyntaxNode | None:
        """
        Smallest named node at the cursor.

        With ignore_injections=False, nodes of embedded trees win over the
        host tree when the cursor is inside an injected region.
        """
        ...

    @abstractmethod
    def descendant_for_range(self, position: NodePosition) -> SyntaxNode | None:
        """Smallest node (of the freshest parse) that contains position."""
        ...

    @property
    @abstractmethod
    def buffer(self) -> Buffer:
        ...


class Buffer(ABC):
    """Line-oriented text storage. Columns are character offsets."""

    @abstractmethod
    def get_lines(self, start_row: int, stop_row: int) -> list[str]:
        """Whole lines in [start_row, stop_row). Rows past the end are dropped."""
        ...

    @abstractmethod
    def get_text(self, position: NodePosition) -> list[str]:
        """Text inside position, split into lines. Always at least one element."""
        ...

    @abstractmethod
    def set_text(self, position: NodePosition, lines: list[str]) -> None:
        """Replace the text inside position with lines."""
        ...

    @property
    @abstractmethod
    def line_count(self) -> int:
        ...

    @property
    @abstractmethod
    def version(self) -> int:
        """Counter bumped by every write."""
        ...


def same_range(node_a: SyntaxNode, node_b: SyntaxNode) -> bool:
    """True if both nodes cover exactly the same range."""
    return node_a.range == node_b.range


def line_span(position: NodePosition) -> tuple[int, int]:
    """
    Rows a position really occupies, inclusive on both ends.

    A stop at column 0 only touches the next line, so it counts as ending
    on the previous row.
    """
    stop_row = position.stop.row
    if position.stop.col == 0 and stop_row > position.start.row:
        stop_row -= 1
    return position.start.row, stop_row


def ancestors(node: SyntaxNode, max_depth: int | None = None) -> Iterator[SyntaxNode]:
    """Yield raw tree ancestors from parent up to root (or up to max_depth levels)."""
    current = node.parent()
    depth = 0
    while current is not None:
        if max_depth is not None and depth >= max_depth:
            break
        yield current
        current = current.parent()
        depth += 1


def walk_tree(node: SyntaxNode, order: str = "pre", named_only: bool = False) -> Iterator[SyntaxNode]:
    """
    Walk tree nodes in specified order.

    Args:
        node: Root node to start from
        order: "pre" for pre-order, "bfs" for breadth-first
        named_only: Skip unnamed children while descending
    """
    def kids(n: SyntaxNode) -> list[SyntaxNode]:
        return n.named_children() if named_only else n.children()

    if order == "pre":
        yield node
        for child in kids(node):
            yield from walk_tree(child, order, named_only)
    elif order == "bfs":
        queue = [node]
        while queue:
            current = queue.pop(0)
            yield current
            queue.extend(kids(current))
    else:
        raise ValueError(f"Unknown order: {order}")


def depth(node: SyntaxNode) -> int:
    """Number of raw ancestors above node."""
    return sum(1 for _ in ancestors(node))
