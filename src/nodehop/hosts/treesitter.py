"""
Tree adapter over py-tree-sitter.

A TreeSitterDocument owns a TextBuffer, parses it with a host grammar and
parses configured node types again with embedded grammars (injections).
Parses are lazy: any buffer write bumps its version and the next query
reparses everything, producing new trees and so new node identities.

Tree-sitter reports byte columns. Each parse keeps a snapshot of the lines
it was built from and converts to character columns against that snapshot,
so a node from an old parse never reads text written after it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tree_sitter import Node, Parser, Tree

from nodehop.core.tree import NodePosition, Point, SyntaxNode, TreeAdapter, walk_tree
from nodehop.hosts.buffer import TextBuffer
from nodehop.hosts.languages import get_language

logger = logging.getLogger(__name__)


class ParsedTree:
    """One parse result: a tree-sitter Tree plus the text it was built from."""

    def __init__(
        self,
        tree: Tree,
        language: str,
        lines: tuple[str, ...],
        region: NodePosition | None = None,
    ):
        self.ts_tree = tree
        self.language = language
        self.lines = lines
        self.region = region  # None for the host tree

    def __repr__(self) -> str:
        where = self.region.as_tuple() if self.region else "host"
        return f"ParsedTree({self.language}, {where})"

    def root(self) -> TSNode:
        return TSNode(self.ts_tree.root_node, self)

    def char_col(self, row: int, byte_col: int) -> int:
        if not 0 <= row < len(self.lines):
            return byte_col
        return len(self.lines[row].encode("utf-8")[:byte_col].decode("utf-8", errors="ignore"))

    def byte_col(self, row: int, char_col: int) -> int:
        if not 0 <= row < len(self.lines):
            return char_col
        return len(self.lines[row][:char_col].encode("utf-8"))

    def to_ts_point(self, point: Point) -> tuple[int, int]:
        return (point.row, self.byte_col(point.row, point.col))

    def covers(self, position: NodePosition) -> bool:
        """True if position lies inside this tree's region (the host covers everything)."""
        if self.region is None:
            return True
        return self.region.start <= position.start and position.stop <= self.region.stop

    def contains_point(self, point: Point) -> bool:
        if self.region is None:
            return True
        return self.region.start <= point < self.region.stop

    def named_node_at(self, point: Point) -> TSNode | None:
        ts_point = self.to_ts_point(point)
        raw = self.ts_tree.root_node.named_descendant_for_point_range(ts_point, ts_point)
        return TSNode(raw, self) if raw is not None else None

    def descendant_for(self, position: NodePosition) -> TSNode | None:
        raw = self.ts_tree.root_node.descendant_for_point_range(
            self.to_ts_point(position.start),
            self.to_ts_point(position.stop),
        )
        return TSNode(raw, self) if raw is not None else None


class TSNode(SyntaxNode):
    """SyntaxNode backed by a tree-sitter Node."""

    def __init__(self, raw: Node, tree: ParsedTree):
        self.raw = raw
        self._tree = tree

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TSNode):
            return NotImplemented
        return self._tree is other._tree and self.raw == other.raw

    def __hash__(self) -> int:
        return hash((id(self._tree), self.raw.start_byte, self.raw.end_byte, self.raw.type))

    def __repr__(self) -> str:
        return f"TSNode({self.type}, {self.range})"

    def _wrap(self, raw: Node | None) -> TSNode | None:
        return TSNode(raw, self._tree) if raw is not None else None

    @property
    def type(self) -> str:
        return self.raw.type

    @property
    def named(self) -> bool:
        return self.raw.is_named

    @property
    def range(self) -> tuple[int, int, int, int]:
        start_row, start_byte_col = self.raw.start_point
        stop_row, stop_byte_col = self.raw.end_point
        return (
            start_row,
            self._tree.char_col(start_row, start_byte_col),
            stop_row,
            self._tree.char_col(stop_row, stop_byte_col),
        )

    @property
    def tree(self) -> ParsedTree:
        return self._tree

    @property
    def text(self) -> str:
        """Source text of the node, from the snapshot it was parsed from."""
        start_row, start_col, stop_row, stop_col = self.range
        lines = self._tree.lines
        if start_row == stop_row:
            return lines[start_row][start_col:stop_col]
        parts = [lines[start_row][start_col:], *lines[start_row + 1:stop_row]]
        if stop_row < len(lines):
            parts.append(lines[stop_row][:stop_col])
        return "\n".join(parts)

    @property
    def child_count(self) -> int:
        return self.raw.child_count

    @property
    def named_child_count(self) -> int:
        return self.raw.named_child_count

    def parent(self) -> TSNode | None:
        return self._wrap(self.raw.parent)

    def child(self, index: int) -> TSNode | None:
        if not 0 <= index < self.raw.child_count:
            return None
        return self._wrap(self.raw.child(index))

    def named_child(self, index: int) -> TSNode | None:
        if not 0 <= index < self.raw.named_child_count:
            return None
        return self._wrap(self.raw.named_child(index))

    def next_sibling(self) -> TSNode | None:
        return self._wrap(self.raw.next_sibling)

    def prev_sibling(self) -> TSNode | None:
        return self._wrap(self.raw.prev_sibling)

    def next_named_sibling(self) -> TSNode | None:
        return self._wrap(self.raw.next_named_sibling)

    def prev_named_sibling(self) -> TSNode | None:
        return self._wrap(self.raw.prev_named_sibling)


class TreeSitterDocument(TreeAdapter):
    """
    A buffer plus its syntax trees.

    Args:
        text: Initial buffer content
        language: Host grammar name (see nodehop.hosts.languages)
        injections: Host node type -> grammar name; each such node's text
            is parsed again with that grammar as an embedded tree
    """

    def __init__(
        self,
        text: str = "",
        language: str = "python",
        injections: dict[str, str] | None = None,
    ):
        self.language = language
        self.injections = dict(injections or {})
        self._buffer = TextBuffer(text)
        self._cursor = Point(0, 0)
        self._parsed_version: int | None = None
        self._host: ParsedTree | None = None
        self._injected: list[ParsedTree] = []

    @classmethod
    def from_file(cls, path: Path | str, **kwargs) -> "TreeSitterDocument":
        path = Path(path)
        return cls(path.read_text(encoding="utf-8"), **kwargs)

    def save(self, path: Path | str) -> None:
        Path(path).write_text(self._buffer.text, encoding="utf-8")

    @property
    def buffer(self) -> TextBuffer:
        return self._buffer

    @property
    def text(self) -> str:
        return self._buffer.text

    @property
    def cursor(self) -> Point:
        return self._cursor

    @cursor.setter
    def cursor(self, point: Point) -> None:
        self._cursor = point

    @property
    def host_tree(self) -> ParsedTree:
        self._ensure_parsed()
        return self._host

    @property
    def injected_trees(self) -> list[ParsedTree]:
        self._ensure_parsed()
        return list(self._injected)

    def root(self) -> TSNode:
        return self.host_tree.root()

    def _ensure_parsed(self) -> None:
        if self._parsed_version == self._buffer.version:
            return

        source = self._buffer.text.encode("utf-8")
        lines = self._buffer.lines

        parser = Parser(get_language(self.language))
        self._host = ParsedTree(parser.parse(source), self.language, lines)
        self._injected = self._parse_injections(source, lines)
        self._parsed_version = self._buffer.version

        logger.debug(
            f"Parsed {self.language} buffer v{self._buffer.version} "
            f"({len(self._injected)} injected trees)"
        )

    def _parse_injections(self, source: bytes, lines: tuple[str, ...]) -> list[ParsedTree]:
        if not self.injections:
            return []

        injected = []
        for node in walk_tree(self._host.root()):
            language = self.injections.get(node.type)
            if language is None or node.raw.start_byte == node.raw.end_byte:
                continue
            parser = Parser(get_language(language), included_ranges=[node.raw.range])
            injected.append(ParsedTree(parser.parse(source), language, lines, region=node.position))

        # Innermost regions first
        injected.sort(key=lambda t: (t.region.stop.row - t.region.start.row, t.region.stop.col - t.region.start.col))
        return injected

    def smallest_node_at_cursor(self, ignore_injections: bool = True) -> TSNode | None:
        self._ensure_parsed()
        if not ignore_injections:
            for tree in self._injected:
                if tree.contains_point(self._cursor):
                    node = tree.named_node_at(self._cursor)
                    if node is not None:
                        return node
        return self._host.named_node_at(self._cursor)

    def descendant_for_range(self, position: NodePosition) -> TSNode | None:
        self._ensure_parsed()
        found = []
        for tree in [*self._injected, self._host]:
            if not tree.covers(position):
                continue
            node = tree.descendant_for(position)
            if node is None:
                continue
            if node.position == position:
                return node
            found.append(node)
        return found[0] if found else None

    def node_at(self, row: int, col: int, ignore_injections: bool = False) -> TSNode | None:
        """Move the cursor to (row, col) and return the smallest named node there."""
        self.cursor = Point(row, col)
        return self.smallest_node_at_cursor(ignore_injections=ignore_injections)
