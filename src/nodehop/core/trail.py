"""
Trail: the zipper that remembers where a session has been.

The trail is two stacks meeting at the current node. `ancestors` holds the
cached parents (nearest last) and `descendants` the cached children
(nearest last). Moving up pushes the current node onto the descendants and
moving down pushes it onto the ancestors, so a parent/child round trip
returns exactly to the node it started from. Sideways moves drop both
stacks because the new node's ancestry is unrelated to what was cached.
"""

from __future__ import annotations

import logging

from nodehop.core.navigation import Navigator, Op
from nodehop.core.tree import SyntaxNode, line_span

logger = logging.getLogger(__name__)


def largest_ancestor_on_same_lines(start_node: SyntaxNode) -> SyntaxNode:
    """
    Expand a node to the largest raw ancestor on the same lines.

    Selecting the "line node" on entry is more useful than the token under
    the cursor. Expansion stops before the first ancestor that reaches onto
    another line.
    """
    start_row, stop_row = line_span(start_node.position)
    node = start_node

    while True:
        candidate = node.parent()
        if candidate is None:
            return node
        cand_start, cand_stop = line_span(candidate.position)
        if cand_start < start_row or cand_stop > stop_row:
            return node
        node = candidate


class Trail:
    """
    One interactive session's position in the tree.

    Every movement returns the new current node, or None when the move is
    not possible (the trail is then unchanged).
    """

    def __init__(self, node: SyntaxNode, navigator: Navigator):
        self.navigator = navigator
        self.start_node = node
        self._current = node
        self._ancestors: list[SyntaxNode] = []
        self._descendants: list[SyntaxNode] = []
        self._sync_cursor()

    def current(self) -> SyntaxNode:
        return self._current

    def path(self) -> tuple[SyntaxNode, ...]:
        """Cached zipper from the outermost ancestor to the innermost descendant."""
        return (*self._ancestors, self._current, *reversed(self._descendants))

    def _sync_cursor(self) -> None:
        self.navigator.adapter.cursor = self._current.position.start

    def _enter_parent(self, parent: SyntaxNode) -> SyntaxNode:
        # A cached parent is only trusted when it is the session's start node
        if not self._ancestors or self._ancestors[-1] != self.start_node:
            self._ancestors = [parent]

        self._descendants.append(self._current)
        self._current = self._ancestors.pop()
        self._sync_cursor()
        logger.debug(f"Moved to parent {self._current.type} {self._current.range}")
        return self._current

    def from_child_to_parent(self) -> SyntaxNode | None:
        parent = self.navigator.parent(self._current)
        if parent is None:
            return None
        return self._enter_parent(parent)

    def from_child_to_linewise_ancestor(self) -> SyntaxNode | None:
        parent = self.navigator.parent(self._current)
        if parent is None:
            return None
        return self._enter_parent(largest_ancestor_on_same_lines(parent))

    def from_parent_to_child(self) -> SyntaxNode | None:
        if not self._descendants:
            child = self.navigator.child(self._current)
            if child is None:
                return None
            self._descendants = [child]

        self._ancestors.append(self._current)
        self._current = self._descendants.pop()
        self._sync_cursor()
        logger.debug(f"Moved to child {self._current.type} {self._current.range}")
        return self._current

    def _children(self, node: SyntaxNode) -> list[SyntaxNode]:
        children = []
        child = self.navigator.child(node)
        while child is not None:
            children.append(child)
            child = self.navigator.sibling(child, Op.NEXT)
        return children

    def _tree_children(self, node: SyntaxNode) -> list[SyntaxNode]:
        if self.navigator.is_named_mode():
            return node.named_children()
        return node.children()

    def _find_linewise_descendant(self) -> SyntaxNode | None:
        """
        Breadth-first search for the first node strictly inside the current line span.

        Only the first level may cross into an injected tree, because the
        injection lookup reads the cursor and the cursor is on the current node.
        """
        start_row, stop_row = line_span(self._current.position)

        if self._descendants:
            queue = [self._descendants[-1]]
        else:
            queue = self._children(self._current)

        seen: set[SyntaxNode] = set()
        while queue:
            node = queue.pop(0)
            if node in seen:
                continue
            seen.add(node)

            node_start, node_stop = line_span(node.position)
            if node_start > start_row and node_stop < stop_row:
                return node
            queue.extend(self._tree_children(node))
        return None

    def from_parent_to_linewise_descendant(self) -> SyntaxNode | None:
        found = self._find_linewise_descendant()
        if found is not None:
            self._descendants = [found]
        return self.from_parent_to_child()

    def from_sib_to_sib(self, op: Op) -> SyntaxNode | None:
        sibling = self.navigator.sibling(self._current, op)
        if sibling is None:
            return None

        self._current = sibling
        self._ancestors = []
        self._descendants = []
        self._sync_cursor()
        logger.debug(f"Moved to sibling ({op.name.lower()}) {sibling.type} {sibling.range}")
        return self._current

    def move_outermost(self) -> SyntaxNode | None:
        while self.from_child_to_parent() is not None:
            pass

        # The real outermost node is the whole document, so go one level back in
        return self.from_parent_to_child()

    def move_innermost(self) -> SyntaxNode:
        while self._descendants:
            self._ancestors.append(self._current)
            self._current = self._descendants.pop()
        self._sync_cursor()
        return self._current

    def set_current_node(self, node: SyntaxNode) -> SyntaxNode:
        """Re-anchor the session. Resets the trail unless node is already current."""
        if node != self._current:
            self.start_node = node
            self._current = node
            self._ancestors = []
            self._descendants = []
            self._sync_cursor()
            logger.debug(f"Trail reset at {node.type} {node.range}")
        return self._current


def start_session(seed: SyntaxNode, navigator: Navigator) -> Trail:
    """Begin a trail at the largest ancestor of seed spanning the same lines."""
    return Trail(largest_ancestor_on_same_lines(seed), navigator)
