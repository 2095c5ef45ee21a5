"""
Navigation algebra: where a movement lands, given a node and a mode.

All functions are pure reads of the tree (plus the adapter's cursor lookup
for injections). A missing relation is reported as None, never raised.
The mode is passed explicitly so one movement step sees one mode.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from nodehop.core.tree import SyntaxNode, TreeAdapter, same_range

logger = logging.getLogger(__name__)


class Op(Enum):
    """Sibling movements."""
    FIRST = "f"
    LAST = "l"
    NEXT = "n"
    PREV = "p"


class NavigationMode(Enum):
    """Named mode skips punctuation and other anonymous nodes."""
    NAMED = "named"
    UNNAMED = "unnamed"

    @classmethod
    def from_bool(cls, named: bool) -> "NavigationMode":
        return cls.NAMED if named else cls.UNNAMED

    @property
    def is_named(self) -> bool:
        return self is NavigationMode.NAMED


SiblingOp = Callable[[SyntaxNode], "SyntaxNode | None"]


def _named_first(node: SyntaxNode) -> SyntaxNode | None:
    parent = node.parent()
    if parent is None or parent.named_child_count == 0:
        return None
    return parent.named_child(0)


def _named_last(node: SyntaxNode) -> SyntaxNode | None:
    parent = node.parent()
    if parent is None or parent.named_child_count == 0:
        return None
    return parent.named_child(parent.named_child_count - 1)


def _first(node: SyntaxNode) -> SyntaxNode | None:
    parent = node.parent()
    if parent is None or parent.child_count == 0:
        return None
    return parent.child(0)


def _last(node: SyntaxNode) -> SyntaxNode | None:
    parent = node.parent()
    if parent is None or parent.child_count == 0:
        return None
    return parent.child(parent.child_count - 1)


NAMED_SIBLING_OPS: dict[Op, SiblingOp] = {
    Op.FIRST: _named_first,
    Op.LAST: _named_last,
    Op.NEXT: lambda node: node.next_named_sibling(),
    Op.PREV: lambda node: node.prev_named_sibling(),
}

UNNAMED_SIBLING_OPS: dict[Op, SiblingOp] = {
    Op.FIRST: _first,
    Op.LAST: _last,
    Op.NEXT: lambda node: node.next_sibling(),
    Op.PREV: lambda node: node.prev_sibling(),
}


def sibling(node: SyntaxNode, op: Op, mode: NavigationMode) -> SyntaxNode | None:
    """First/last child of the parent, or the next/previous sibling, in mode."""
    ops = NAMED_SIBLING_OPS if mode.is_named else UNNAMED_SIBLING_OPS
    return ops[op](node)


def _child_same_tree(node: SyntaxNode, mode: NavigationMode) -> SyntaxNode | None:
    if mode.is_named:
        return node.named_child(0) if node.named_child_count > 0 else None
    return node.child(0) if node.child_count > 0 else None


def child(node: SyntaxNode, mode: NavigationMode, adapter: TreeAdapter) -> SyntaxNode | None:
    """
    First child in mode.

    At a leaf, descend into an injected tree at the cursor if there is one.
    A node of the same tree at the cursor does not count.
    """
    tree_child = _child_same_tree(node, mode)
    if tree_child is not None:
        return tree_child

    injected = adapter.smallest_node_at_cursor(ignore_injections=False)
    if injected is not None and injected.tree != node.tree:
        logger.debug(f"Descending into injected tree at {injected.type}")
        return injected
    return None


def _parent_same_tree(node: SyntaxNode, mode: NavigationMode) -> SyntaxNode | None:
    parent = node.parent()
    if mode.is_named:
        while parent is not None and not parent.named:
            parent = parent.parent()
    return parent


def _parent_across_trees(node: SyntaxNode, mode: NavigationMode, adapter: TreeAdapter) -> SyntaxNode | None:
    tree_parent = _parent_same_tree(node, mode)
    if tree_parent is not None:
        return tree_parent

    # Root of an injected tree: fall back to the host tree at the cursor
    top_level = adapter.smallest_node_at_cursor(ignore_injections=True)
    if top_level is not None and top_level.tree != node.tree:
        logger.debug(f"Leaving injected tree for {top_level.type}")
        return top_level
    return None


def has_navigable_siblings(node: SyntaxNode, mode: NavigationMode) -> bool:
    if mode.is_named:
        return node.next_named_sibling() is not None or node.prev_named_sibling() is not None
    return node.next_sibling() is not None or node.prev_sibling() is not None


def parent(node: SyntaxNode, mode: NavigationMode, adapter: TreeAdapter) -> SyntaxNode | None:
    """
    Nearest ancestor worth selecting.

    Ancestors with exactly node's range are skipped while node has no
    sibling to move to: selecting them would change nothing visible.
    """
    lonely = not has_navigable_siblings(node, mode)
    target = node
    while True:
        candidate = _parent_across_trees(target, mode, adapter)
        if candidate is None:
            return None
        if not (lonely and same_range(candidate, node)):
            return candidate
        target = candidate


class Navigator:
    """
    Navigation algebra bound to one adapter and one mode value.

    The mode only changes through set_named_mode/toggle_named_mode, so every
    call made within one movement step reads the same value.
    """

    def __init__(self, adapter: TreeAdapter, mode: NavigationMode = NavigationMode.NAMED):
        self.adapter = adapter
        self.mode = mode

    def set_named_mode(self, named: bool) -> None:
        self.mode = NavigationMode.from_bool(named)
        logger.debug(f"Navigation mode set to {self.mode.value}")

    def is_named_mode(self) -> bool:
        return self.mode.is_named

    def toggle_named_mode(self) -> bool:
        self.set_named_mode(not self.is_named_mode())
        return self.is_named_mode()

    def sibling(self, node: SyntaxNode, op: Op) -> SyntaxNode | None:
        return sibling(node, op, self.mode)

    def child(self, node: SyntaxNode) -> SyntaxNode | None:
        return child(node, self.mode, self.adapter)

    def parent(self, node: SyntaxNode) -> SyntaxNode | None:
        return parent(node, self.mode, self.adapter)
