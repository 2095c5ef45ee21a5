"""
Interactive node mode.

The Editor is the glue between key presses and the navigation core: it
starts a trail at the cursor, dispatches keys to trail movements and swaps,
and reports what a host should show (selection, markers, status text).
It draws nothing itself.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

from nodehop.config import EditorConfig
from nodehop.core import (
    NavigationMode,
    Navigator,
    NodePosition,
    Op,
    Point,
    SwapEngine,
    SyntaxNode,
    Trail,
    TreeAdapter,
    join_positions,
    line_span,
    start_session,
)

logger = logging.getLogger(__name__)

# Actions that leave the mode when pressed inside it
EXIT_ACTIONS = ("exit", "escape", "toggle", "toggle_outer")

_INDENT = re.compile(r"\s*")


@dataclass(frozen=True)
class Selection:
    """A selection left behind when the mode exits. Backward puts the cursor at the start."""
    position: NodePosition
    backward: bool = False

    @property
    def anchor(self) -> Point:
        return self.position.stop if self.backward else self.position.start

    @property
    def cursor(self) -> Point:
        return self.position.start if self.backward else self.position.stop


class Editor:
    """
    One buffer's node mode.

    Args:
        document: Tree adapter for the buffer being edited
        config: Editor configuration (defaults if omitted)
    """

    def __init__(self, document: TreeAdapter, config: EditorConfig | None = None):
        self.document = document
        self.config = config or EditorConfig()
        self.navigator = Navigator(document, NavigationMode.from_bool(self.config.named_mode))
        self.swapper = SwapEngine(document)

        self.trail: Trail | None = None
        self.on = False
        self.nodewise_start: NodePosition | None = None
        self.last_selection: Selection | None = None

        self._actions: dict[str, Callable[[], object]] = {
            "parent": self.parent,
            "child": self.child,
            "next": lambda: self.sibling(Op.NEXT),
            "prev": lambda: self.sibling(Op.PREV),
            "first_sibling": lambda: self.sibling(Op.FIRST),
            "last_sibling": lambda: self.sibling(Op.LAST),
            "outermost": self.outermost,
            "innermost": self.innermost,
            "parent_linewise": self.parent_linewise,
            "child_linewise": self.child_linewise,
            "swap_next": self.swap_next,
            "swap_prev": self.swap_prev,
            "toggle_named": self.toggle_named,
            "visual": self.visual,
            "visual_select_back": self.visual_select_back,
            "append": self.append,
            "prepend": self.prepend,
            "open_below": self.open_below,
            "open_above": self.open_above,
        }
        for name in EXIT_ACTIONS:
            self._actions[name] = self.exit

    def enter(self, outermost: bool = False) -> bool:
        """Start a trail at the node under the cursor."""
        seed = self.document.smallest_node_at_cursor(ignore_injections=False)
        if seed is None:
            logger.error("Syntax node not found")
            return False

        self.last_selection = None
        self.trail = start_session(seed, self.navigator)
        if outermost:
            self.trail.move_outermost()

        self.on = True
        logger.debug(f"Entered node mode at {self.current_node().type}")
        return True

    def exit(self) -> None:
        self.trail = None
        self.on = False
        self.nodewise_start = None
        logger.debug("Left node mode")

    def current_node(self) -> SyntaxNode | None:
        return self.trail.current() if self.trail else None

    def press(self, key: str) -> bool:
        """
        Handle one key sequence.

        Outside the mode only the toggle keys do anything. Returns False if
        the key is not bound.
        """
        keymaps = self.config.keymaps
        if not self.on:
            if key == keymaps.toggle:
                return self.enter()
            if key == keymaps.toggle_outer:
                return self.enter(outermost=True)
            return False

        action = keymaps.actions().get(key)
        if action is None:
            return False
        self._actions[action]()
        return True

    # Movements. Each returns the new node, or None if it could not move.

    def parent(self) -> SyntaxNode | None:
        return self.trail.from_child_to_parent()

    def child(self) -> SyntaxNode | None:
        return self.trail.from_parent_to_child()

    def parent_linewise(self) -> SyntaxNode | None:
        return self.trail.from_child_to_linewise_ancestor()

    def child_linewise(self) -> SyntaxNode | None:
        return self.trail.from_parent_to_linewise_descendant()

    def sibling(self, op: Op) -> SyntaxNode | None:
        return self.trail.from_sib_to_sib(op)

    def outermost(self) -> SyntaxNode | None:
        return self.trail.move_outermost()

    def innermost(self) -> SyntaxNode:
        return self.trail.move_innermost()

    def swap_next(self) -> SyntaxNode | None:
        return self._swap(Op.NEXT)

    def swap_prev(self) -> SyntaxNode | None:
        return self._swap(Op.PREV)

    def _swap(self, op: Op) -> SyntaxNode | None:
        current = self.trail.current()
        target = self.trail.from_sib_to_sib(op)
        if target is None:
            return None

        version = self.document.buffer.version
        new_node = self.swapper.swap(current, target)
        if new_node is not None:
            return self.trail.set_current_node(new_node)

        if self.document.buffer.version != version:
            # Text moved but no node matches it: the trail's nodes are stale
            fallback = self.document.smallest_node_at_cursor(ignore_injections=False)
            if fallback is not None:
                self.trail.set_current_node(fallback)
        return None

    def toggle_named(self) -> bool:
        named = self.navigator.toggle_named_mode()
        logger.info(f"Navigation mode: {'named' if named else 'all nodes'}")
        return named

    def visual(self) -> NodePosition | Selection | None:
        if self.config.select_current_node:
            return self.nodewise_visual()
        return self.visual_select()

    def nodewise_visual(self) -> NodePosition | None:
        """Toggle the anchor that selection() joins with the current node."""
        if self.nodewise_start is not None:
            self.nodewise_start = None
        else:
            self.nodewise_start = self.trail.current().position
        return self.nodewise_start

    def visual_select(self) -> Selection:
        """Select the current node and leave the mode."""
        return self._leave_with_selection(Selection(self.trail.current().position))

    def visual_select_back(self) -> Selection:
        """Select the current node with the cursor on its start and leave the mode."""
        return self._leave_with_selection(Selection(self.trail.current().position, backward=True))

    def _leave_with_selection(self, selection: Selection) -> Selection:
        self.exit()
        self.last_selection = selection
        self.document.cursor = selection.cursor
        return selection

    def append(self) -> Point:
        stop = self.trail.current().position.stop
        self.exit()
        self.document.cursor = stop
        return stop

    def prepend(self) -> Point:
        start = self.trail.current().position.start
        self.exit()
        self.document.cursor = start
        return start

    def open_below(self) -> Point:
        """Insert a line after the node's last line, keeping its indentation."""
        _, row = line_span(self.trail.current().position)
        self.exit()

        buffer = self.document.buffer
        line = buffer.get_lines(row, row + 1)[0]
        indent = _INDENT.match(line).group()
        end = Point(row, len(line))
        buffer.set_text(NodePosition(end, end), ["", indent])

        self.document.cursor = Point(row + 1, len(indent))
        return self.document.cursor

    def open_above(self) -> Point:
        """Insert a line before the node's first line, keeping its indentation."""
        row = self.trail.current().position.start.row
        self.exit()

        buffer = self.document.buffer
        line = buffer.get_lines(row, row + 1)[0]
        indent = _INDENT.match(line).group()
        start = Point(row, 0)
        buffer.set_text(NodePosition(start, start), [indent, ""])

        self.document.cursor = Point(row, len(indent))
        return self.document.cursor

    # What a host shows

    def selection(self) -> NodePosition | None:
        node = self.current_node()
        if node is None:
            return None
        if self.nodewise_start is not None:
            return join_positions(node.position, self.nodewise_start)
        return node.position

    def markers(self) -> dict[str, NodePosition]:
        """Positions to highlight around the current node."""
        node = self.current_node()
        if node is None:
            return {}

        neighbours = {
            "parent": self.navigator.parent(node),
            "next": self.navigator.sibling(node, Op.NEXT),
            "prev": self.navigator.sibling(node, Op.PREV),
        }
        if not self.config.select_current_node:
            neighbours["current"] = node
            neighbours["child"] = self.navigator.child(node)

        return {name: n.position for name, n in neighbours.items() if n is not None}

    def status(self) -> str:
        node = self.current_node()
        return (
            "-- "
            + ("VISUAL " if self.nodewise_start is not None else "")
            + ("NODE " if self.navigator.is_named_mode() else "NODE(all) ")
            + ("SELECT " if self.config.select_current_node else "")
            + "-- "
            + (node.type if node is not None else "")
        )
