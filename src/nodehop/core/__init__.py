"""
Core primitives: tree interfaces, navigation, the trail zipper and swapping.
"""

from nodehop.core.tree import (
    Point,
    NodePosition,
    SyntaxNode,
    TreeAdapter,
    Buffer,
    same_range,
    line_span,
    ancestors,
    walk_tree,
    depth,
)
from nodehop.core.navigation import (
    Op,
    NavigationMode,
    Navigator,
    sibling,
    child,
    parent,
)
from nodehop.core.trail import (
    Trail,
    largest_ancestor_on_same_lines,
    start_session,
)
from nodehop.core.swap import (
    SwapEngine,
    trim_position,
    swap,
)
from nodehop.core.positions import (
    join_positions,
    overlaps,
    end_of_text,
)

__all__ = [
    # tree
    "Point",
    "NodePosition",
    "SyntaxNode",
    "TreeAdapter",
    "Buffer",
    "same_range",
    "line_span",
    "ancestors",
    "walk_tree",
    "depth",
    # navigation
    "Op",
    "NavigationMode",
    "Navigator",
    "sibling",
    "child",
    "parent",
    # trail
    "Trail",
    "largest_ancestor_on_same_lines",
    "start_session",
    # swap
    "SwapEngine",
    "trim_position",
    "swap",
    # positions
    "join_positions",
    "overlaps",
    "end_of_text",
]
