"""
Host implementations of the tree, cursor and buffer interfaces.
"""

from nodehop.hosts.buffer import TextBuffer
from nodehop.hosts.languages import GRAMMARS, get_language, guess_language
from nodehop.hosts.treesitter import (
    ParsedTree,
    TSNode,
    TreeSitterDocument,
)

__all__ = [
    "TextBuffer",
    "GRAMMARS",
    "get_language",
    "guess_language",
    "ParsedTree",
    "TSNode",
    "TreeSitterDocument",
]
