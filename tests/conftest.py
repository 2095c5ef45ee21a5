"""
Shared fixtures: parsed Python documents and node lookup.
"""

import pytest

from nodehop.core import walk_tree
from nodehop.hosts import TreeSitterDocument


@pytest.fixture
def make_doc():
    """Factory for documents parsed with the Python grammar."""
    def _make(text, **kwargs):
        return TreeSitterDocument(text, language="python", **kwargs)
    return _make


@pytest.fixture
def find():
    """Find the first node (pre-order) of a type, optionally with given text."""
    def _find(doc, node_type, text=None, tree=None):
        root = (tree or doc.host_tree).root()
        for node in walk_tree(root):
            if node.type == node_type and (text is None or node.text == text):
                return node
        raise LookupError(f"No {node_type} node with text {text!r}")
    return _find
