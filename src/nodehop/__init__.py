"""
Nodehop: structural navigation and node swapping over syntax trees.
"""

__version__ = "0.1.0"
