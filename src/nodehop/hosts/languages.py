"""
Grammar registry.

Grammars ship as separate `tree-sitter-<name>` distributions. Each exposes
a function returning the language pointer, wrapped here in a Language.
"""

from __future__ import annotations

import logging
from importlib import import_module

from tree_sitter import Language

logger = logging.getLogger(__name__)

# name -> (module, function returning the language pointer)
GRAMMARS: dict[str, tuple[str, str]] = {
    "python": ("tree_sitter_python", "language"),
    "javascript": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
    "json": ("tree_sitter_json", "language"),
    "lua": ("tree_sitter_lua", "language"),
    "rust": ("tree_sitter_rust", "language"),
    "html": ("tree_sitter_html", "language"),
    "css": ("tree_sitter_css", "language"),
    "bash": ("tree_sitter_bash", "language"),
    "markdown": ("tree_sitter_markdown", "language"),
}

_loaded: dict[str, Language] = {}


def get_language(name: str) -> Language:
    """
    Get a tree-sitter language by name.

    Names outside GRAMMARS are looked up as `tree_sitter_<name>.language`.

    Raises:
        ValueError: If the grammar package is not installed
    """
    if name in _loaded:
        return _loaded[name]

    module_path, func_name = GRAMMARS.get(name, (f"tree_sitter_{name}", "language"))
    try:
        module = import_module(module_path)
    except ImportError:
        available = ", ".join(sorted(GRAMMARS))
        raise ValueError(
            f"Unknown language: {name} (install {module_path.replace('_', '-')}). Known: {available}"
        ) from None

    language = Language(getattr(module, func_name)())
    _loaded[name] = language
    logger.debug(f"Loaded grammar {name} from {module_path}")
    return language


def guess_language(filename: str) -> str | None:
    """Language name for a file extension, if one is known."""
    extensions = {
        ".py": "python",
        ".pyw": "python",
        ".js": "javascript",
        ".mjs": "javascript",
        ".ts": "typescript",
        ".tsx": "tsx",
        ".json": "json",
        ".lua": "lua",
        ".rs": "rust",
        ".html": "html",
        ".css": "css",
        ".sh": "bash",
        ".md": "markdown",
    }
    if "." not in filename:
        return None
    return extensions.get("." + filename.rsplit(".", 1)[-1].lower())
