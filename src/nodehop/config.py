"""
Editor configuration.

Defaults mirror a modal editor plugin: hjkl to move, J/K to swap, and a
handful of extra actions. User settings are deep-merged over the defaults,
either from a dict or from a TOML file.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class Keymaps:
    """Key sequence for each editor action."""

    # Leave the mode (bound globally to enter it)
    toggle: str = "<M-v>"
    toggle_outer: str = "<S-M-v>"

    # Only active inside the mode
    parent: str = "h"
    next: str = "j"
    prev: str = "k"
    child: str = "l"
    swap_next: str = "J"
    swap_prev: str = "K"
    first_sibling: str = "gg"
    last_sibling: str = "G"
    toggle_named: str = "<S-M-n>"  # named mode skips unnamed nodes
    outermost: str = "H"
    innermost: str = "L"
    parent_linewise: str = "<C-h>"
    child_linewise: str = "<C-l>"
    # Node-wise anchor with select_current_node, plain selection without
    visual: str = "v"
    visual_select_back: str = "b"
    append: str = "a"
    prepend: str = "i"
    open_below: str = "o"
    open_above: str = "<S-o>"
    exit: str = "q"
    escape: str = "<Esc>"

    def actions(self) -> dict[str, str]:
        """Key -> action name. Later actions lose key conflicts."""
        bindings: dict[str, str] = {}
        for name, key in asdict(self).items():
            if key and key not in bindings:
                bindings[key] = name
        return bindings


@dataclass
class EditorConfig:
    """Configuration for an Editor session."""

    # False to only report markers instead of a selection
    select_current_node: bool = True

    # Initial navigation mode
    named_mode: bool = True

    # Host grammar
    language: str = "python"

    # Host node type -> grammar used to parse its text as an embedded tree
    injections: dict[str, str] = field(default_factory=dict)

    keymaps: Keymaps = field(default_factory=Keymaps)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EditorConfig":
        """Merge user settings over the defaults."""
        merged = deep_merge(asdict(cls()), data)

        keymap_names = {f.name for f in fields(Keymaps)}
        unknown = set(merged.get("keymaps", {})) - keymap_names
        if unknown:
            raise ValueError(f"Unknown keymaps: {', '.join(sorted(unknown))}")

        known = {f.name for f in fields(cls)}
        for key in set(merged) - known:
            logger.warning(f"Ignoring unknown config key: {key}")
            merged.pop(key)

        merged["keymaps"] = Keymaps(**merged["keymaps"])
        return cls(**merged)

    @classmethod
    def from_file(cls, path: Path | str) -> "EditorConfig":
        """Load configuration from a TOML file."""
        path = Path(path)
        with open(path, "rb") as f:
            data = tomllib.load(f)

        logger.debug(f"Loaded config from {path}")
        return cls.from_dict(data)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base. Override wins."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
