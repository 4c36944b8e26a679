"""Text and tabular renderings of an accessibility tree."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

import pandas as pd

from .settings import Settings, default_settings
from .tree import AccessibilityTree
from .verbosity import describe_node

INDENT = "  "


def render_outline(
    tree: AccessibilityTree,
    settings: Optional[Settings] = None,
    selections: Optional[Mapping[str, str]] = None,
) -> str:
    """Render the tree as an indented outline, one resolved description per line."""

    settings = settings if settings is not None else default_settings()
    lines = [
        f"{INDENT * node.depth()}{describe_node(node, settings, selections)}"
        for node in tree.nodes()
    ]
    return "\n".join(lines)


def tree_to_table(tree: AccessibilityTree) -> pd.DataFrame:
    """Return the root's rows restricted to the fields referenced by guides."""

    return tree.root.selected.reindex(columns=tree.fields_used)


def export_table(tree: AccessibilityTree, path: Path) -> Path:
    """Write the data table of ``tree`` as CSV or HTML depending on the suffix."""

    path = Path(path)
    table = tree_to_table(tree)
    suffix = path.suffix.lower()
    if suffix not in {".csv", ".html"}:
        raise ValueError(f"Unsupported table format: {path.suffix or '<none>'}")
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".csv":
        table.to_csv(path, index=False)
    else:
        path.write_text(table.to_html(index=False, na_rep=""), encoding="utf-8")
    return path


__all__ = ["export_table", "render_outline", "tree_to_table"]
