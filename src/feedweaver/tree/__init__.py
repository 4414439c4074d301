"""Path addressing and navigation primitives."""

from __future__ import annotations

from feedweaver.tree.navigation import children_at, count_nodes, replace_children, replace_node, resolve, walk
from feedweaver.tree.paths import (
    ROOT,
    NodePath,
    as_path,
    is_ancestor,
    is_self_or_descendant,
    key_to_path,
    path_to_key,
    split_path,
)

__all__ = [
    "ROOT",
    "NodePath",
    "as_path",
    "children_at",
    "count_nodes",
    "is_ancestor",
    "is_self_or_descendant",
    "key_to_path",
    "path_to_key",
    "replace_children",
    "replace_node",
    "resolve",
    "split_path",
    "walk",
]
