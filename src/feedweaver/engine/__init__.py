"""Mutation and reorder engines over outline snapshots."""

from __future__ import annotations

from feedweaver.engine.mutations import add, delete, edit, merge_edit, new_node, select
from feedweaver.engine.ordering import folders_first, is_folders_first
from feedweaver.engine.reorder import DropTarget, MoveResult, move, relocate, resolve_drop

__all__ = [
    "DropTarget",
    "MoveResult",
    "add",
    "delete",
    "edit",
    "folders_first",
    "is_folders_first",
    "merge_edit",
    "move",
    "new_node",
    "relocate",
    "resolve_drop",
    "select",
]
