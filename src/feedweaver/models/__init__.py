"""Pydantic models used across the project."""

from __future__ import annotations

from feedweaver.models.outline import Feed, Folder, NodeEdit, NodeKind, OutlineDocument, OutlineNode

__all__ = [
    "Feed",
    "Folder",
    "NodeEdit",
    "NodeKind",
    "OutlineDocument",
    "OutlineNode",
]
