"""Positional path addressing.

A path walks sibling-list indices from the root: ``(1, 0)`` is the first child of the node at
root index 1. Paths are transient coordinates, recomputed against each snapshot. Their external
form is a key of dash-joined integers (``"1-0"``); the empty path (key ``""``) denotes the root
container itself, never a node.
"""

from __future__ import annotations

from collections.abc import Iterable

from feedweaver.errors import InvalidPathKey, PathNotFound

NodePath = tuple[int, ...]

ROOT: NodePath = ()


def path_to_key(path: Iterable[int]) -> str:
    """Render a path as its canonical key."""

    return "-".join(str(i) for i in path)


def key_to_path(key: str) -> NodePath:
    """Parse a canonical key back to a path.

    Raises:
        InvalidPathKey: If any segment is not a non-negative decimal integer.
    """

    key = key.strip()
    if not key:
        return ROOT
    parts = key.split("-")
    # str.isdigit accepts superscripts and other non-ASCII digits
    if any(not (p.isascii() and p.isdigit()) for p in parts):
        raise InvalidPathKey(f"invalid path key: {key!r}")
    return tuple(int(p) for p in parts)


def as_path(value: str | Iterable[int]) -> NodePath:
    """Accept either a key or a sequence of indices."""

    if isinstance(value, str):
        return key_to_path(value)
    if not isinstance(value, Iterable):
        raise InvalidPathKey(f"invalid path: {value!r}")
    path = tuple(value)
    if any(not isinstance(i, int) or isinstance(i, bool) or i < 0 for i in path):
        raise InvalidPathKey(f"invalid path: {path!r}")
    return path


def split_path(path: NodePath) -> tuple[NodePath, int]:
    """Decompose a node path into ``(container_path, index_in_container)``."""

    if not path:
        raise PathNotFound(path, "the root container is not a node")
    return path[:-1], path[-1]


def is_ancestor(ancestor: NodePath, path: NodePath) -> bool:
    """True when ``ancestor`` is a strict prefix of ``path``."""

    return len(ancestor) < len(path) and path[: len(ancestor)] == ancestor


def is_self_or_descendant(path: NodePath, other: NodePath) -> bool:
    """True when ``path`` equals ``other`` or lies inside its subtree."""

    return path == other or is_ancestor(other, path)
