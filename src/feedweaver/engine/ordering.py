"""Sibling ordering rule: folders before feeds."""

from __future__ import annotations

from typing import Sequence

from feedweaver.models.outline import Folder, OutlineNode


def folders_first(
    nodes: Sequence[OutlineNode], tracked: int | None = None
) -> tuple[tuple[OutlineNode, ...], int | None]:
    """Stable partial reorder putting every folder ahead of every feed.

    Relative order inside each kind is kept. ``tracked`` is an index into ``nodes``; its
    position after the reorder is returned alongside the new sequence.
    """

    order = sorted(range(len(nodes)), key=lambda i: not isinstance(nodes[i], Folder))
    ordered = tuple(nodes[i] for i in order)
    if tracked is None:
        return ordered, None
    return ordered, order.index(tracked)


def is_folders_first(nodes: Sequence[OutlineNode]) -> bool:
    """True when no feed precedes a folder."""

    seen_feed = False
    for node in nodes:
        if isinstance(node, Folder):
            if seen_feed:
                return False
        else:
            seen_feed = True
    return True
