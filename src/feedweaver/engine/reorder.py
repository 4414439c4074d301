"""Reorder engine: moving a node within or across sibling sequences.

A move takes a source node path and a destination. The destination is a gap path (the index
in a container where the node should land) unless it addresses a folder, in which case the node
is dropped onto that folder and lands at the front of its children. Source and destination are
both interpreted against the snapshot the move starts from.
"""

from __future__ import annotations

from dataclasses import dataclass

from feedweaver.engine.ordering import folders_first
from feedweaver.errors import InvalidMove, InvalidTarget
from feedweaver.logging import get_logger
from feedweaver.models.outline import Folder, OutlineDocument
from feedweaver.tree.navigation import children_at, replace_children, resolve
from feedweaver.tree.paths import NodePath, is_self_or_descendant, path_to_key, split_path

logger = get_logger(__name__)


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a move."""

    document: OutlineDocument
    # Resting place of the moved node, after folders-first ordering.
    path: NodePath
    # Folder the drop was redirected into, addressed in the new snapshot.
    opened: NodePath | None = None


@dataclass(frozen=True)
class DropTarget:
    container: NodePath
    index: int
    # Set when the raw destination addressed a folder.
    folder: NodePath | None = None


def resolve_drop(document: OutlineDocument, dest: NodePath, *, into_folder: bool = True) -> DropTarget:
    """Turn a raw destination into a container and an insertion index.

    Raises:
        PathNotFound: If the destination container does not resolve.
        InvalidMove: If the destination container is a feed.
    """

    container, index = split_path(dest)
    try:
        siblings = children_at(document, container)
    except InvalidTarget as e:
        raise InvalidMove(str(e)) from e

    if into_folder and index < len(siblings) and isinstance(siblings[index], Folder):
        return DropTarget(container=dest, index=0, folder=dest)
    return DropTarget(container=container, index=index)


def _shift_after_removal(path: NodePath, removed: NodePath) -> NodePath:
    """Re-address ``path`` in a snapshot from which ``removed`` was taken out."""

    parent, index = split_path(removed)
    depth = len(parent)
    if len(path) > depth and path[:depth] == parent and path[depth] > index:
        return path[:depth] + (path[depth] - 1,) + path[depth + 1 :]
    return path


def relocate(
    document: OutlineDocument,
    source: NodePath,
    dest: NodePath,
    *,
    into_folder: bool = True,
) -> MoveResult:
    """Move the node at ``source`` to ``dest`` and report where it ended up.

    Within one container the node is spliced out and re-inserted at the literal destination
    index of the shortened sequence. Across containers the destination container is addressed
    as it was before the removal. Either way the receiving sequence is then reordered so that
    folders precede feeds.

    Args:
        document: Snapshot to move within.
        source: Path of the node to move.
        dest: Gap path, or path of a folder to drop onto.
        into_folder: When false, ``dest`` is always a gap even if it addresses a folder.

    Raises:
        PathNotFound: If ``source`` or the destination container does not resolve.
        InvalidMove: If the destination lies inside the source subtree or under a feed.
    """

    moved = resolve(document, source)
    if source == dest:
        return MoveResult(document=document, path=source)

    target = resolve_drop(document, dest, into_folder=into_folder)
    if is_self_or_descendant(target.container, source):
        raise InvalidMove(
            f"cannot move {path_to_key(source)} into its own subtree at {path_to_key(dest)}"
        )

    src_container, src_index = split_path(source)
    remaining = children_at(document, src_container)
    remaining = remaining[:src_index] + remaining[src_index + 1 :]

    if target.container == src_container:
        container = src_container
        pruned = document
        siblings = remaining
    else:
        pruned = replace_children(document, src_container, remaining)
        container = _shift_after_removal(target.container, source)
        siblings = children_at(pruned, container)

    index = min(target.index, len(siblings))
    items = siblings[:index] + (moved,) + siblings[index:]
    ordered, position = folders_first(items, index)
    assert position is not None

    result = MoveResult(
        document=replace_children(pruned, container, ordered),
        path=container + (position,),
        opened=container if target.folder is not None else None,
    )
    logger.debug(
        "move %s -> %s (landed at %s)", path_to_key(source), path_to_key(dest), path_to_key(result.path)
    )
    return result


def move(
    document: OutlineDocument,
    source: NodePath,
    dest: NodePath,
    *,
    into_folder: bool = True,
) -> OutlineDocument:
    """Move a node and return the new snapshot. See :func:`relocate`."""

    return relocate(document, source, dest, into_folder=into_folder).document
