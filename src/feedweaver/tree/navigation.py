"""Navigation and copy-on-write primitives over outline snapshots."""

from __future__ import annotations

from typing import Iterator, Sequence

from feedweaver.errors import InvalidTarget, PathNotFound
from feedweaver.models.outline import Feed, Folder, OutlineDocument, OutlineNode
from feedweaver.tree.paths import NodePath


def resolve(document: OutlineDocument, path: NodePath) -> OutlineNode:
    """Return the node addressed by ``path``.

    Raises:
        PathNotFound: If an index is out of range, or a non-terminal step addresses a node
            without (enough) children. The empty path is not a node either.
    """

    if not path:
        raise PathNotFound(path, "the root container is not a node")

    siblings: Sequence[OutlineNode] = document.nodes
    node: OutlineNode | None = None
    for depth, index in enumerate(path):
        if node is not None:
            children = node.children if isinstance(node, Folder) else None
            if children is None:
                raise PathNotFound(path[: depth + 1], "node has no children")
            siblings = children
        if index < 0 or index >= len(siblings):
            raise PathNotFound(path[: depth + 1])
        node = siblings[index]
    assert node is not None
    return node


def children_at(document: OutlineDocument, container: NodePath) -> tuple[OutlineNode, ...]:
    """Return the sibling sequence addressed by a container path.

    The empty path yields the root sequence; a folder with absent children yields ``()``.

    Raises:
        PathNotFound: If the container path does not resolve.
        InvalidTarget: If the container is a feed.
    """

    if not container:
        return document.nodes
    node = resolve(document, container)
    if isinstance(node, Feed):
        raise InvalidTarget(f"feed at {'-'.join(map(str, container))} cannot hold children")
    return node.children or ()


def replace_children(
    document: OutlineDocument, container: NodePath, children: Sequence[OutlineNode]
) -> OutlineDocument:
    """Return a new snapshot with the sequence at ``container`` replaced.

    Only the nodes on the spine from the root to ``container`` are rebuilt; the folder at
    ``container`` receives a children tuple even if it had none before.
    """

    return OutlineDocument(nodes=_rebuild(document.nodes, container, tuple(children), container))


def _rebuild(
    siblings: tuple[OutlineNode, ...],
    rest: NodePath,
    children: tuple[OutlineNode, ...],
    full: NodePath,
) -> tuple[OutlineNode, ...]:
    if not rest:
        return children

    index, tail = rest[0], rest[1:]
    if index < 0 or index >= len(siblings):
        raise PathNotFound(full[: len(full) - len(tail)])
    node = siblings[index]
    if isinstance(node, Feed):
        raise InvalidTarget(f"feed at {'-'.join(map(str, full[: len(full) - len(tail)]))} cannot hold children")
    if not isinstance(node, Folder):
        raise TypeError(f"unexpected node type {type(node).__name__}")

    updated = node.model_copy(update={"children": _rebuild(node.children or (), tail, children, full)})
    return siblings[:index] + (updated,) + siblings[index + 1 :]


def replace_node(document: OutlineDocument, path: NodePath, node: OutlineNode) -> OutlineDocument:
    """Return a new snapshot with the node at ``path`` substituted."""

    resolve(document, path)
    container, index = path[:-1], path[-1]
    siblings = children_at(document, container)
    return replace_children(document, container, siblings[:index] + (node,) + siblings[index + 1 :])


def walk(document: OutlineDocument) -> Iterator[tuple[NodePath, OutlineNode]]:
    """Yield ``(path, node)`` pairs depth-first, parents before children."""

    stack: list[tuple[NodePath, OutlineNode]] = [((i,), n) for i, n in enumerate(document.nodes)]
    stack.reverse()
    while stack:
        path, node = stack.pop()
        yield path, node
        if isinstance(node, Folder) and node.children:
            stack.extend(reversed([(path + (i,), c) for i, c in enumerate(node.children)]))


def count_nodes(tree: OutlineDocument | Folder | Feed) -> int:
    """Count nodes in a document, or in a subtree including its root."""

    if isinstance(tree, OutlineDocument):
        return sum(count_nodes(n) for n in tree.nodes)
    if isinstance(tree, Folder):
        return 1 + sum(count_nodes(c) for c in tree.children or ())
    return 1
