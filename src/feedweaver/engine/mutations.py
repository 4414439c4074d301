"""Mutation engine: select, edit, add and delete.

Every operation takes a snapshot and returns a new one; the input is never modified.
"""

from __future__ import annotations

from feedweaver.config import Settings
from feedweaver.engine.ordering import folders_first
from feedweaver.errors import UnsupportedMutation
from feedweaver.logging import get_logger
from feedweaver.models.outline import Feed, Folder, NodeEdit, NodeKind, OutlineDocument, OutlineNode
from feedweaver.tree.navigation import children_at, replace_children, replace_node, resolve
from feedweaver.tree.paths import ROOT, NodePath, path_to_key, split_path

logger = get_logger(__name__)


def select(document: OutlineDocument, path: NodePath) -> OutlineNode:
    """Resolve the node at ``path``; ``PathNotFound`` propagates to the caller."""

    return resolve(document, path)


def edit(document: OutlineDocument, path: NodePath, changes: NodeEdit) -> OutlineDocument:
    """Apply ``changes`` to the node at ``path``.

    The label is always applied. Feed and site URLs only apply to feeds; on a folder they are
    ignored without error.
    """

    node = resolve(document, path)
    if isinstance(node, Feed):
        updated: OutlineNode = node.model_copy(
            update={"label": changes.label, "feed_url": changes.feed_url, "site_url": changes.site_url}
        )
    else:
        updated = node.model_copy(update={"label": changes.label})

    logger.debug("edit %s label=%r", path_to_key(path), changes.label)
    return replace_node(document, path, updated)


def merge_edit(node: OutlineNode, changes: NodeEdit) -> NodeEdit:
    """Overlay the fields explicitly set in ``changes`` on the current values of ``node``."""

    current = NodeEdit(
        label=node.label,
        feed_url=node.feed_url if isinstance(node, Feed) else None,
        site_url=node.site_url if isinstance(node, Feed) else None,
    )
    return current.model_copy(update=changes.model_dump(include=changes.model_fields_set))


def new_node(kind: NodeKind, settings: Settings | None = None) -> OutlineNode:
    """Build a default node of ``kind``.

    Folders start with an empty children tuple; feeds carry placeholder URLs.
    """

    settings = settings or Settings()
    if kind == "folder":
        return Folder(label=settings.new_folder_label, children=())
    if kind == "feed":
        return Feed(
            label=settings.new_feed_label,
            feed_url=settings.new_feed_url,
            site_url=settings.new_feed_site_url,
        )
    raise UnsupportedMutation(f"unknown node kind: {kind!r}")


def add(
    document: OutlineDocument,
    target: NodePath | None,
    kind: NodeKind,
    *,
    settings: Settings | None = None,
) -> OutlineDocument:
    """Insert a default node of ``kind``.

    The node goes into the root sequence when ``target`` is ``None``, otherwise into the
    children of the folder at ``target`` (created when absent). Folders are inserted at the
    front and feeds at the end.

    Raises:
        PathNotFound: If ``target`` does not resolve.
        InvalidTarget: If ``target`` is a feed.
    """

    container = target or ROOT
    siblings = children_at(document, container)
    node = new_node(kind, settings)
    if isinstance(node, Folder):
        items = (node,) + siblings
    else:
        items = siblings + (node,)

    ordered, _ = folders_first(items)
    logger.debug("add %s into %r", kind, path_to_key(container) or "<root>")
    return replace_children(document, container, ordered)


def delete(document: OutlineDocument, path: NodePath) -> OutlineDocument:
    """Remove the node at ``path`` together with its subtree."""

    resolve(document, path)
    container, index = split_path(path)
    siblings = children_at(document, container)
    logger.debug("delete %s", path_to_key(path))
    return replace_children(document, container, siblings[:index] + siblings[index + 1 :])

