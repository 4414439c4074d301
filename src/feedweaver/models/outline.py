"""Outline tree models.

A document is an ordered sequence of root nodes. Each node is either a folder (a grouping that
may hold children) or a feed (a leaf carrying subscription URLs). Nodes are frozen: operations
build new nodes along the edited spine and reuse the untouched subtrees.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


NodeKind = Literal["folder", "feed"]


class Folder(BaseModel):
    """A grouping node.

    ``children`` is ``None`` when the node never had a children container and an empty tuple
    for a folder that is present but empty. Both serialize as a self-closed element.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["folder"] = "folder"
    label: str | None = None
    children: tuple["OutlineNode", ...] | None = None


class Feed(BaseModel):
    """A subscription leaf. Feeds never hold children."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["feed"] = "feed"
    label: str | None = None
    feed_url: str | None = None
    site_url: str | None = None
    # Explicit type marker as found in the source, re-emitted on export.
    feed_type: str = "rss"


OutlineNode = Annotated[Folder | Feed, Field(discriminator="kind")]

Folder.model_rebuild()


class OutlineDocument(BaseModel):
    """An immutable snapshot of the whole outline."""

    model_config = ConfigDict(frozen=True)

    nodes: tuple[OutlineNode, ...] = ()


class NodeEdit(BaseModel):
    """Payload of an edit operation.

    The label is always applied; the URLs are applied to feeds only.
    """

    label: str | None = None
    feed_url: str | None = None
    site_url: str | None = None
