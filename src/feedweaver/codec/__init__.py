"""Text codec: OPML <-> outline snapshots."""

from __future__ import annotations

from feedweaver.codec.opml import parse, read_opml, serialize, write_opml

__all__ = ["parse", "read_opml", "serialize", "write_opml"]
