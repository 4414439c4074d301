"""Feedweaver: load, edit and save OPML feed-subscription outlines."""

from __future__ import annotations

from feedweaver.codec import parse, serialize
from feedweaver.errors import FeedweaverError, InvalidMove, InvalidPathKey, InvalidTarget, ParseError, PathNotFound
from feedweaver.models import Feed, Folder, NodeEdit, OutlineDocument
from feedweaver.session import OutlineEditor

__all__ = [
    "Feed",
    "FeedweaverError",
    "Folder",
    "InvalidMove",
    "InvalidPathKey",
    "InvalidTarget",
    "NodeEdit",
    "OutlineDocument",
    "OutlineEditor",
    "ParseError",
    "PathNotFound",
    "parse",
    "serialize",
]

__version__ = "0.1.0"
