"""Error types raised by the outline core.

All of these are local, recoverable conditions: callers report them and keep the current
snapshot. Anything else escaping the core is an internal inconsistency.
"""

from __future__ import annotations


class FeedweaverError(RuntimeError):
    """Base class for recoverable outline errors."""


class ParseError(FeedweaverError):
    """The input text is not a well-formed outline document."""


class InvalidPathKey(FeedweaverError, ValueError):
    """A path key is not a dash-joined list of non-negative integers."""


class PathNotFound(FeedweaverError, LookupError):
    """A path does not resolve against the current snapshot."""

    def __init__(self, path: tuple[int, ...], reason: str = "no node at path") -> None:
        self.path = tuple(path)
        super().__init__(f"{reason}: {'-'.join(str(i) for i in self.path) or '<root>'}")


class InvalidTarget(FeedweaverError):
    """An operation targets a node that cannot hold children."""


class InvalidMove(InvalidTarget):
    """A move would place a node inside its own subtree or under a feed."""


class UnsupportedMutation(FeedweaverError, ValueError):
    """A collaborator asked for a mutation kind the editor does not know."""
