from __future__ import annotations

from dataclasses import dataclass, field

from feedweaver.tree.paths import NodePath, path_to_key


@dataclass
class EditorState:
    """View state kept beside the document, never serialized with it.

    ``expanded`` holds path keys of folders shown open. ``dragging`` and ``drag_expanded``
    only live for the duration of a drag session.
    """

    expanded: set[str] = field(default_factory=set)
    selected: NodePath | None = None
    dragging: NodePath | None = None
    drag_expanded: set[str] = field(default_factory=set)

    def expand(self, path: NodePath) -> bool:
        key = path_to_key(path)
        if key in self.expanded:
            return False
        self.expanded.add(key)
        return True

    def is_expanded(self, path: NodePath) -> bool:
        return path_to_key(path) in self.expanded

    def end_drag(self) -> None:
        self.dragging = None
        self.drag_expanded.clear()

    def reset(self) -> None:
        self.expanded.clear()
        self.selected = None
        self.end_drag()

    def snapshot(self) -> dict[str, str | list[str] | None]:
        return {
            "selected": path_to_key(self.selected) if self.selected is not None else None,
            "expanded": sorted(self.expanded),
            "dragging": path_to_key(self.dragging) if self.dragging is not None else None,
        }
