"""Editing session: view state and the editor façade."""

from __future__ import annotations

from feedweaver.session.editor import OutlineEditor
from feedweaver.session.state import EditorState

__all__ = ["EditorState", "OutlineEditor"]
