"""Editor action journal.

Each operation the editor applies is described by an event. Events can be appended to JSONL so
a session can be inspected later. The journal is a log; it is not replayed to undo edits.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class EditAction(str, Enum):
    """Operations recorded by the editor."""

    IMPORT = "import"
    EXPORT = "export"
    SELECT = "select"
    EDIT = "edit"
    ADD = "add"
    DELETE = "delete"
    MOVE = "move"

    # Drag session
    DRAG_START = "drag_start"
    DRAG_HOVER = "drag_hover"
    DRAG_CANCEL = "drag_cancel"


class EditorEvent(BaseModel):
    """A single applied operation."""

    session_id: str
    seq: int = Field(ge=1)
    ts: datetime = Field(default_factory=lambda: datetime.now(UTC))

    action: EditAction
    path: str | None = None

    data: dict[str, str | int | bool | None] = Field(default_factory=dict)
