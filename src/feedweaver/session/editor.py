"""Editing session façade.

`OutlineEditor` owns the current snapshot and the view state beside it. Every operation reads
the current snapshot, builds a new one through the engines and swaps it in only once the engine
returned, so a failed operation leaves both the snapshot and the view state untouched.
Operations hold the editor lock from the read to the swap, so callers on different threads
(e.g. the API's threadpool) never see each other's intermediate state.
"""

from __future__ import annotations

import contextlib
import threading
import uuid
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from feedweaver.codec import opml
from feedweaver.config import Settings
from feedweaver.engine import mutations
from feedweaver.engine.reorder import MoveResult, relocate
from feedweaver.errors import FeedweaverError, UnsupportedMutation
from feedweaver.events import EditAction, EditorEvent
from feedweaver.logging import get_logger, session_context
from feedweaver.models.outline import Folder, NodeEdit, NodeKind, OutlineDocument, OutlineNode
from feedweaver.recording.file_recorder import FileEventRecorder
from feedweaver.session.state import EditorState
from feedweaver.tree.navigation import resolve
from feedweaver.tree.paths import NodePath, as_path, is_self_or_descendant, path_to_key

logger = get_logger(__name__)

PathRef = str | Iterable[int]

OPML_SUFFIXES = {".opml", ".xml"}

_Payload = TypeVar("_Payload", bound=BaseModel)


class AddPayload(BaseModel):
    kind: NodeKind = "feed"


class MovePayload(BaseModel):
    dest: str
    into_folder: bool = True


def _validate(model: type[_Payload], payload: Mapping[str, Any]) -> _Payload:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise UnsupportedMutation(f"invalid payload: {e.errors(include_url=False)}") from e


class OutlineEditor:
    """Single-user editor over one outline document."""

    def __init__(
        self,
        document: OutlineDocument | None = None,
        *,
        settings: Settings | None = None,
        recorder: FileEventRecorder | None = None,
        session_id: str | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.state = EditorState()
        self.session_id = session_id or uuid.uuid4().hex[:12]
        # Reentrant: apply() and drop() call other locked operations.
        self.lock = threading.RLock()
        self._document = document or OutlineDocument()
        self._recorder = recorder
        if self._recorder is None and self.settings.journal_path is not None:
            self._recorder = FileEventRecorder(self.settings.journal_path)
        self._seq = 0

    @property
    def document(self) -> OutlineDocument:
        return self._document

    @contextlib.contextmanager
    def _action(self, action: EditAction) -> Iterator[None]:
        with self.lock, session_context(session_id=self.session_id, action=action.value):
            try:
                yield
            except FeedweaverError as e:
                logger.warning("%s rejected: %s", action.value, e)
                raise

    def _emit(self, action: EditAction, path: NodePath | None = None, **data: str | int | bool | None) -> None:
        if self._recorder is None:
            return
        self._seq += 1
        self._recorder.append(
            EditorEvent(
                session_id=self.session_id,
                seq=self._seq,
                action=action,
                path=path_to_key(path) if path is not None else None,
                data=data,
            )
        )

    def _export_options(self) -> dict[str, str]:
        return {
            "title": self.settings.export_title,
            "version": self.settings.opml_version,
            "indent": self.settings.indent,
        }

    # Import / export

    def import_text(self, text: str | bytes) -> OutlineDocument:
        """Replace the document with parsed ``text``.

        Raises:
            ParseError: The current document and view state are kept.
        """

        with self._action(EditAction.IMPORT):
            document = opml.parse(text)
            self._document = document
            self.state.reset()
            logger.info("Imported %d root outline(s)", len(document.nodes))
            self._emit(EditAction.IMPORT, roots=len(document.nodes))
        return document

    def import_file(self, path: Path) -> OutlineDocument:
        if path.suffix.lower() not in OPML_SUFFIXES:
            logger.debug("Importing %s without an .opml/.xml suffix", path)
        return self.import_text(path.read_bytes())

    def export_text(self) -> str:
        with self._action(EditAction.EXPORT):
            text = opml.serialize(self._document, **self._export_options())
            self._emit(EditAction.EXPORT, chars=len(text))
        return text

    def export_file(self, path: Path | None = None) -> Path:
        """Write the export to ``path`` (defaults to the configured export filename)."""

        with self._action(EditAction.EXPORT):
            target = opml.write_opml(
                path or Path(self.settings.export_filename), self._document, **self._export_options()
            )
            self._emit(EditAction.EXPORT, file=str(target))
        return target

    # Navigation and view state

    def resolve(self, path: PathRef) -> OutlineNode:
        return resolve(self._document, as_path(path))

    def select(self, path: PathRef) -> OutlineNode:
        with self._action(EditAction.SELECT):
            target = as_path(path)
            node = mutations.select(self._document, target)
            self.state.selected = target
            self._emit(EditAction.SELECT, target)
        return node

    def clear_selection(self) -> None:
        with self.lock:
            self.state.selected = None

    @property
    def selected_node(self) -> OutlineNode | None:
        with self.lock:
            if self.state.selected is None:
                return None
            return resolve(self._document, self.state.selected)

    def state_snapshot(self) -> dict[str, str | list[str] | None]:
        with self.lock:
            return self.state.snapshot()

    def toggle(self, path: PathRef) -> bool:
        """Flip the expansion of a folder; returns whether it is now expanded."""

        target = as_path(path)
        with self.lock:
            if not isinstance(resolve(self._document, target), Folder):
                return False
            key = path_to_key(target)
            if key in self.state.expanded:
                self.state.expanded.discard(key)
                return False
            self.state.expanded.add(key)
            return True

    # Mutations

    def edit(self, changes: NodeEdit, path: PathRef | None = None, *, merge: bool = False) -> OutlineDocument:
        """Edit the node at ``path``, or the selected node. Without either this is a no-op.

        With ``merge``, only the fields explicitly set on ``changes`` replace the node's values.
        """

        with self._action(EditAction.EDIT):
            target = as_path(path) if path is not None else self.state.selected
            if target is None:
                return self._document
            if merge:
                changes = mutations.merge_edit(resolve(self._document, target), changes)
            self._document = mutations.edit(self._document, target, changes)
            self._emit(EditAction.EDIT, target, label=changes.label)
            return self._document

    def add(self, kind: NodeKind, target: PathRef | None = None) -> OutlineDocument:
        """Add a default node into ``target``, the selected folder, or the root."""

        with self._action(EditAction.ADD):
            container = as_path(target) if target is not None else self.state.selected
            self._document = mutations.add(self._document, container, kind, settings=self.settings)
            if container:
                self.state.expand(container)
            self._emit(EditAction.ADD, container, kind=kind)
            return self._document

    def delete(self, path: PathRef | None = None) -> OutlineDocument:
        """Delete the node at ``path``, or the selected node.

        The selection is cleared when it pointed at the deleted node or anywhere inside it.
        """

        with self._action(EditAction.DELETE):
            target = as_path(path) if path is not None else self.state.selected
            if target is None:
                return self._document
            self._document = mutations.delete(self._document, target)
            if self.state.selected is not None and is_self_or_descendant(self.state.selected, target):
                self.state.selected = None
            self._emit(EditAction.DELETE, target)
            return self._document

    def move(self, source: PathRef, dest: PathRef, *, into_folder: bool = True) -> MoveResult:
        """Move a node; a selection on the moved subtree follows it to its new path."""

        with self._action(EditAction.MOVE):
            src = as_path(source)
            dst = as_path(dest)
            result = relocate(self._document, src, dst, into_folder=into_folder)
            self._document = result.document
            if result.opened is not None:
                self.state.expand(result.opened)
            selected = self.state.selected
            if selected is not None and src != result.path and is_self_or_descendant(selected, src):
                self.state.selected = result.path + selected[len(src) :]
            self._emit(EditAction.MOVE, src, dest=path_to_key(dst), landed=path_to_key(result.path))
        return result

    # Drag session

    def begin_drag(self, path: PathRef) -> OutlineNode:
        with self._action(EditAction.DRAG_START):
            source = as_path(path)
            node = resolve(self._document, source)
            self.state.end_drag()
            self.state.dragging = source
            self._emit(EditAction.DRAG_START, source)
        return node

    def hover(self, path: PathRef) -> bool:
        """Auto-expand a collapsed folder under the pointer.

        The expansion outlives the drag session, even if it ends without a drop.
        """

        with self._action(EditAction.DRAG_HOVER):
            target = as_path(path)
            if self.state.dragging is None:
                return False
            node = resolve(self._document, target)
            if not isinstance(node, Folder) or not self.state.expand(target):
                return False
            self.state.drag_expanded.add(path_to_key(target))
            self._emit(EditAction.DRAG_HOVER, target)
            return True

    def drop(self, dest: PathRef | None, *, into_folder: bool = True) -> MoveResult | None:
        """Finish the drag session, moving the dragged node when there is a target."""

        with self.lock:
            source = self.state.dragging
            try:
                if source is None or dest is None:
                    return None
                return self.move(source, dest, into_folder=into_folder)
            finally:
                self.state.end_drag()

    def cancel_drag(self) -> None:
        with self.lock:
            if self.state.dragging is not None:
                self._emit(EditAction.DRAG_CANCEL, self.state.dragging)
            self.state.end_drag()

    # Dispatch

    def apply(self, kind: str, path: PathRef | None = None, payload: Mapping[str, Any] | None = None) -> Any:
        """Apply a mutation by name, as issued by an outer collaborator.

        Supported kinds are ``select``, ``edit``, ``add``, ``delete`` and ``move``. Payloads are
        validated first; a malformed one raises ``UnsupportedMutation``. An ``edit`` payload only
        replaces the fields it names.
        """

        payload = payload or {}
        with self.lock:
            if kind == "select":
                if path is None:
                    self.clear_selection()
                    return None
                return self.select(path)
            if kind == "edit":
                return self.edit(_validate(NodeEdit, payload), path, merge=True)
            if kind == "add":
                return self.add(_validate(AddPayload, payload).kind, path)
            if kind == "delete":
                return self.delete(path)
            if kind == "move":
                if path is None:
                    raise UnsupportedMutation("move needs a source path")
                move = _validate(MovePayload, payload)
                return self.move(path, move.dest, into_folder=move.into_folder)
        raise UnsupportedMutation(f"unsupported mutation kind: {kind!r}")
