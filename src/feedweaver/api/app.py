"""FastAPI app exposing one editing session to a UI collaborator."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field

from feedweaver.config import Settings, load_settings
from feedweaver.errors import (
    FeedweaverError,
    InvalidPathKey,
    InvalidTarget,
    ParseError,
    PathNotFound,
    UnsupportedMutation,
)
from feedweaver.logging import configure_logging, get_logger
from feedweaver.models.outline import Folder, OutlineNode
from feedweaver.session.editor import OutlineEditor
from feedweaver.tree.paths import NodePath, path_to_key


class MutationRequest(BaseModel):
    """A mutation issued by the UI: ``kind`` applied at ``path`` with ``payload``."""

    kind: str
    path: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)


def _status_for(exc: FeedweaverError) -> int:
    if isinstance(exc, PathNotFound):
        return 404
    if isinstance(exc, InvalidTarget):
        return 409
    if isinstance(exc, (ParseError, InvalidPathKey, UnsupportedMutation)):
        return 400
    return 500


def _http_error(exc: FeedweaverError) -> HTTPException:
    return HTTPException(status_code=_status_for(exc), detail=str(exc))


def _keyed(nodes: tuple[OutlineNode, ...], prefix: NodePath = ()) -> list[dict[str, Any]]:
    """Dump nodes as JSON with the path key of each one, children included."""

    out = []
    for i, node in enumerate(nodes):
        path = prefix + (i,)
        data = node.model_dump(mode="json", exclude={"children"})
        data["key"] = path_to_key(path)
        if isinstance(node, Folder):
            data["children"] = _keyed(node.children, path) if node.children is not None else None
        out.append(data)
    return out


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI app."""

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    logger = get_logger(__name__)

    app = FastAPI(title="Feedweaver", version="0.1.0")
    editor = OutlineEditor(settings=settings)
    app.state.editor = editor

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/document")
    async def import_document(request: Request) -> dict[str, int]:
        body = await request.body()
        logger.info("API import requested", extra={"bytes": len(body)})
        try:
            document = editor.import_text(body)
        except FeedweaverError as e:
            raise _http_error(e) from e
        return {"roots": len(document.nodes)}

    @app.get("/document")
    def get_document() -> dict[str, Any]:
        return {"nodes": _keyed(editor.document.nodes)}

    @app.get("/nodes/{key}")
    def get_node(key: str) -> dict[str, Any]:
        try:
            node = editor.resolve(key)
        except FeedweaverError as e:
            raise _http_error(e) from e
        return node.model_dump(mode="json")

    @app.post("/mutations")
    def apply_mutation(req: MutationRequest) -> dict[str, Any]:
        # Held across apply and snapshot.
        with editor.lock:
            try:
                result = editor.apply(req.kind, req.path, req.payload)
            except FeedweaverError as e:
                raise _http_error(e) from e
            state = editor.state_snapshot()

        response: dict[str, Any] = {"state": state}
        if req.kind == "move" and result is not None:
            response["path"] = path_to_key(result.path)
        elif req.kind == "select" and result is not None:
            response["node"] = result.model_dump(mode="json")
        return response

    @app.get("/export")
    def export_document() -> Response:
        text = editor.export_text()
        return Response(
            content=text,
            media_type=settings.export_media_type,
            headers={"Content-Disposition": f'attachment; filename="{settings.export_filename}"'},
        )

    @app.get("/state")
    def get_state() -> dict[str, Any]:
        return editor.state_snapshot()

    return app
