"""ASGI entrypoint for uvicorn."""

from __future__ import annotations

from feedweaver.api.app import create_app

app = create_app()
