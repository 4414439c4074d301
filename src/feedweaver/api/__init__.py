"""HTTP API for a UI collaborator."""

from __future__ import annotations

from feedweaver.api.app import create_app

__all__ = ["create_app"]
