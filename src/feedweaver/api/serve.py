"""Uvicorn server launcher.

Console scripts must point to a callable, not an ASGI app object.
"""

from __future__ import annotations

from typing import Annotated

import typer
import uvicorn

from feedweaver.config import load_settings


def main(
    host: Annotated[str | None, typer.Option(help="Bind host (default: FEEDWEAVER_API_HOST)")] = None,
    port: Annotated[int | None, typer.Option(help="Bind port (default: FEEDWEAVER_API_PORT)")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload (dev)")] = False,
) -> None:
    """Start the Feedweaver API server."""

    settings = load_settings()
    uvicorn.run(
        "feedweaver.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def run() -> None:
    typer.run(main)


if __name__ == "__main__":
    run()
