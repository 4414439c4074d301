"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


_session_var: contextvars.ContextVar[str] = contextvars.ContextVar("feedweaver_session", default="-")
_action_var: contextvars.ContextVar[str] = contextvars.ContextVar("feedweaver_action", default="-")


class _ContextFilter(logging.Filter):
    """Inject editing-session context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.session = _session_var.get()  # type: ignore[attr-defined]
        record.action = _action_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def session_context(*, session_id: str, action: str | None = None) -> Any:
    """Temporarily bind editing-session context for structured logging.

    Args:
        session_id: Editor session identifier.
        action: Optional action name (``add``, ``move``...).
    """

    token_session = _session_var.set(session_id)
    token_action = _action_var.set(action or _action_var.get())
    try:
        yield
    finally:
        _session_var.reset(token_session)
        _action_var.reset(token_action)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    # stdout carries command output (e.g. `feedweaver normalize`)
    handler = RichHandler(
        console=Console(stderr=True), rich_tracebacks=True, show_time=True, show_level=True
    )
    handler.addFilter(_ContextFilter())

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s session=%(session)s action=%(action)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # configure_logging may run once per CLI command and once per app factory call
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if isinstance(h, RichHandler):
                h.addFilter(_ContextFilter())
                h.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)


