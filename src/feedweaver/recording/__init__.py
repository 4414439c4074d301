"""Recording utilities for editor events."""

from __future__ import annotations

from feedweaver.recording.file_recorder import FileEventRecorder, iter_events

__all__ = ["FileEventRecorder", "iter_events"]
