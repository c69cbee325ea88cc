from __future__ import annotations

from .logging import ConsoleRunLogger, NullRunLogger, RecordingRunLogger, RunLogger

__all__ = [
    "RunLogger",
    "NullRunLogger",
    "ConsoleRunLogger",
    "RecordingRunLogger",
]
