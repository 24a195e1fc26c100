"""Exception hierarchy for rotatelog.

Construction failures are fatal and surface as :class:`SinkConfigurationError`
or :class:`RotationError`.  Runtime rotation failures raised inside the
background thread are handed to the sink's ``on_error`` hook instead of
propagating.
"""
from __future__ import annotations

from pathlib import Path


class RotateLogError(Exception):
    """Base class for all rotatelog errors."""


class SinkConfigurationError(RotateLogError):
    """Raised when the log directory cannot be prepared.

    Attributes
    ----------
    path:
        The directory that could not be created.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot create log directory '{path}': {reason}")


class RotationError(RotateLogError):
    """Raised when a dated log file cannot be opened.

    The previously active file (if any) stays open and keeps receiving
    writes.

    Attributes
    ----------
    path:
        The dated path that failed to open.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open log file '{path}': {reason}")


class SinkClosedError(RotateLogError, ValueError):
    """Raised on write or rotation after the sink has been closed."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Log sink for '{path}' is closed")
