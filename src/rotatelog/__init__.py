"""rotatelog — daily-rotating, append-only log sink.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import rotatelog
>>> sink = rotatelog.RotateLog("/tmp/app/service.log")
>>> sink.write(b"hello\\n")
6
>>> sink.close()
"""
from __future__ import annotations

__version__: str = "0.1.0"

from rotatelog.config import ConfigLoader, RetentionConfig, SinkConfig
from rotatelog.errors import (
    RotateLogError,
    RotationError,
    SinkClosedError,
    SinkConfigurationError,
)
from rotatelog.paths import derive_dated_path, qualify_wildcard
from rotatelog.retention import RetentionPolicy, sweep_expired_files
from rotatelog.schedule import duration_until_next_rotation, next_rotation_time
from rotatelog.sink import RotateLog, SinkState

__all__ = [
    "__version__",
    # Sink
    "RotateLog",
    "SinkState",
    # Schedule and paths
    "derive_dated_path",
    "duration_until_next_rotation",
    "next_rotation_time",
    "qualify_wildcard",
    # Retention
    "RetentionPolicy",
    "sweep_expired_files",
    # Configuration
    "ConfigLoader",
    "RetentionConfig",
    "SinkConfig",
    # Errors
    "RotateLogError",
    "RotationError",
    "SinkClosedError",
    "SinkConfigurationError",
]
