"""Retention sweep for aged sibling log files.

After each rotation the sink may delete files in the log directory that
match an operator-supplied wildcard and were last modified at or before
``now - max_age``.  The currently active file is never removed.

The sweep is best-effort housekeeping: stat and unlink failures are logged
at DEBUG level and skipped, and nothing is raised to the caller.

Example
-------
>>> from datetime import datetime, timedelta
>>> policy = RetentionPolicy.for_log_path("/var/log/app/app.log", timedelta(days=7), "app-*.log")
>>> policy.wildcard
'/var/log/app/app-*.log'
>>> removed = sweep_expired_files(
...     policy.wildcard, policy.max_age, "/var/log/app/app-2024-03-15.log", datetime.now()
... )
"""
from __future__ import annotations

import glob
import logging
import os
import stat
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

from rotatelog.paths import qualify_wildcard
from rotatelog.schedule import to_local

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetentionPolicy:
    """Age limit and candidate pattern for the retention sweep.

    Attributes
    ----------
    max_age:
        Files whose modification time is at or before ``now - max_age``
        are deleted.
    wildcard:
        Fully qualified glob pattern selecting candidate files.
    """

    max_age: timedelta
    wildcard: str

    @classmethod
    def for_log_path(
        cls,
        log_path: str | os.PathLike[str],
        max_age: timedelta,
        wildcard: str,
    ) -> RetentionPolicy:
        """Build a policy whose wildcard is relative to the log directory."""
        qualified = qualify_wildcard(log_path, wildcard) if wildcard else ""
        return cls(max_age=max_age, wildcard=qualified)

    @property
    def enabled(self) -> bool:
        """``True`` when both a positive age and a wildcard are configured."""
        return self.max_age > timedelta(0) and bool(self.wildcard)


def sweep_expired_files(
    pattern: str,
    max_age: timedelta,
    active_path: str | os.PathLike[str],
    now: datetime,
) -> list[Path]:
    """Delete files matching ``pattern`` that are older than ``max_age``.

    Parameters
    ----------
    pattern:
        Fully qualified glob pattern.
    max_age:
        Retention window measured back from ``now``.
    active_path:
        The file currently receiving writes.  Any match sharing its
        basename is kept regardless of age.
    now:
        Reference instant for the cutoff (naive values are local time).

    Returns
    -------
    list[Path]
        Paths that were actually removed.
    """
    cutoff = to_local(now).timestamp() - max_age.total_seconds()
    active_name = Path(active_path).name

    expired: list[Path] = []
    for match in sorted(glob.glob(pattern)):
        try:
            info = os.stat(match)
        except OSError:
            continue
        if not stat.S_ISREG(info.st_mode):
            continue
        if info.st_mtime > cutoff:
            continue
        candidate = Path(match)
        if candidate.name == active_name:
            continue
        expired.append(candidate)

    removed: list[Path] = []
    for candidate in expired:
        try:
            candidate.unlink()
        except OSError as exc:
            logger.debug("Could not remove expired log file %s: %s", candidate, exc)
            continue
        removed.append(candidate)
        logger.info("Removed expired log file %s", candidate)
    return removed
