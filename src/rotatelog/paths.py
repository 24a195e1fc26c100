"""Dated file path derivation.

``/var/log/app/service.log`` on 2024-03-15 becomes
``/var/log/app/service-2024-03-15.log``.  The extension is everything from
the final ``.`` of the basename, so ``archive.tar.gz`` keeps only ``.gz``
and a basename without a dot gets no extension at all.

Example
-------
>>> from datetime import date
>>> derive_dated_path("/var/log/app/service.log", date(2024, 3, 15))
PosixPath('/var/log/app/service-2024-03-15.log')
"""
from __future__ import annotations

import os
from datetime import date, datetime
from pathlib import Path

from rotatelog.schedule import to_local

DATE_FORMAT: str = "%Y-%m-%d"


def split_extension(filename: str) -> tuple[str, str]:
    """Split ``filename`` at its final dot into ``(prefix, extension)``.

    The extension keeps the dot and is empty when there is none.
    """
    prefix, dot, suffix = filename.rpartition(".")
    if not dot:
        return filename, ""
    return prefix, dot + suffix


def date_stamp(when: date | datetime) -> str:
    """Format the local date of ``when`` as ``YYYY-MM-DD``."""
    if isinstance(when, datetime):
        when = to_local(when).date()
    # Built by hand so the result never depends on the active locale.
    return f"{when.year:04d}-{when.month:02d}-{when.day:02d}"


def derive_dated_path(base_path: str | os.PathLike[str], when: date | datetime) -> Path:
    """Return the dated sibling of ``base_path`` for the local date of ``when``.

    Parameters
    ----------
    base_path:
        Configured template path (directory plus base filename).
    when:
        A date, or an instant whose local date is used.

    Returns
    -------
    Path
        ``<dir>/<prefix>-YYYY-MM-DD<extension>``.
    """
    base = Path(base_path)
    prefix, extension = split_extension(base.name)
    return base.parent / f"{prefix}-{date_stamp(when)}{extension}"


def qualify_wildcard(base_path: str | os.PathLike[str], wildcard: str) -> str:
    """Prefix ``wildcard`` with the directory of ``base_path``.

    The result is a glob pattern that is fixed for the lifetime of a sink.
    """
    return f"{Path(base_path).parent}{os.sep}{wildcard}"
