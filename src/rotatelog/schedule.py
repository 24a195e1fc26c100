"""Local-midnight rotation schedule.

Rotation happens at the start of each local calendar day.  The next boundary
is recomputed from the current wall time on every rotation rather than by
adding 24 hours, so days that are 23 or 25 hours long around daylight-saving
transitions are handled correctly.

Example
-------
>>> from datetime import datetime
>>> duration_until_next_rotation(datetime(2024, 3, 15, 22, 30))
datetime.timedelta(seconds=5400)
"""
from __future__ import annotations

from datetime import datetime, time, timedelta

# Substituted for any non-positive delay.
MIN_ROTATION_DELAY: timedelta = timedelta(seconds=1)


def to_local(moment: datetime) -> datetime:
    """Return ``moment`` as an aware datetime in the local zone.

    Naive values are interpreted as local wall time.
    """
    return moment.astimezone()


def next_rotation_time(now: datetime) -> datetime:
    """Return the start of the local calendar day following ``now``.

    Parameters
    ----------
    now:
        Current instant, naive (local wall time) or timezone-aware.

    Returns
    -------
    datetime
        Aware datetime for ``00:00:00`` local time on the next day.
    """
    tomorrow = to_local(now).date() + timedelta(days=1)
    return datetime.combine(tomorrow, time.min).astimezone()


def duration_until_next_rotation(now: datetime) -> timedelta:
    """Return how long to wait from ``now`` until the next local midnight.

    The result is always strictly positive.  When ``now`` is exactly
    midnight the following midnight is returned (a full day away).
    """
    delta = next_rotation_time(now) - to_local(now)
    if delta <= timedelta(0):
        return MIN_ROTATION_DELAY
    return delta
