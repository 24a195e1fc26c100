"""Shared fixtures for rotatelog tests."""
from __future__ import annotations

import os
import threading
import time
from datetime import datetime
from typing import Callable, Iterator

import pytest


@pytest.fixture()
def local_tz(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[[str], None]]:
    """Switch the process-local timezone for the duration of a test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset() is not available on this platform")

    def _set(tz: str) -> None:
        monkeypatch.setenv("TZ", tz)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()


@pytest.fixture(autouse=True)
def _utc_local_time(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test in UTC local time where the platform allows it."""
    if not hasattr(time, "tzset"):
        yield
        return
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture()
def umask() -> int:
    """The process umask, which masks the 0755/0644 creation modes."""
    current = os.umask(0)
    os.umask(current)
    return current


class FakeClock:
    """Mutable wall clock shared with the sink's background thread."""

    def __init__(self, start: datetime) -> None:
        self._now = start
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, moment: datetime) -> None:
        with self._lock:
            self._now = moment


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 15, 10, 0, 0))


def _poll(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture()
def wait_until() -> Callable[..., bool]:
    """Poll a predicate until it holds or the timeout elapses."""
    return _poll

