"""Daily-rotating byte sink.

:class:`RotateLog` is an append-only byte writer that sends every write to a
file named after the current local date.  At each local midnight a background
thread opens the next dated file, swaps it in under the write lock and closes
the previous one.  Optionally, each rotation launches a detached retention
sweep that deletes aged sibling files.

Writers and the rotator share a single ``threading.Lock``: a write always
lands entirely in one file, and a write never reaches a closed descriptor.

When ``redirect_stdout`` / ``redirect_stderr`` are enabled, every rotation
also points file descriptors 1 / 2 of the *whole process* at the new file.
That affects all code in the process, including C extensions and child
processes, not only callers of this sink.

Example
-------
>>> from datetime import timedelta
>>> from rotatelog.sink import RotateLog
>>> with RotateLog("/tmp/app/service.log", max_age=timedelta(days=7), wildcard="service-*.log") as sink:
...     sink.write(b"service started\\n")
16
"""
from __future__ import annotations

import logging
import os
import sys
import threading
import time
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, BinaryIO, Callable

from rotatelog.errors import (
    RotateLogError,
    RotationError,
    SinkClosedError,
    SinkConfigurationError,
)
from rotatelog.paths import derive_dated_path
from rotatelog.retention import RetentionPolicy, sweep_expired_files
from rotatelog.schedule import next_rotation_time, to_local

if TYPE_CHECKING:
    from rotatelog.config import SinkConfig

logger = logging.getLogger(__name__)

STDOUT_FILENO: int = 1
STDERR_FILENO: int = 2

_DIR_MODE: int = 0o755
_FILE_MODE: int = 0o644
_OPEN_FLAGS: int = os.O_CREAT | os.O_WRONLY | os.O_APPEND | getattr(os, "O_BINARY", 0)
_SWEEP_JOIN_TIMEOUT: float = 5.0


class SinkState(str, Enum):
    """Lifecycle of a :class:`RotateLog`."""

    CONSTRUCTING = "constructing"
    RUNNING = "running"
    CLOSING = "closing"
    CLOSED = "closed"


def open_append(path: Path) -> BinaryIO:
    """Open ``path`` for unbuffered appending, creating it with mode 0644."""
    fd = os.open(path, _OPEN_FLAGS, _FILE_MODE)
    try:
        return os.fdopen(fd, "ab", buffering=0)
    except BaseException:
        os.close(fd)
        raise


def redirect_standard_stream(stream: IO[Any] | None, fileno: int, target: BinaryIO) -> None:
    """Point process file descriptor ``fileno`` at ``target``.

    ``stream`` is the Python-level object wrapping ``fileno``; pending
    output in it is flushed first so it lands in the old destination.
    """
    if stream is not None:
        try:
            stream.flush()
        except (OSError, ValueError):
            pass  # Stream already closed or detached.
    os.dup2(target.fileno(), fileno)


class RotateLog:
    """Append-only byte sink that switches to a new dated file at local midnight.

    Parameters
    ----------
    log_path:
        Template path, e.g. ``/var/log/app/service.log``.  Files are written
        to ``/var/log/app/service-YYYY-MM-DD.log``.
    redirect_stdout:
        Point the process's standard output at the active file after
        every rotation.
    redirect_stderr:
        Same as ``redirect_stdout`` for standard error.
    max_age:
        Retention window.  Together with ``wildcard`` enables a sweep after
        each rotation.
    wildcard:
        Glob pattern, relative to the log directory, of files the
        retention sweep may delete.
    clock:
        Returns the current wall time.  Defaults to :meth:`datetime.now`.
    on_error:
        Called with the exception when a background rotation fails.
        Failures are logged when not supplied.
    check_interval:
        Upper bound in seconds on how long the background thread sleeps
        before re-reading the clock.

    Raises
    ------
    SinkConfigurationError:
        When the log directory cannot be created.
    RotationError:
        When the first dated file cannot be opened.
    """

    def __init__(
        self,
        log_path: str | os.PathLike[str],
        *,
        redirect_stdout: bool = False,
        redirect_stderr: bool = False,
        max_age: timedelta | None = None,
        wildcard: str | None = None,
        clock: Callable[[], datetime] | None = None,
        on_error: Callable[[RotateLogError], None] | None = None,
        check_interval: float = 60.0,
    ) -> None:
        if check_interval <= 0:
            raise ValueError(f"check_interval must be positive, got {check_interval!r}")

        self._base_path = Path(log_path)
        self._redirect_stdout = redirect_stdout
        self._redirect_stderr = redirect_stderr
        self._retention = RetentionPolicy.for_log_path(
            self._base_path, max_age or timedelta(0), wildcard or ""
        )
        self._clock: Callable[[], datetime] = clock or datetime.now
        self._on_error = on_error
        self._check_interval = check_interval

        self._lock = threading.Lock()
        self._shutdown = threading.Event()
        self._file: BinaryIO | None = None
        self._current_path: Path | None = None
        self._rotate_at: datetime | None = None
        self._thread: threading.Thread | None = None
        self._sweepers: list[threading.Thread] = []
        self._sweepers_lock = threading.Lock()
        self._state = SinkState.CONSTRUCTING

        self._prepare_directory()
        self._rotate(self._clock())

        self._state = SinkState.RUNNING
        self._thread = threading.Thread(
            target=self._run,
            name=f"rotatelog-{self._base_path.name}",
            daemon=True,
        )
        self._thread.start()

    @classmethod
    def from_config(cls, config: SinkConfig, **overrides: Any) -> RotateLog:
        """Build a sink from a validated :class:`~rotatelog.config.SinkConfig`.

        Keyword ``overrides`` (e.g. ``clock`` or ``on_error``) are passed
        straight to the constructor and win over config values.
        """
        options: dict[str, Any] = {
            "redirect_stdout": config.redirect_stdout,
            "redirect_stderr": config.redirect_stderr,
            "check_interval": config.check_interval_seconds,
        }
        if config.retention is not None:
            options["max_age"] = config.retention.max_age
            options["wildcard"] = config.retention.wildcard
        options.update(overrides)
        return cls(config.log_path, **options)

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Append ``data`` to the active dated file.

        Returns
        -------
        int
            Number of bytes written, as reported by the file object.

        Raises
        ------
        SinkClosedError:
            When the sink has been closed.
        OSError:
            Propagated unchanged from the underlying write.
        """
        with self._lock:
            if self._file is None:
                raise SinkClosedError(self._base_path)
            return self._file.write(data)

    def flush(self) -> None:
        """No-op; writes go straight to the file descriptor."""

    def writable(self) -> bool:
        return self._state is SinkState.RUNNING

    def force_rotate(self, now: datetime | None = None) -> Path:
        """Rotate immediately instead of waiting for midnight.

        Reopening the same day's file is harmless: appends continue in
        the same file.

        Parameters
        ----------
        now:
            Instant whose local date names the new file.  Defaults to
            the sink's clock.

        Returns
        -------
        Path
            The newly active dated path.
        """
        if self._state is not SinkState.RUNNING:
            raise SinkClosedError(self._base_path)
        return self._rotate(now if now is not None else self._clock())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Stop the background thread and close the active file.

        Waits for the rotation thread to exit and for in-flight retention
        sweeps (up to a few seconds), then closes the file under the write
        lock.  Calling ``close`` again is a no-op.

        Raises
        ------
        OSError:
            Propagated unchanged from closing the file.
        """
        with self._lock:
            if self._state in (SinkState.CLOSING, SinkState.CLOSED):
                return
            self._state = SinkState.CLOSING
        self._shutdown.set()

        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self.wait_for_sweeps(timeout=_SWEEP_JOIN_TIMEOUT)

        with self._lock:
            handle, self._file = self._file, None
            self._state = SinkState.CLOSED
            if handle is not None:
                handle.close()
        logger.debug("Closed log sink %s", self._current_path)

    def wait_for_sweeps(self, timeout: float | None = None) -> bool:
        """Block until running retention sweeps finish.

        Parameters
        ----------
        timeout:
            Overall limit in seconds; ``None`` waits indefinitely.

        Returns
        -------
        bool
            ``True`` when no sweep is still running.
        """
        with self._sweepers_lock:
            pending = list(self._sweepers)
        deadline = None if timeout is None else time.monotonic() + timeout
        for worker in pending:
            if deadline is None:
                worker.join()
            else:
                worker.join(max(deadline - time.monotonic(), 0.0))
        with self._sweepers_lock:
            self._sweepers = [t for t in self._sweepers if t.is_alive()]
            return not self._sweepers

    def __enter__(self) -> RotateLog:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def base_path(self) -> Path:
        """The configured template path."""
        return self._base_path

    @property
    def current_path(self) -> Path | None:
        """The dated path currently receiving writes."""
        return self._current_path

    @property
    def next_rotation(self) -> datetime | None:
        """Local-midnight instant at which the next rotation is due."""
        return self._rotate_at

    @property
    def retention(self) -> RetentionPolicy:
        """The retention policy with its wildcard already qualified."""
        return self._retention

    @property
    def state(self) -> SinkState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is SinkState.CLOSED

    def __repr__(self) -> str:
        return f"RotateLog(base_path={str(self._base_path)!r}, state={self._state.value!r})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _prepare_directory(self) -> None:
        directory = self._base_path.parent
        try:
            directory.mkdir(mode=_DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise SinkConfigurationError(directory, exc.strerror or str(exc)) from exc

    def _rotate(self, now: datetime) -> Path:
        """Swap the active file for the dated file of ``now``.

        The next rotation is rearmed before opening, so a failed open is
        retried at the following midnight while the old file stays active.
        Failures of the swap's side steps are only logged once the lock is
        released, since log handlers may write back into this sink.
        """
        self._rotate_at = next_rotation_time(now)
        new_path = derive_dated_path(self._base_path, now)

        close_error: OSError | None = None
        with self._lock:
            if self._state is SinkState.CLOSED:
                raise SinkClosedError(self._base_path)
            try:
                handle = open_append(new_path)
            except OSError as exc:
                raise RotationError(new_path, exc.strerror or str(exc)) from exc

            previous, self._file = self._file, handle
            self._current_path = new_path
            if previous is not None:
                try:
                    previous.close()
                except OSError as exc:
                    close_error = exc
            redirect_errors = self._redirect_streams(handle)

        if close_error is not None:
            logger.warning("Failed to close superseded log file: %s", close_error)
        for fileno, exc in redirect_errors:
            logger.error("Could not redirect file descriptor %d to log file: %s", fileno, exc)
        logger.info("Log output now going to %s", new_path)
        if self._retention.enabled:
            self._start_sweep(new_path, now)
        return new_path

    def _redirect_streams(self, handle: BinaryIO) -> list[tuple[int, OSError]]:
        """Reassign process-wide stdout/stderr.  Caller holds the lock.

        Returns the descriptors that could not be redirected.
        """
        targets: list[tuple[IO[Any] | None, int]] = []
        if self._redirect_stdout:
            targets.append((sys.stdout, STDOUT_FILENO))
        if self._redirect_stderr:
            targets.append((sys.stderr, STDERR_FILENO))
        failures: list[tuple[int, OSError]] = []
        for stream, fileno in targets:
            try:
                redirect_standard_stream(stream, fileno, handle)
            except OSError as exc:
                failures.append((fileno, exc))
        return failures

    def _start_sweep(self, active_path: Path, now: datetime) -> None:
        policy = self._retention
        worker = threading.Thread(
            target=sweep_expired_files,
            args=(policy.wildcard, policy.max_age, active_path, now),
            name="rotatelog-sweep",
            daemon=True,
        )
        with self._sweepers_lock:
            # close() joins sweepers once; none may start after that.
            if self._state in (SinkState.CLOSING, SinkState.CLOSED):
                return
            try:
                worker.start()
            except RuntimeError as exc:
                logger.warning("Could not start retention sweep for %s: %s", active_path, exc)
                return
            self._sweepers = [t for t in self._sweepers if t.is_alive()]
            self._sweepers.append(worker)

    def _seconds_until_rotation(self) -> float:
        if self._rotate_at is None:
            return self._check_interval
        try:
            remaining = (self._rotate_at - to_local(self._clock())).total_seconds()
        except Exception:
            logger.exception("Clock failed while scheduling rotation for %s", self._base_path)
            return self._check_interval
        return min(max(remaining, 0.0), self._check_interval)

    def _run(self) -> None:
        """Background loop: wait for midnight or shutdown, whichever is first."""
        while not self._shutdown.wait(self._seconds_until_rotation()):
            try:
                self._rotate_if_due()
            except RotateLogError as exc:
                self._report(exc)
            except Exception:
                logger.exception("Unexpected error in rotation thread for %s", self._base_path)

    def _rotate_if_due(self) -> None:
        now = self._clock()
        rotate_at = self._rotate_at
        if rotate_at is not None and to_local(now) < rotate_at:
            return
        self._rotate(now)

    def _report(self, exc: RotateLogError) -> None:
        if self._on_error is None:
            logger.error("Log rotation for %s failed: %s", self._base_path, exc)
            return
        try:
            self._on_error(exc)
        except Exception:
            logger.exception("on_error hook raised while handling: %s", exc)
