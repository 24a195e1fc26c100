#!/usr/bin/env python3
"""Example: Quickstart — rotatelog

Minimal working example: open a daily-rotating sink, write to it, and
route the standard library logger through it.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install rotatelog
"""
from __future__ import annotations

import logging
import tempfile
from datetime import timedelta
from pathlib import Path

import rotatelog


class SinkHandler(logging.Handler):
    """Minimal handler that encodes formatted records into a RotateLog."""

    def __init__(self, sink: rotatelog.RotateLog) -> None:
        super().__init__()
        self._sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        self._sink.write((self.format(record) + "\n").encode("utf-8"))


def main() -> None:
    print(f"rotatelog version: {rotatelog.__version__}")

    log_dir = Path(tempfile.mkdtemp()) / "service"

    # Step 1: Open the sink; files are named service-YYYY-MM-DD.log
    sink = rotatelog.RotateLog(
        log_dir / "service.log",
        max_age=timedelta(days=7),
        wildcard="service-*.log",
    )
    print(f"Writing to {sink.current_path}")

    # Step 2: Raw bytes go straight to disk
    sink.write(b"service starting\n")

    # Step 3: Point a logger at the sink
    app_logger = logging.getLogger("example")
    app_logger.setLevel(logging.INFO)
    app_logger.addHandler(SinkHandler(sink))
    app_logger.info("hello from the example")

    # Step 4: Close stops the midnight timer and closes the file
    sink.close()
    print(sink.current_path.read_text(encoding="utf-8") if sink.current_path else "")


if __name__ == "__main__":
    main()
