#!/usr/bin/env python3
"""Example: YAML configuration — rotatelog

Load sink settings from YAML and build a RotateLog from them.

Usage:
    python examples/02_yaml_config.py
"""
from __future__ import annotations

import tempfile
import textwrap
from pathlib import Path

from rotatelog import ConfigLoader, RotateLog


def main() -> None:
    log_dir = Path(tempfile.mkdtemp())
    config = ConfigLoader().load_string(
        textwrap.dedent(
            f"""
            log_path: {log_dir / "worker.log"}
            retention:
              max_age: P14D
              wildcard: "worker-*.log"
            """
        )
    )
    print(f"Retention window: {config.retention.max_age if config.retention else 'off'}")

    with RotateLog.from_config(config) as sink:
        sink.write(b"configured from YAML\n")
        print(f"Active file: {sink.current_path}")
        print(f"Next rotation: {sink.next_rotation}")


if __name__ == "__main__":
    main()
