"""Tests for the sink configuration loader."""
from __future__ import annotations

import textwrap
from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from rotatelog.config import ConfigLoader, RetentionConfig, SinkConfig


@pytest.fixture()
def loader() -> ConfigLoader:
    return ConfigLoader()


class TestLoadString:
    def test_full_document(self, loader: ConfigLoader) -> None:
        config = loader.load_string(
            textwrap.dedent(
                """
                log_path: /var/log/app/service.log
                redirect_stdout: true
                redirect_stderr: false
                check_interval_seconds: 30
                retention:
                  max_age: P7D
                  wildcard: "service-*.log"
                """
            )
        )
        assert config.log_path == Path("/var/log/app/service.log")
        assert config.redirect_stdout is True
        assert config.redirect_stderr is False
        assert config.check_interval_seconds == 30.0
        assert config.retention is not None
        assert config.retention.max_age == timedelta(days=7)
        assert config.retention.wildcard == "service-*.log"

    def test_defaults(self, loader: ConfigLoader) -> None:
        config = loader.load_string("log_path: app.log\n")
        assert config.redirect_stdout is False
        assert config.redirect_stderr is False
        assert config.check_interval_seconds == 60.0
        assert config.retention is None

    def test_max_age_in_seconds(self, loader: ConfigLoader) -> None:
        config = loader.load_string("log_path: app.log\nretention:\n  max_age: 604800\n")
        assert config.retention is not None
        assert config.retention.max_age == timedelta(days=7)

    def test_unknown_keys_allowed(self, loader: ConfigLoader) -> None:
        config = loader.load_string("log_path: app.log\nformat: json\n")
        assert config.log_path == Path("app.log")

    def test_missing_log_path(self, loader: ConfigLoader) -> None:
        with pytest.raises(ValidationError):
            loader.load_string("")

    def test_negative_max_age_rejected(self, loader: ConfigLoader) -> None:
        with pytest.raises(ValidationError, match="max_age"):
            loader.load_string("log_path: app.log\nretention:\n  max_age: -5\n")

    def test_zero_check_interval_rejected(self, loader: ConfigLoader) -> None:
        with pytest.raises(ValidationError):
            loader.load_string("log_path: app.log\ncheck_interval_seconds: 0\n")


class TestLoadFile:
    def test_load_from_disk(self, loader: ConfigLoader, tmp_path: Path) -> None:
        config_file = tmp_path / "rotatelog.yaml"
        config_file.write_text("log_path: /tmp/t/app.log\n", encoding="utf-8")
        assert loader.load(config_file).log_path == Path("/tmp/t/app.log")

    def test_missing_file(self, loader: ConfigLoader, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "absent.yaml")


class TestModels:
    def test_retention_defaults_disabled(self) -> None:
        retention = RetentionConfig()
        assert retention.max_age == timedelta(0)
        assert retention.wildcard == ""

    def test_sink_config_accepts_str_path(self) -> None:
        assert SinkConfig(log_path="logs/app.log").log_path == Path("logs/app.log")  # type: ignore[arg-type]
