"""Sink configuration loader with Pydantic v2 validation.

Loads and validates a YAML file describing one rotating log sink into a
typed :class:`SinkConfig`.  Unknown keys are allowed so host applications
can keep their own settings alongside.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load_string('''
... log_path: /var/log/app/service.log
... retention:
...   max_age: P7D
...   wildcard: "service-*.log"
... ''')
>>> config.retention.max_age.days
7
"""
from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator


class RetentionConfig(BaseModel):
    """Retention sweep settings.

    ``max_age`` accepts seconds or an ISO-8601 duration such as ``P7D``.
    The sweep only runs when ``max_age`` is positive and ``wildcard`` is
    non-empty.
    """

    model_config = {"extra": "allow"}

    max_age: timedelta = Field(default=timedelta(0))
    wildcard: str = Field(default="")

    @field_validator("max_age")
    @classmethod
    def validate_max_age(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError(f"max_age must not be negative, got {value}")
        return value


class SinkConfig(BaseModel):
    """Configuration for a single :class:`~rotatelog.sink.RotateLog`."""

    model_config = {"extra": "allow"}

    log_path: Path
    redirect_stdout: bool = Field(default=False)
    redirect_stderr: bool = Field(default=False)
    check_interval_seconds: float = Field(default=60.0, gt=0)
    retention: RetentionConfig | None = Field(default=None)


class ConfigLoader:
    """Loads and validates sink YAML configuration.

    Example
    -------
    >>> loader = ConfigLoader()
    >>> config = loader.load(Path("rotatelog.yaml"))
    """

    def load(self, config_path: Path) -> SinkConfig:
        """Load and validate a sink YAML file.

        Parameters
        ----------
        config_path:
            Path to the YAML file.

        Returns
        -------
        SinkConfig
            Validated configuration object.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        ValueError:
            When the YAML content fails Pydantic validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Sink config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            raw: dict[str, object] = yaml.safe_load(fh) or {}

        return SinkConfig.model_validate(raw)

    def load_string(self, yaml_content: str) -> SinkConfig:
        """Load and validate a YAML string directly."""
        raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        return SinkConfig.model_validate(raw)
