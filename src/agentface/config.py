"""Settings models and the YAML loader behind ``agentface`` commands.

Example ``agentface.yaml``::

    polling:
      url: https://${BUCKET}.s3.amazonaws.com/openclaw-status/default/status.json
      interval_ms: 5000
      max_failures: 3
    animation:
      rate: 60
    publisher:
      upload_url: https://${BUCKET}.s3.amazonaws.com/openclaw-status/default
    telemetry:
      enabled: false
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

DEFAULT_STATUS_URL = "https://example.com/openclaw-status/default/status.json"
DEFAULT_KEY = "status.json"

ENV_STATUS_URL = "AGENTFACE_STATUS_URL"
ENV_UPLOAD_URL = "AGENTFACE_UPLOAD_URL"


class ConfigError(Exception):
    """Raised when a settings file cannot be read, parsed or validated."""


class PollingSettings(BaseModel):
    """Where and how often the status document is fetched."""

    url: str = DEFAULT_STATUS_URL
    interval_ms: int = Field(default=5000, gt=0)
    max_failures: int = Field(default=3, ge=1)
    timeout_s: float = Field(default=5.0, gt=0)


class AnimationSettings(BaseModel):
    """Frame rate and logical canvas size of the heartbeat display."""

    rate: int = Field(default=60, gt=0)
    phase_speed: float = 0.05
    width: int = Field(default=400, gt=0)
    height: int = Field(default=200, gt=0)


class PublisherSettings(BaseModel):
    """Destination of producer-side uploads."""

    upload_url: str | None = None
    key: str = DEFAULT_KEY
    headers: dict[str, str] = Field(default_factory=dict)


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class FaceSettings(BaseModel):
    """Top-level settings document."""

    polling: PollingSettings = Field(default_factory=PollingSettings)
    animation: AnimationSettings = Field(default_factory=AnimationSettings)
    publisher: PublisherSettings = Field(default_factory=PublisherSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)


class SettingsLoader:
    """Load and validate a settings YAML file into :class:`FaceSettings`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> FaceSettings:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.  An empty file
        yields the defaults.

        Raises:
            ConfigError: On read errors, YAML parse errors or schema
                validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Settings YAML must be a mapping")

        try:
            return FaceSettings.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def load_settings(path: str | Path | None = None, **overrides: Any) -> FaceSettings:
    """Resolve settings from a file, the environment and explicit overrides.

    Precedence, lowest first: built-in defaults, the settings file,
    ``AGENTFACE_STATUS_URL`` / ``AGENTFACE_UPLOAD_URL`` (only where the file
    leaves the value unset), then *overrides*.  Override keys name a section
    field as ``<section>_<field>`` (``polling_url``, ``animation_rate``);
    ``None`` values are ignored so CLI options can be passed through as-is.

    Raises:
        ConfigError: If the file is invalid or an override is unknown or
            fails validation.
    """
    settings = SettingsLoader(Path(path)).load() if path is not None else FaceSettings()
    data = settings.model_dump()
    explicit = settings.model_dump(exclude_unset=True)

    env_url = os.environ.get(ENV_STATUS_URL)
    if env_url and "url" not in explicit.get("polling", {}):
        data["polling"]["url"] = env_url
    env_upload = os.environ.get(ENV_UPLOAD_URL)
    if env_upload and "upload_url" not in explicit.get("publisher", {}):
        data["publisher"]["upload_url"] = env_upload

    for name, value in overrides.items():
        if value is None:
            continue
        section, _, field = name.partition("_")
        if section not in data or field not in data[section]:
            raise ConfigError(f"Unknown setting override: {name}")
        data[section][field] = value

    try:
        return FaceSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
