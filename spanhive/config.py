"""Configuration loading: TOML file, environment variables and overrides."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from spanhive.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ("spanhive.toml", ".spanhive.toml")
USER_CONFIG_PATH = (".spanhive", "config.toml")

# environment variable -> (section, key)
ENV_VARS = {
    "SPANHIVE_SERVICE_NAME": ("tracing", "service_name"),
    "SPANHIVE_DATASET": ("tracing", "dataset"),
    "SPANHIVE_SAMPLE_RATE": ("tracing", "sample_rate"),
    "SPANHIVE_SAMPLE_EXCLUDES_CHILD_SPANS": ("tracing", "sample_excludes_child_spans"),
    "SPANHIVE_DEBUG": ("tracing", "debug"),
    "SPANHIVE_ENABLE_CONSOLE": ("exporters", "enable_console"),
    "SPANHIVE_ENABLE_LOGGING": ("exporters", "enable_logging"),
    "SPANHIVE_OTLP_ENDPOINT": ("exporters", "otlp_endpoint"),
    "SPANHIVE_API_KEY": ("exporters", "api_key"),
}


class TracingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    service_name: Optional[str] = None
    dataset: Optional[str] = None
    sample_rate: int = Field(default=1, ge=1)
    sample_excludes_child_spans: bool = False
    debug: bool = False


class ExporterSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enable_console: bool = False
    enable_logging: bool = False
    otlp_endpoint: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = Field(default=10.0, gt=0)


class SpanhiveConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tracing: TracingSettings = Field(default_factory=TracingSettings)
    exporters: ExporterSettings = Field(default_factory=ExporterSettings)


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Load a TOML config file.

    Returns an empty dict when the file does not exist.

    Raises:
        ConfigError: the file is not valid TOML
    """
    config_path = Path(path)
    if not config_path.is_file():
        return {}
    try:
        with config_path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError("invalid TOML config file", {"path": str(config_path), "error": exc}) from exc


def find_config_file(start: Optional[str] = None) -> Optional[Path]:
    """Look for a config file in ``start`` (default: cwd), then in the user directory."""
    directory = Path(start) if start else Path.cwd()
    for file_name in CONFIG_FILE_NAMES:
        candidate = directory / file_name
        if candidate.is_file():
            return candidate
    user_file = user_config_file()
    if user_file is not None and user_file.is_file():
        return user_file
    return None


def user_config_file() -> Optional[Path]:
    """Return the per-user config path, or None when there is no home directory."""
    try:
        home = Path.home()
    except RuntimeError:
        return None
    return home.joinpath(*USER_CONFIG_PATH)


def load_env_config(environ: Optional[Dict[str, str]] = None) -> Dict[str, Dict[str, Any]]:
    environ = os.environ if environ is None else environ
    loaded: Dict[str, Dict[str, Any]] = {}
    for var, (section, key) in ENV_VARS.items():
        value = environ.get(var)
        if value is None or value == "":
            continue
        loaded.setdefault(section, {})[key] = value
    return loaded


def validate_config(raw: Dict[str, Any]) -> SpanhiveConfig:
    """
    Validate a nested config dict.

    Raises:
        ConfigError: wrapping the pydantic validation errors
    """
    try:
        return SpanhiveConfig.model_validate(raw)
    except PydanticValidationError as exc:
        raise ConfigError("invalid configuration", {"errors": exc.error_count(), "detail": exc.errors()[0]["msg"]}) from exc


def load_config(
    config_file: Optional[str] = None,
    environ: Optional[Dict[str, str]] = None,
    **overrides: Any,
) -> SpanhiveConfig:
    """
    Build the effective configuration.

    Priority, lowest first: config file, environment variables, keyword
    overrides. Overrides are flat keys of either section, e.g.
    ``load_config(sample_rate=10, enable_console=True)``.
    """
    path = Path(config_file) if config_file else find_config_file()
    merged: Dict[str, Dict[str, Any]] = {"tracing": {}, "exporters": {}}
    if path is not None:
        logger.debug("loading config file %s", path)
        for section, values in load_toml_config(str(path)).items():
            if not isinstance(values, dict):
                raise ConfigError("config sections must be tables", {"section": section})
            merged.setdefault(section, {}).update(values)

    for section, values in load_env_config(environ).items():
        merged[section].update(values)

    for key, value in overrides.items():
        if value is None:
            continue
        if key in TracingSettings.model_fields:
            merged["tracing"][key] = value
        elif key in ExporterSettings.model_fields:
            merged["exporters"][key] = value
        else:
            raise ConfigError("unknown configuration option", {"option": key})

    return validate_config(merged)
