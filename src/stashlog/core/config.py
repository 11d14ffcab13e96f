# src/stashlog/core/config.py
"""
Configuration schema and loading for stashlog.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

Unlike the runtime setters on StashLogger, which silently keep the previous
value, a settings file with invalid values fails loudly at load time.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from stashlog.contracts.enums import FATAL_DISABLED, MAX_LEVEL, MIN_LEVEL, LogLevel, parse_level


def _coerce_level(value: Any) -> Any:
    """Allow level names ("WARN") wherever a level number is expected."""
    if isinstance(value, str):
        stripped = value.strip()
        if stripped == str(FATAL_DISABLED) or stripped.lower() == "disabled":
            return FATAL_DISABLED
        return int(parse_level(stripped))
    return value


class SinkSettings(BaseModel):
    """Sink selection.

    Example YAML:
        sink:
          kind: file
          options: {}
    """

    model_config = {"frozen": True}

    kind: str = Field(default="console", description="Registered sink name (console, file, callback, ...)")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Sink-specific configure() options",
    )

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("sink kind must not be empty")
        return v.strip().lower()


class FileTargetSettings(BaseModel):
    """Where the file sink writes: ``<log_dir>/<subdirectory>/<file_name>.log``."""

    model_config = {"frozen": True}

    log_dir: str = Field(default="_tmp", min_length=1, description="Base log directory")
    subdirectory: str = Field(default="", description="Optional path below log_dir (sanitized)")
    file_name: str = Field(default="logger", min_length=1, description="File name without .log")

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        if "/" in v:
            raise ValueError("file_name must not contain '/'")
        return v


class LoggerSettings(BaseModel):
    """Top-level stashlog configuration.

    Example YAML:
        threshold: WARN
        fatal_threshold: FATAL
        skip_all: false
        show_time: true
        pid: worker-1
        sink:
          kind: file
        file:
          log_dir: /var/log/app
          subdirectory: jobs/nightly
          file_name: import
    """

    model_config = {"frozen": True}

    activate: bool = Field(default=True, description="Master enable switch")
    threshold: int = Field(default=int(LogLevel.WARN), description="Least severe level written immediately")
    fatal_threshold: int = Field(
        default=int(LogLevel.ERROR),
        description="Most permissive level that frames a flush; -1 disables overflow buffering",
    )
    skip_all: bool = Field(default=False, description="Force every accepted entry into the buffer")
    show_time: bool = Field(default=True, description="Render timestamps")
    pid: str | None = Field(default=None, description="Process identifier rendered on each line")
    clear_on_filtered_replay: bool = Field(
        default=False,
        description="Whether show_logs(level) drains the buffer",
    )
    sink: SinkSettings = Field(default_factory=SinkSettings)
    file: FileTargetSettings = Field(default_factory=FileTargetSettings)

    @field_validator("threshold", mode="before")
    @classmethod
    def coerce_threshold(cls, v: Any) -> Any:
        return _coerce_level(v)

    @field_validator("fatal_threshold", mode="before")
    @classmethod
    def coerce_fatal_threshold(cls, v: Any) -> Any:
        return _coerce_level(v)

    @field_validator("threshold")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        if not MIN_LEVEL <= v <= MAX_LEVEL:
            raise ValueError(f"threshold must be between {MIN_LEVEL} and {MAX_LEVEL}, got {v}")
        return v

    @model_validator(mode="after")
    def validate_fatal_threshold(self) -> "LoggerSettings":
        if self.fatal_threshold == FATAL_DISABLED:
            return self
        if not MIN_LEVEL <= self.fatal_threshold < self.threshold:
            raise ValueError(
                f"fatal_threshold must be {FATAL_DISABLED} (disabled) or between {MIN_LEVEL} "
                f"and threshold-1 ({self.threshold - 1}), got {self.fatal_threshold}"
            )
        return self


def load_settings(config_path: Path | None = None) -> LoggerSettings:
    """Load settings from a YAML file with environment variable overrides.

    Without ``config_path`` only environment variables and defaults apply.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (STASHLOG_*) - highest priority
    2. Config file
    3. Defaults from the Pydantic schema - lowest priority

    Environment variable format: STASHLOG_FILE__LOG_DIR for nested keys.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If the config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="STASHLOG",
        settings_files=[] if config_path is None else [str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    return LoggerSettings(**_lower_nested(raw_config))


def _lower_nested(config: dict[str, Any]) -> dict[str, Any]:
    # Env overrides can add uppercase keys to nested sections; sink options stay as given
    result: dict[str, Any] = {}
    for key, value in config.items():
        if isinstance(value, dict) and key in {"sink", "file"}:
            result[key] = {k.lower(): v for k, v in value.items()}
        else:
            result[key] = value
    return result


def dump_settings(settings: LoggerSettings) -> str:
    """Render resolved settings (explicit values plus defaults) as YAML."""
    return yaml.safe_dump(settings.model_dump(mode="json"), sort_keys=False)
