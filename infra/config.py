"""Centralized application configuration with schema validation.

This module is intentionally compatibility-first:
- Supports flat environment names (for example ``KEYCORR_MODE``).
- Supports nested names (for example ``CORRELATION__MODE``).
- Optionally reads a local ``.env`` file before process env values.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from threading import Lock

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from contracts.observations import CorrelationMode


class LoggingSettings(BaseModel):
    """Repository-wide logging settings."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)
    override_root_handlers: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        text = str(value or "").strip().upper()
        if text in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            return text
        return "INFO"


class CorrelationSettings(BaseModel):
    """Default alignment policy for the correlation engine."""

    model_config = ConfigDict(frozen=True)

    mode: CorrelationMode = Field(default=CorrelationMode.INTERSECTION)

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: object) -> CorrelationMode:
        if value is None:
            return CorrelationMode.INTERSECTION
        return CorrelationMode.parse(str(value))


class OutputSettings(BaseModel):
    """Optional export targets for correlation tables."""

    model_config = ConfigDict(frozen=True)

    json_out: str | None = Field(default=None)
    parquet_out: str | None = Field(default=None)
    compression: str = Field(default="zstd")

    @field_validator("json_out", "parquet_out", mode="before")
    @classmethod
    def _normalize_optional_text(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("compression")
    @classmethod
    def _normalize_compression(cls, value: str) -> str:
        text = str(value or "").strip().lower()
        if text in {"none", "snappy", "gzip", "brotli", "lz4", "zstd"}:
            return text
        raise ValueError(f"unsupported parquet compression: {value!r}")


class Settings(BaseModel):
    """Top-level settings model."""

    model_config = ConfigDict(frozen=True)

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    correlation: CorrelationSettings = Field(default_factory=CorrelationSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    @classmethod
    def from_env(
        cls,
        *,
        env: Mapping[str, str] | None = None,
        env_file: str = ".env",
    ) -> Settings:
        """Build settings from `.env` then environment variables."""
        runtime_env = os.environ if env is None else env
        merged_env = _merge_env(_load_dotenv(Path(env_file)), runtime_env)
        payload = _build_payload(merged_env)
        return cls.model_validate(payload)


def _load_dotenv(path: Path) -> dict[str, str]:
    """Parse a minimal `.env` file format."""
    if not path.exists() or not path.is_file():
        return {}

    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, raw_value = line.split("=", 1)
        key_clean = key.strip()
        value = raw_value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if key_clean:
            values[key_clean] = value
    return values


def _merge_env(dotenv_values: Mapping[str, str], runtime_env: Mapping[str, str]) -> dict[str, str]:
    """Return env map where process env overrides `.env` values."""
    merged = {str(k): str(v) for k, v in dotenv_values.items()}
    for key, value in runtime_env.items():
        merged[str(key)] = str(value)
    return merged


def _first_non_empty(env: Mapping[str, str], *keys: str) -> str | None:
    """Return the first non-empty value for the provided keys."""
    for key in keys:
        value = str(env.get(key, "")).strip()
        if value:
            return value
    return None


def _build_payload(env: Mapping[str, str]) -> dict[str, object]:
    """Build nested settings payload from env values."""
    logging_settings = {
        "level": _first_non_empty(env, "LOGGING__LEVEL", "KEYCORR_LOG_LEVEL"),
        "json_logs": _first_non_empty(env, "LOGGING__JSON_LOGS", "KEYCORR_LOG_JSON"),
        "override_root_handlers": _first_non_empty(
            env, "LOGGING__OVERRIDE_ROOT_HANDLERS", "KEYCORR_LOG_OVERRIDE"
        ),
    }
    correlation = {
        "mode": _first_non_empty(env, "CORRELATION__MODE", "KEYCORR_MODE"),
    }
    output = {
        "json_out": _first_non_empty(env, "OUTPUT__JSON_OUT", "KEYCORR_JSON_OUT"),
        "parquet_out": _first_non_empty(env, "OUTPUT__PARQUET_OUT", "KEYCORR_PARQUET_OUT"),
        "compression": _first_non_empty(env, "OUTPUT__COMPRESSION", "KEYCORR_PARQUET_COMPRESSION"),
    }
    return {
        "logging": {k: v for k, v in logging_settings.items() if v is not None},
        "correlation": {k: v for k, v in correlation.items() if v is not None},
        "output": {k: v for k, v in output.items() if v is not None},
    }


_SETTINGS_LOCK = Lock()
_SETTINGS_CACHE: Settings | None = None


def get_settings(*, reload: bool = False) -> Settings:
    """Return cached settings, optionally forcing reload from env."""
    global _SETTINGS_CACHE
    with _SETTINGS_LOCK:
        if reload or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = Settings.from_env()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear in-process settings cache."""
    global _SETTINGS_CACHE
    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


__all__ = [
    "CorrelationSettings",
    "LoggingSettings",
    "OutputSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "ValidationError",
]
