"""Centralized application configuration with schema validation.

This module is intentionally compatibility-first:
- Supports short flat environment names (for example ``EXPORT_ROOT``).
- Supports nested names (for example ``EXPORT__ROOT_DIR``) for consistency.
- Optionally reads a local ``.env`` file before process env values.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from threading import Lock

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

_DEFAULT_EXCLUDED_TAGS = ("fine", "legal", "private")
_LINK_STYLES = {"absolute", "relative"}
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(value: object, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    return default


class ExportConfig(BaseModel):
    """Where the export lives and how the views are materialized."""

    model_config = ConfigDict(frozen=True)

    root_dir: str = Field(default=".", description="Export root holding manifest.json and stored files")
    manifest_name: str = Field(default="manifest.json")
    link_style: str = Field(default="absolute")
    dry_run: bool = Field(default=False)

    @field_validator("root_dir", "manifest_name", mode="before")
    @classmethod
    def _normalize_required_text(cls, value: object) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("must be a non-empty string")
        return text

    @field_validator("link_style", mode="before")
    @classmethod
    def _normalize_link_style(cls, value: object) -> str:
        text = str(value or "").strip().lower()
        if text in _LINK_STYLES:
            return text
        return "absolute"

    @field_validator("dry_run", mode="before")
    @classmethod
    def _normalize_dry_run(cls, value: object) -> bool:
        return _parse_bool(value, default=False)


class PolicyConfig(BaseModel):
    """Skip policy and view naming settings."""

    model_config = ConfigDict(frozen=True)

    excluded_tags: list[str] = Field(default_factory=lambda: list(_DEFAULT_EXCLUDED_TAGS))
    excluded_suffix: str = Field(default="2", min_length=1)
    placeholder_correspondent: str = Field(default="dummy", min_length=1)

    @field_validator("excluded_tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: object) -> list[str]:
        """Accept list or comma-separated string and normalize to unique ordered list.

        Tag names are matched case-sensitively, so only whitespace is stripped.
        """
        if value is None:
            return list(_DEFAULT_EXCLUDED_TAGS)

        items: list[str]
        if isinstance(value, str):
            items = [part.strip() for part in value.split(",") if part.strip()]
        elif isinstance(value, (list, tuple, set, frozenset)):
            items = [str(part).strip() for part in value if str(part).strip()]
        else:
            raise ValueError("policy.excluded_tags must be a list[str] or comma-separated string")

        seen: set[str] = set()
        ordered: list[str] = []
        for tag in items:
            if tag not in seen:
                seen.add(tag)
                ordered.append(tag)
        return ordered

    @field_validator("placeholder_correspondent", mode="before")
    @classmethod
    def _strip_placeholder(cls, value: object) -> str:
        return str(value if value is not None else "dummy").strip()


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

    @field_validator("json_logs", "override_root_handlers", mode="before")
    @classmethod
    def _normalize_flags(cls, value: object) -> bool:
        return _parse_bool(value, default=False)


class Settings(BaseModel):
    """Top-level settings model."""

    model_config = ConfigDict(frozen=True)

    export: ExportConfig = Field(default_factory=ExportConfig)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

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
    export = {
        "root_dir": _first_non_empty(env, "EXPORT__ROOT_DIR", "EXPORT_ROOT"),
        "manifest_name": _first_non_empty(env, "EXPORT__MANIFEST_NAME", "MANIFEST_NAME"),
        "link_style": _first_non_empty(env, "EXPORT__LINK_STYLE", "LINK_STYLE"),
        "dry_run": _first_non_empty(env, "EXPORT__DRY_RUN", "DRY_RUN"),
    }
    policy = {
        "excluded_tags": _first_non_empty(env, "POLICY__EXCLUDED_TAGS", "EXCLUDED_TAGS"),
        "excluded_suffix": _first_non_empty(env, "POLICY__EXCLUDED_SUFFIX", "EXCLUDED_SUFFIX"),
        "placeholder_correspondent": _first_non_empty(
            env, "POLICY__PLACEHOLDER_CORRESPONDENT", "PLACEHOLDER_CORRESPONDENT"
        ),
    }
    logging_settings = {
        "level": _first_non_empty(env, "LOGGING__LEVEL", "EXPORTVIEWS_LOG_LEVEL"),
        "json_logs": _first_non_empty(env, "LOGGING__JSON_LOGS", "EXPORTVIEWS_LOG_JSON"),
        "override_root_handlers": _first_non_empty(
            env, "LOGGING__OVERRIDE_ROOT_HANDLERS", "EXPORTVIEWS_LOG_OVERRIDE"
        ),
    }
    return {
        "export": {k: v for k, v in export.items() if v is not None},
        "policy": {k: v for k, v in policy.items() if v is not None},
        "logging": {k: v for k, v in logging_settings.items() if v is not None},
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
    "ExportConfig",
    "LoggingSettings",
    "PolicyConfig",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "ValidationError",
]
