"""Unit tests for centralized configuration parsing and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from infra.config import Settings, ValidationError, clear_settings_cache, get_settings


def test_defaults_reproduce_fixed_policy() -> None:
    settings = Settings.from_env(env={}, env_file=".missing.env")

    assert settings.export.root_dir == "."
    assert settings.export.manifest_name == "manifest.json"
    assert settings.export.link_style == "absolute"
    assert settings.export.dry_run is False
    assert settings.policy.excluded_tags == ["fine", "legal", "private"]
    assert settings.policy.excluded_suffix == "2"
    assert settings.policy.placeholder_correspondent == "dummy"
    assert settings.logging.level == "INFO"


def test_settings_reads_flat_env_keys() -> None:
    """Short flat env keys should map to nested settings models."""
    env = {
        "EXPORT_ROOT": "/data/export",
        "LINK_STYLE": "Relative",
        "DRY_RUN": "1",
        "EXCLUDED_TAGS": "secret,draft,secret",
        "EXCLUDED_SUFFIX": "-old",
        "EXPORTVIEWS_LOG_LEVEL": "debug",
        "EXPORTVIEWS_LOG_JSON": "true",
    }
    settings = Settings.from_env(env=env, env_file=".missing.env")

    assert settings.export.root_dir == "/data/export"
    assert settings.export.link_style == "relative"
    assert settings.export.dry_run is True
    assert settings.policy.excluded_tags == ["secret", "draft"]
    assert settings.policy.excluded_suffix == "-old"
    assert settings.logging.level == "DEBUG"
    assert settings.logging.json_logs is True


def test_nested_keys_win_over_flat_keys() -> None:
    env = {"EXPORT__ROOT_DIR": "/nested", "EXPORT_ROOT": "/flat"}
    settings = Settings.from_env(env=env, env_file=".missing.env")
    assert settings.export.root_dir == "/nested"


def test_invalid_values_normalize() -> None:
    settings = Settings.from_env(
        env={"EXPORT__LINK_STYLE": "hardlink", "LOGGING__LEVEL": "chatty"},
        env_file=".missing.env",
    )
    assert settings.export.link_style == "absolute"
    assert settings.logging.level == "INFO"


def test_blank_placeholder_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings.model_validate({"policy": {"placeholder_correspondent": "   "}})


def test_dotenv_is_read_and_process_env_wins(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# export settings\nEXPORT_ROOT='/from/dotenv'\nEXCLUDED_SUFFIX=\"x\"\n",
        encoding="utf-8",
    )
    settings = Settings.from_env(env={"EXCLUDED_SUFFIX": "9"}, env_file=str(env_file))

    assert settings.export.root_dir == "/from/dotenv"
    assert settings.policy.excluded_suffix == "9"


def test_get_settings_reload_rebuilds_cache(monkeypatch: Any) -> None:
    """Reload should rebuild cached settings from current process env."""
    clear_settings_cache()
    monkeypatch.setenv("EXPORT_ROOT", "/first")
    first = get_settings(reload=True)

    monkeypatch.setenv("EXPORT_ROOT", "/second")
    second = get_settings(reload=True)
    cached = get_settings()

    assert first.export.root_dir == "/first"
    assert second.export.root_dir == "/second"
    assert cached is second
    clear_settings_cache()
