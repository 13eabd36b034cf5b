from __future__ import annotations

from pathlib import Path

import allure
import pytest

from m2cv.config import GenerationSettings, Settings
from m2cv.themes import AVAILABLE_THEMES, is_valid_theme, theme_package_name

pytestmark = [
    allure.epic("Toolchain"),
    allure.feature("Configuration"),
]


def test_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "M2CV_PROJECT_DIR",
        "M2CV_CLAUDE_PATH",
        "M2CV_NPM_PATH",
        "M2CV_DEFAULT_THEME",
        "M2CV_CLAUDE_TIMEOUT_SECONDS",
        "M2CV_SKIP_SYSTEM_PATHS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.project_dir == Path()
    assert settings.toolchain.claude_path == "claude"
    assert settings.toolchain.npm_path is None
    assert settings.generation.default_theme == "even"
    assert settings.generation.claude_timeout_seconds is None
    settings.validate()


def test_from_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("M2CV_PROJECT_DIR", str(tmp_path))
    monkeypatch.setenv("M2CV_NPM_PATH", "/opt/node/bin/npm")
    monkeypatch.setenv("M2CV_DEFAULT_MODEL", "claude-sonnet-4-20250514")
    monkeypatch.setenv("M2CV_DEFAULT_THEME", "macchiato")
    monkeypatch.setenv("M2CV_CLAUDE_TIMEOUT_SECONDS", "600")
    monkeypatch.setenv("M2CV_EXPORT_TIMEOUT_SECONDS", "0")
    monkeypatch.setenv("M2CV_SKIP_SYSTEM_PATHS", "yes")

    settings = Settings.from_env()

    assert settings.project_dir == tmp_path
    assert settings.toolchain.npm_path == "/opt/node/bin/npm"
    assert settings.toolchain.find_options().skip_system_paths
    assert settings.generation.default_model == "claude-sonnet-4-20250514"
    assert settings.generation.default_theme == "macchiato"
    assert settings.generation.claude_timeout_seconds == 600
    assert settings.generation.export_timeout_seconds is None


def test_explicit_project_dir_wins(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("M2CV_PROJECT_DIR", "/somewhere/else")

    assert Settings.from_env(project_dir=tmp_path).project_dir == tmp_path


def test_invalid_boolean_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("M2CV_SKIP_SYSTEM_PATHS", "maybe")

    with pytest.raises(ValueError, match="Invalid boolean value for M2CV_SKIP_SYSTEM_PATHS"):
        Settings.from_env()


def test_validate_rejects_unknown_theme() -> None:
    settings = Settings(generation=GenerationSettings(default_theme="neon"))

    with pytest.raises(ValueError, match="Invalid M2CV_DEFAULT_THEME"):
        settings.validate()


def test_validate_rejects_negative_timeout() -> None:
    settings = Settings(generation=GenerationSettings(claude_timeout_seconds=-5))

    with pytest.raises(ValueError, match="M2CV_CLAUDE_TIMEOUT_SECONDS must be > 0"):
        settings.validate()


def test_theme_registry() -> None:
    assert AVAILABLE_THEMES[0] == "even"
    assert len(AVAILABLE_THEMES) == 8
    assert is_valid_theme("stackoverflow")
    assert not is_valid_theme("jsonresume-theme-even")
    assert theme_package_name("even") == "jsonresume-theme-even"


@pytest.mark.parametrize("raw", ["two", "2s"])
def test_malformed_kill_grace_names_the_variable(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
) -> None:
    monkeypatch.setenv("M2CV_KILL_GRACE_SECONDS", raw)

    with pytest.raises(ValueError, match="Invalid number of seconds for M2CV_KILL_GRACE_SECONDS"):
        Settings.from_env()


def test_kill_grace_is_read_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("M2CV_KILL_GRACE_SECONDS", "0.5")

    assert Settings.from_env().generation.kill_grace_seconds == 0.5


def test_validate_rejects_zero_kill_grace() -> None:
    settings = Settings(generation=GenerationSettings(kill_grace_seconds=0))

    with pytest.raises(ValueError, match="M2CV_KILL_GRACE_SECONDS must be > 0"):
        settings.validate()
