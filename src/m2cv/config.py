"""Runtime configuration for executors and the generate flow."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from m2cv.executor.find import FindOptions
from m2cv.executor.process import DEFAULT_KILL_GRACE_SECONDS
from m2cv.themes import AVAILABLE_THEMES, DEFAULT_THEME, is_valid_theme


@dataclass(slots=True)
class ToolchainSettings:
    """Executable overrides and resolver behavior."""

    claude_path: str = "claude"
    npm_path: str | None = None
    npx_path: str | None = None
    skip_system_paths: bool = False

    def find_options(self) -> FindOptions:
        return FindOptions(skip_system_paths=self.skip_system_paths)


@dataclass(slots=True)
class GenerationSettings:
    """Defaults for the generate command."""

    default_model: str | None = None
    default_theme: str = DEFAULT_THEME
    claude_timeout_seconds: float | None = None
    export_timeout_seconds: float | None = 300.0
    kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    project_dir: Path = Path()
    toolchain: ToolchainSettings = field(default_factory=ToolchainSettings)
    generation: GenerationSettings = field(default_factory=GenerationSettings)

    @classmethod
    def from_env(cls, project_dir: Path | None = None) -> Settings:
        """Load settings from ``M2CV_*`` environment variables."""

        return cls(
            project_dir=project_dir or Path(os.getenv("M2CV_PROJECT_DIR", ".")),
            toolchain=ToolchainSettings(
                claude_path=os.getenv("M2CV_CLAUDE_PATH", "claude").strip() or "claude",
                npm_path=_env_optional("M2CV_NPM_PATH"),
                npx_path=_env_optional("M2CV_NPX_PATH"),
                skip_system_paths=_env_bool("M2CV_SKIP_SYSTEM_PATHS", default=False),
            ),
            generation=GenerationSettings(
                default_model=_env_optional("M2CV_DEFAULT_MODEL"),
                default_theme=os.getenv("M2CV_DEFAULT_THEME", DEFAULT_THEME).strip()
                or DEFAULT_THEME,
                claude_timeout_seconds=_env_seconds("M2CV_CLAUDE_TIMEOUT_SECONDS", None),
                export_timeout_seconds=_env_seconds("M2CV_EXPORT_TIMEOUT_SECONDS", 300.0),
                kill_grace_seconds=_env_float(
                    "M2CV_KILL_GRACE_SECONDS",
                    DEFAULT_KILL_GRACE_SECONDS,
                ),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error for values the executors cannot use."""

        if not is_valid_theme(self.generation.default_theme):
            raise ValueError(
                f"Invalid M2CV_DEFAULT_THEME: {self.generation.default_theme!r}. "
                f"Choose one of: {', '.join(AVAILABLE_THEMES)}.",
            )
        if not self.generation.kill_grace_seconds > 0:
            raise ValueError("M2CV_KILL_GRACE_SECONDS must be > 0.")
        for name, value in (
            ("M2CV_CLAUDE_TIMEOUT_SECONDS", self.generation.claude_timeout_seconds),
            ("M2CV_EXPORT_TIMEOUT_SECONDS", self.generation.export_timeout_seconds),
        ):
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be > 0 (or 0 to disable).")


def _env_optional(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as error:
        raise ValueError(f"Invalid number of seconds for {name}: {raw!r}") from error


def _env_seconds(name: str, default: float | None) -> float | None:
    """Like ``_env_float``, but ``0`` disables the timeout."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = _env_float(name, 0.0)
    if value == 0:
        return None
    return value


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
