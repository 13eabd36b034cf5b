"""Prepare a project directory for rendering."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from m2cv.executor.npm import NpmExecutor
from m2cv.generator.exporter import RENDERER_PACKAGE
from m2cv.themes import AVAILABLE_THEMES, is_valid_theme, theme_package_name

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SetupReport:
    """What ``ProjectSetupService.prepare`` changed."""

    project_dir: Path
    initialized_package_json: bool = False
    installed_packages: list[str] = field(default_factory=list)
    already_installed: list[str] = field(default_factory=list)


class ProjectSetupService:
    """Create ``package.json`` if needed and install resumed plus a theme."""

    def __init__(self, npm: NpmExecutor) -> None:
        self._npm = npm

    def prepare(
        self,
        project_dir: Path,
        theme: str,
        *,
        cancel_requested: Callable[[], bool] | None = None,
    ) -> SetupReport:
        if not is_valid_theme(theme):
            raise ValueError(
                f"Unknown theme {theme!r}. Choose one of: {', '.join(AVAILABLE_THEMES)}",
            )
        if not project_dir.is_dir():
            raise ValueError(f"Project directory does not exist: {project_dir}")

        report = SetupReport(project_dir=project_dir)
        if not (project_dir / "package.json").exists():
            self._npm.init(project_dir, cancel_requested=cancel_requested)
            report.initialized_package_json = True

        for package in (RENDERER_PACKAGE, theme_package_name(theme)):
            if self._npm.is_installed(project_dir, package):
                report.already_installed.append(package)
            else:
                report.installed_packages.append(package)

        if report.installed_packages:
            self._npm.install(
                project_dir,
                *report.installed_packages,
                cancel_requested=cancel_requested,
            )
        logger.info(
            "Project %s ready (installed=%s, present=%s)",
            project_dir,
            report.installed_packages,
            report.already_installed,
        )
        return report
