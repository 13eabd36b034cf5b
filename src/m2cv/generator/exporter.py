"""PDF export through ``npx resumed``."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from m2cv.errors import PreconditionError, ThemeNotInstalledError
from m2cv.executor.find import FindOptions, find_node_executable
from m2cv.executor.npm import NODE_MODULES_DIR
from m2cv.executor.process import DEFAULT_KILL_GRACE_SECONDS, run_captured
from m2cv.themes import theme_package_name

logger = logging.getLogger(__name__)

RENDERER_PACKAGE = "resumed"


@dataclass(slots=True)
class ExportRequest:
    """One render of a validated JSON Resume file."""

    json_path: Path
    output_path: Path
    theme: str
    project_dir: Path
    cancel_requested: Callable[[], bool] | None = None


class Exporter:
    """Render JSON Resume documents with resumed and an installed theme.

    resumed resolves themes from ``node_modules`` relative to its working
    directory, so the render always runs inside ``project_dir``. ``npx`` is
    resolved lazily so a missing theme fails without touching the toolchain.
    """

    def __init__(
        self,
        npx_path: str | None = None,
        *,
        find_options: FindOptions | None = None,
        timeout_seconds: float | None = None,
        kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS,
    ) -> None:
        self._npx_path = npx_path
        self._find_options = find_options
        self._timeout_seconds = timeout_seconds
        self._kill_grace_seconds = kill_grace_seconds

    @property
    def npx_path(self) -> str:
        if self._npx_path is None:
            self._npx_path = str(find_node_executable("npx", self._find_options))
        return self._npx_path

    def check_theme_installed(self, project_dir: str | os.PathLike[str], theme: str) -> None:
        """Raise unless ``node_modules/jsonresume-theme-<theme>`` exists."""

        package = theme_package_name(theme)
        theme_path = Path(project_dir) / NODE_MODULES_DIR / package
        if not theme_path.exists():
            remedy = f"npm install {package}"
            raise ThemeNotInstalledError(
                f'theme "{theme}" not installed. Run: {remedy}',
                theme=theme,
                package=package,
                remedy=remedy,
            )
        if not theme_path.is_dir():
            raise PreconditionError(
                f"theme path exists but is not a directory: {theme_path}",
                remedy=f"remove {theme_path} and run: npm install {package}",
            )

    def export_pdf(  # noqa: PLR0913
        self,
        json_path: str | os.PathLike[str],
        output_path: str | os.PathLike[str],
        theme: str,
        project_dir: str | os.PathLike[str],
        *,
        cancel_requested: Callable[[], bool] | None = None,
    ) -> None:
        """Run ``npx resumed export`` for ``json_path`` into ``output_path``."""

        self.export(
            ExportRequest(
                json_path=Path(json_path),
                output_path=Path(output_path),
                theme=theme,
                project_dir=Path(project_dir),
                cancel_requested=cancel_requested,
            ),
        )

    def export(self, request: ExportRequest) -> None:
        self.check_theme_installed(request.project_dir, request.theme)

        package = theme_package_name(request.theme)
        # The render runs inside project_dir, so relative paths would not resolve.
        args = [
            self.npx_path,
            RENDERER_PACKAGE,
            "export",
            str(request.json_path.absolute()),
            "--output",
            str(request.output_path.absolute()),
            "--theme",
            package,
        ]
        logger.info(
            "Exporting %s -> %s with %s",
            request.json_path,
            request.output_path,
            package,
        )
        run_captured(
            args,
            cwd=request.project_dir,
            timeout_seconds=self._timeout_seconds,
            cancel_requested=request.cancel_requested,
            kill_grace_seconds=self._kill_grace_seconds,
            label="resumed export",
        )
