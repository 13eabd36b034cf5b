"""npm executor for local package installation."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from m2cv.errors import ExecutableNotFoundError
from m2cv.executor.find import FindOptions, find_node_executable
from m2cv.executor.process import DEFAULT_KILL_GRACE_SECONDS, run_captured

logger = logging.getLogger(__name__)

NODE_MODULES_DIR = "node_modules"


class NpmExecutor:
    """Run npm subcommands with the working directory pinned to the project.

    npm resolves ``package.json`` and ``node_modules`` relative to its working
    directory, so every call takes the target directory explicitly.
    """

    def __init__(
        self,
        npm_path: str | None = None,
        *,
        find_options: FindOptions | None = None,
        timeout_seconds: float | None = None,
        kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS,
    ) -> None:
        if npm_path:
            self.npm_path = npm_path
        else:
            try:
                self.npm_path = str(find_node_executable("npm", find_options))
            except ExecutableNotFoundError as error:
                raise ExecutableNotFoundError(
                    f"could not find npm: {error}",
                    name=error.name,
                    searched=error.searched,
                ) from error
        self._timeout_seconds = timeout_seconds
        self._kill_grace_seconds = kill_grace_seconds

    def install(
        self,
        directory: str | os.PathLike[str],
        *packages: str,
        cancel_requested: Callable[[], bool] | None = None,
    ) -> None:
        """Run ``npm install <packages...>`` in ``directory``."""

        logger.info("npm install %s in %s", " ".join(packages) or "(package.json)", directory)
        self._run(directory, ["install", *packages], cancel_requested)

    def init(
        self,
        directory: str | os.PathLike[str],
        *,
        cancel_requested: Callable[[], bool] | None = None,
    ) -> None:
        """Run ``npm init -y`` in ``directory``."""

        logger.info("npm init in %s", directory)
        self._run(directory, ["init", "-y"], cancel_requested)

    def is_installed(self, directory: str | os.PathLike[str], package: str) -> bool:
        """Check ``node_modules/<package>`` on disk without invoking npm."""

        return is_package_installed(directory, package)

    def _run(
        self,
        directory: str | os.PathLike[str],
        args: list[str],
        cancel_requested: Callable[[], bool] | None,
    ) -> None:
        run_captured(
            [self.npm_path, *args],
            cwd=directory,
            timeout_seconds=self._timeout_seconds,
            cancel_requested=cancel_requested,
            kill_grace_seconds=self._kill_grace_seconds,
            label=f"npm {args[0]}",
        )


def is_package_installed(directory: str | os.PathLike[str], package: str) -> bool:
    return (Path(directory) / NODE_MODULES_DIR / package).is_dir()
