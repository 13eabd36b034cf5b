"""Locate Node.js toolchain executables across version-manager installs.

Lookup order is fixed so results are reproducible:

1. the search path (``PATH`` unless overridden),
2. ``~/.nvm/current/bin``, ``~/.volta/bin``, ``~/.asdf/shims``,
   ``~/.fnm/current/bin``,
3. ``/usr/local/bin``, ``/opt/homebrew/bin`` (skippable).

The fallback list is hand-maintained; a new version manager needs a new entry
in ``_HOME_FALLBACKS``.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from m2cv.errors import ExecutableNotFoundError

logger = logging.getLogger(__name__)

_HOME_FALLBACKS: tuple[tuple[str, ...], ...] = (
    (".nvm", "current", "bin"),
    (".volta", "bin"),
    (".asdf", "shims"),
    (".fnm", "current", "bin"),
)
_SYSTEM_FALLBACKS: tuple[Path, ...] = (
    Path("/usr/local/bin"),
    Path("/opt/homebrew/bin"),
)

_INSTALL_GUIDANCE = (
    "Please install Node.js using one of:\n"
    "  - nvm: https://github.com/nvm-sh/nvm\n"
    "  - volta: https://volta.sh/\n"
    "  - asdf: https://asdf-vm.com/\n"
    "  - fnm: https://github.com/Schniz/fnm\n"
    "  - Direct download: https://nodejs.org/"
)


class LookupStrategy(str, Enum):
    """How an executable was found."""

    SEARCH_PATH = "search_path"
    FALLBACK_DIRECTORY = "fallback_directory"


@dataclass(slots=True, frozen=True)
class FindOptions:
    """Injectable lookup state.

    ``search_path=None`` uses the process ``PATH``; an empty string disables
    search-path lookup. ``home=None`` uses the current user's home directory.
    """

    skip_system_paths: bool = False
    search_path: str | None = None
    home: Path | None = None


@dataclass(slots=True, frozen=True)
class ExecutableLocation:
    """Resolved absolute executable path plus the strategy that found it."""

    path: Path
    strategy: LookupStrategy

    def __str__(self) -> str:
        return str(self.path)


def fallback_directories(options: FindOptions | None = None) -> list[Path]:
    """Return fallback directories in search order."""

    opts = options or FindOptions()
    home = opts.home if opts.home is not None else _user_home()

    directories: list[Path] = []
    if home is not None:
        directories.extend(home.joinpath(*parts) for parts in _HOME_FALLBACKS)
    if not opts.skip_system_paths:
        directories.extend(_SYSTEM_FALLBACKS)
    return directories


def find_node_executable(name: str, options: FindOptions | None = None) -> ExecutableLocation:
    """Resolve ``name`` via the search path, then the fallback directories."""

    opts = options or FindOptions()

    found = shutil.which(name, path=opts.search_path)
    if found is not None:
        location = ExecutableLocation(
            path=Path(found).absolute(),
            strategy=LookupStrategy.SEARCH_PATH,
        )
        logger.debug("Resolved %s on search path: %s", name, location.path)
        return location

    directories = fallback_directories(opts)
    for directory in directories:
        for candidate_name in _candidate_names(name):
            candidate = directory / candidate_name
            if _is_executable_file(candidate):
                logger.debug("Resolved %s in fallback directory: %s", name, candidate)
                return ExecutableLocation(
                    path=candidate.absolute(),
                    strategy=LookupStrategy.FALLBACK_DIRECTORY,
                )

    searched = "\n".join(f"  - {directory}" for directory in directories)
    raise ExecutableNotFoundError(
        f"{name} not found in PATH or common Node.js version manager locations.\n"
        f"{_INSTALL_GUIDANCE}\n"
        f"Searched:\n{searched}",
        name=name,
        searched=directories,
    )


def _candidate_names(name: str) -> list[str]:
    if os.name != "nt" or Path(name).suffix:
        return [name]
    extensions = os.environ.get("PATHEXT", ".COM;.EXE;.BAT;.CMD").split(os.pathsep)
    return [name, *(f"{name}{ext.lower()}" for ext in extensions if ext)]


def _is_executable_file(candidate: Path) -> bool:
    try:
        mode = candidate.stat().st_mode
    except OSError:
        return False
    if not stat.S_ISREG(mode):
        return False
    if os.name == "nt":
        return True
    return bool(mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


def _user_home() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None
