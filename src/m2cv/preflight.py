"""Checks for external tools before running a command."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from m2cv.errors import ExecutableNotFoundError, PreconditionError
from m2cv.executor.find import FindOptions, find_node_executable
from m2cv.executor.npm import NODE_MODULES_DIR
from m2cv.generator.exporter import RENDERER_PACKAGE

_CLAUDE_GUIDANCE = (
    "Install from: https://claude.ai/download\n"
    "Requires: Claude Pro subscription\n"
    "After installing, verify with: claude --version"
)


def check_claude(claude_path: str = "claude", *, search_path: str | None = None) -> Path:
    """Return the resolved claude executable or raise with install guidance."""

    found = shutil.which(claude_path, path=search_path)
    if found is None:
        raise ExecutableNotFoundError(
            f"{claude_path} CLI not found in PATH\n{_CLAUDE_GUIDANCE}",
            name=claude_path,
        )
    return Path(found)


def check_npm(options: FindOptions | None = None) -> Path:
    return find_node_executable("npm", options).path


def check_resumed(
    project_dir: str | os.PathLike[str],
    *,
    search_path: str | None = None,
) -> str:
    """Accept a local ``node_modules/resumed`` or a global resumed on PATH.

    Returns ``"local"`` or ``"global"`` depending on where it was found.
    """

    if (Path(project_dir) / NODE_MODULES_DIR / RENDERER_PACKAGE).is_dir():
        return "local"
    if shutil.which(RENDERER_PACKAGE, path=search_path) is not None:
        return "global"
    raise PreconditionError(
        f"{RENDERER_PACKAGE} not found in node_modules or PATH\n"
        "Install with one of:\n"
        f"  Local:  npm install {RENDERER_PACKAGE} (in your project directory)\n"
        f"  Global: npm install -g {RENDERER_PACKAGE}\n"
        "Or run: m2cv setup (to set up the project directory)",
        remedy=f"npm install {RENDERER_PACKAGE}",
    )
