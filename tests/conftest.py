"""Shared test fixtures."""

from __future__ import annotations

import json
import os
import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

posix_only = pytest.mark.skipif(os.name == "nt", reason="uses sh launchers and POSIX signals")


def write_fake_executable(path: Path, body: str) -> Path:
    """Write a Python script behind an executable ``sh`` launcher at ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    implementation = path.parent / f"{path.name}_impl.py"
    implementation.write_text(body.strip() + "\n", "utf-8")
    path.write_text(
        f'#!/usr/bin/env sh\nexec "{sys.executable}" "{implementation}" "$@"\n',
        "utf-8",
    )
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


# Records argv, cwd and stdin as JSON next to the launcher, then echoes stdin.
RECORDING_SCRIPT = """
import json
import os
import sys
from pathlib import Path

stdin_text = sys.stdin.read()
record = {"argv": sys.argv[1:], "cwd": os.getcwd(), "stdin": stdin_text}
Path(__file__).with_suffix(".record.json").write_text(json.dumps(record), "utf-8")
sys.stdout.write(os.environ.get("FAKE_STDOUT", stdin_text))
sys.stderr.write(os.environ.get("FAKE_STDERR", ""))
sys.exit(int(os.environ.get("FAKE_EXIT_CODE", "0")))
"""


def read_record(launcher: Path) -> dict:
    return json.loads((launcher.parent / f"{launcher.name}_impl.record.json").read_text("utf-8"))


@pytest.fixture()
def fake_executable(tmp_path: Path) -> Callable[..., Path]:
    """Factory for fake executables under ``tmp_path/bin`` (or a given directory)."""

    def _make(name: str, body: str = RECORDING_SCRIPT, directory: Path | None = None) -> Path:
        return write_fake_executable((directory or tmp_path / "bin") / name, body)

    return _make


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """Project directory with resumed and the ``even`` theme installed."""

    project = tmp_path / "project"
    (project / "node_modules" / "resumed").mkdir(parents=True)
    (project / "node_modules" / "jsonresume-theme-even").mkdir(parents=True)
    return project
