from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import allure
import pytest
from conftest import posix_only, read_record

from m2cv.errors import (
    ExecutableNotFoundError,
    PreconditionError,
    ProcessFailedError,
    ThemeNotInstalledError,
)
from m2cv.executor.find import FindOptions
from m2cv.generator.exporter import Exporter

pytestmark = [
    allure.epic("Generate"),
    allure.feature("Artifact Exporter"),
]


def test_missing_theme_fails_before_spawning_renderer(
    fake_executable: Callable[..., Path],
    project_dir: Path,
    tmp_path: Path,
) -> None:
    npx = fake_executable("npx")

    with pytest.raises(ThemeNotInstalledError) as excinfo:
        Exporter(str(npx)).export_pdf(
            tmp_path / "resume.json",
            tmp_path / "resume.pdf",
            "stackoverflow",
            project_dir,
        )

    assert str(excinfo.value) == (
        'theme "stackoverflow" not installed. Run: npm install jsonresume-theme-stackoverflow'
    )
    assert excinfo.value.remedy == "npm install jsonresume-theme-stackoverflow"
    assert not (npx.parent / "npx_impl.record.json").exists()


def test_missing_theme_does_not_need_npx(tmp_path: Path) -> None:
    options = FindOptions(skip_system_paths=True, search_path="", home=tmp_path / "home")
    exporter = Exporter(find_options=options)

    with pytest.raises(ThemeNotInstalledError):
        exporter.export_pdf("r.json", "r.pdf", "even", tmp_path)
    with pytest.raises(ExecutableNotFoundError):
        _ = exporter.npx_path


def test_theme_path_that_is_a_file_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "jsonresume-theme-even").write_text("", "utf-8")

    with pytest.raises(PreconditionError, match="not a directory"):
        Exporter("npx").check_theme_installed(tmp_path, "even")


@posix_only
def test_export_invokes_resumed_inside_project_dir(
    fake_executable: Callable[..., Path],
    project_dir: Path,
    tmp_path: Path,
) -> None:
    npx = fake_executable("npx")
    json_path = tmp_path / "out" / "resume.json"
    pdf_path = tmp_path / "out" / "resume.pdf"

    Exporter(str(npx)).export_pdf(json_path, pdf_path, "even", project_dir)

    record = read_record(npx)
    assert record["argv"] == [
        "resumed",
        "export",
        str(json_path),
        "--output",
        str(pdf_path),
        "--theme",
        "jsonresume-theme-even",
    ]
    assert Path(record["cwd"]).resolve() == project_dir.resolve()


@posix_only
def test_export_failure_includes_renderer_stderr(
    fake_executable: Callable[..., Path],
    project_dir: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    npx = fake_executable("npx")
    monkeypatch.setenv("FAKE_STDERR", "Error: Cannot find module 'puppeteer'")
    monkeypatch.setenv("FAKE_EXIT_CODE", "1")

    with pytest.raises(ProcessFailedError, match="resumed export failed: exit status 1"):
        Exporter(str(npx)).export_pdf(
            tmp_path / "resume.json",
            tmp_path / "resume.pdf",
            "even",
            project_dir,
        )
