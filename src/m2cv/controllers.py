"""Controllers for m2cv CLI commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from m2cv.config import Settings
from m2cv.errors import M2cvError
from m2cv.executor import ClaudeExecutor, NpmExecutor, find_node_executable
from m2cv.generator import Exporter, GenerateRequest, ResumePipeline, SchemaValidator
from m2cv.optimizer import OPTIMIZED_CV_NAME, CvOptimizer, OptimizeRequest
from m2cv.preflight import check_claude, check_npm, check_resumed
from m2cv.project_setup import ProjectSetupService
from m2cv.prompts import build_resume_prompt
from m2cv.themes import AVAILABLE_THEMES, THEME_DESCRIPTIONS, is_valid_theme, theme_package_name


@dataclass(slots=True)
class GenerateCommand:
    """CLI input for Markdown CV to PDF generation."""

    cv_path: Path
    output_dir: Path | None
    project_dir: Path | None
    theme: str | None
    model: str | None


@dataclass(slots=True)
class OptimizeCommand:
    """CLI input for tailoring a CV to a job description."""

    cv_path: Path
    job_path: Path
    output_path: Path | None
    model: str | None
    ats: bool = False


@dataclass(slots=True)
class SetupCommand:
    """CLI input for project setup."""

    project_dir: Path | None
    theme: str | None


@dataclass(slots=True)
class CheckCommand:
    """CLI input for dependency checks."""

    project_dir: Path | None


@dataclass(slots=True)
class CommandResult:
    """Lines to print plus overall status."""

    lines: list[str] = field(default_factory=list)
    success: bool = True


class CliController:
    """Build executors from settings and run one command."""

    def generate(self, command: GenerateCommand) -> CommandResult:
        settings = Settings.from_env(project_dir=command.project_dir)
        settings.validate()
        theme = command.theme or settings.generation.default_theme
        if not is_valid_theme(theme):
            raise ValueError(
                f"Unknown theme {theme!r}. Choose one of: {', '.join(AVAILABLE_THEMES)}",
            )
        model = command.model or settings.generation.default_model

        cv_markdown = _read_text(command.cv_path, "CV")

        pipeline = ResumePipeline(
            generator=ClaudeExecutor(
                settings.toolchain.claude_path,
                kill_grace_seconds=settings.generation.kill_grace_seconds,
            ),
            validator=SchemaValidator(),
            exporter=_build_exporter(settings),
        )
        result = pipeline.run(
            GenerateRequest(
                prompt=build_resume_prompt(cv_markdown),
                output_dir=command.output_dir or command.cv_path.parent,
                theme=theme,
                project_dir=settings.project_dir,
                model=model,
                timeout_seconds=settings.generation.claude_timeout_seconds,
            ),
        )
        return CommandResult(
            lines=[
                f"JSON written to: {result.json_path}",
                f"PDF written to: {result.pdf_path}",
            ],
        )

    def optimize(self, command: OptimizeCommand) -> CommandResult:
        settings = Settings.from_env()
        settings.validate()
        output_path = command.output_path or command.job_path.parent / OPTIMIZED_CV_NAME

        optimizer = CvOptimizer(
            ClaudeExecutor(
                settings.toolchain.claude_path,
                kill_grace_seconds=settings.generation.kill_grace_seconds,
            ),
        )
        written = optimizer.optimize(
            OptimizeRequest(
                cv_markdown=_read_text(command.cv_path, "CV"),
                job_description=_read_text(command.job_path, "job description"),
                output_path=output_path,
                model=command.model or settings.generation.default_model,
                ats=command.ats,
                timeout_seconds=settings.generation.claude_timeout_seconds,
            ),
        )
        return CommandResult(lines=[f"Optimized CV written to: {written}"])

    def setup(self, command: SetupCommand) -> CommandResult:
        settings = Settings.from_env(project_dir=command.project_dir)
        settings.validate()
        theme = command.theme or settings.generation.default_theme
        npm = NpmExecutor(
            settings.toolchain.npm_path,
            find_options=settings.toolchain.find_options(),
            kill_grace_seconds=settings.generation.kill_grace_seconds,
        )
        report = ProjectSetupService(npm).prepare(settings.project_dir, theme)

        lines = [f"Project directory: {report.project_dir}"]
        if report.initialized_package_json:
            lines.append("Created package.json (npm init -y)")
        if report.installed_packages:
            lines.append(f"Installed: {', '.join(report.installed_packages)}")
        if report.already_installed:
            lines.append(f"Already installed: {', '.join(report.already_installed)}")
        lines.append(f"Theme: {theme} ({theme_package_name(theme)})")
        return CommandResult(lines=lines)

    def check(self, command: CheckCommand) -> CommandResult:
        settings = Settings.from_env(project_dir=command.project_dir)
        settings.validate()
        result = CommandResult()

        try:
            claude = check_claude(settings.toolchain.claude_path)
            result.lines.append(f"claude: ok ({claude})")
        except M2cvError as error:
            result.success = False
            result.lines.append(f"claude: missing\n{error}")

        options = settings.toolchain.find_options()
        if settings.toolchain.npm_path:
            result.lines.append(f"npm: ok ({settings.toolchain.npm_path}, configured)")
        else:
            try:
                result.lines.append(f"npm: ok ({check_npm(options)})")
            except M2cvError as error:
                result.success = False
                result.lines.append(f"npm: missing\n{error}")

        if settings.toolchain.npx_path:
            result.lines.append(f"npx: ok ({settings.toolchain.npx_path}, configured)")
        else:
            try:
                location = find_node_executable("npx", options)
                result.lines.append(f"npx: ok ({location.path}, {location.strategy.value})")
            except M2cvError as error:
                result.success = False
                result.lines.append(f"npx: missing\n{error}")

        try:
            where = check_resumed(settings.project_dir)
            result.lines.append(f"resumed: ok ({where})")
        except M2cvError as error:
            result.success = False
            result.lines.append(f"resumed: missing\n{error}")

        theme = settings.generation.default_theme
        try:
            _build_exporter(settings).check_theme_installed(settings.project_dir, theme)
            result.lines.append(f"theme {theme}: ok")
        except M2cvError as error:
            result.success = False
            result.lines.append(f"theme {theme}: missing\n{error}")

        result.lines.append(f"Check status: {'passed' if result.success else 'failed'}")
        return result

    def themes(self) -> CommandResult:
        return CommandResult(
            lines=[
                f"{name:<14} {THEME_DESCRIPTIONS[name]} ({theme_package_name(name)})"
                for name in AVAILABLE_THEMES
            ],
        )


def _read_text(path: Path, what: str) -> str:
    try:
        return path.read_text("utf-8")
    except OSError as error:
        raise ValueError(f"Failed to read {what} at {path}: {error}") from error


def _build_exporter(settings: Settings) -> Exporter:
    return Exporter(
        settings.toolchain.npx_path,
        find_options=settings.toolchain.find_options(),
        timeout_seconds=settings.generation.export_timeout_seconds,
        kill_grace_seconds=settings.generation.kill_grace_seconds,
    )
