"""CLI entrypoint for m2cv."""

import logging
from pathlib import Path

import rich_click as click

from m2cv import __version__
from m2cv.controllers import (
    CheckCommand,
    CliController,
    CommandResult,
    GenerateCommand,
    OptimizeCommand,
    SetupCommand,
)
from m2cv.errors import M2cvError
from m2cv.themes import AVAILABLE_THEMES

click.rich_click.USE_MARKDOWN = True
CONTROLLER = CliController()

_PROJECT_DIR_HELP = (
    "Directory whose node_modules holds resumed and the theme. "
    "Defaults to M2CV_PROJECT_DIR or the current directory."
)


@click.group()
@click.version_option(version=__version__, prog_name="m2cv")
@click.option("-v", "--verbose", is_flag=True, help="Log subprocess activity to stderr.")
def m2cv(verbose: bool) -> None:
    """Markdown CV to themed PDF via claude and resumed."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@m2cv.command("generate")
@click.argument("cv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Where resume.json and resume.pdf are written. Defaults to the CV's folder.",
)
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help=_PROJECT_DIR_HELP,
)
@click.option(
    "--theme",
    type=click.Choice(AVAILABLE_THEMES),
    default=None,
    help="Override the JSON Resume theme (M2CV_DEFAULT_THEME).",
)
@click.option("-m", "--model", default=None, help="Override the Claude model.")
def generate(
    cv_path: Path,
    output_dir: Path | None,
    project_dir: Path | None,
    theme: str | None,
    model: str | None,
) -> None:
    """Convert a Markdown CV to JSON Resume with claude and export a PDF.

    Writes `resume.json` (intermediate, useful for debugging) and `resume.pdf`.
    """

    _emit(
        _guarded(
            lambda: CONTROLLER.generate(
                GenerateCommand(
                    cv_path=cv_path,
                    output_dir=output_dir,
                    project_dir=project_dir,
                    theme=theme,
                    model=model,
                ),
            ),
        ),
    )


@m2cv.command("optimize")
@click.argument("cv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("job_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the tailored CV. Defaults to optimized-cv.md beside JOB_PATH.",
)
@click.option("--ats", is_flag=True, help="Optimize for Applicant Tracking Systems.")
@click.option("-m", "--model", default=None, help="Override the Claude model.")
def optimize(
    cv_path: Path,
    job_path: Path,
    output_path: Path | None,
    ats: bool,
    model: str | None,
) -> None:
    """Tailor a Markdown CV to the job description in JOB_PATH.

    With `--ats` the output keeps standard headings and the job's keywords.
    """

    _emit(
        _guarded(
            lambda: CONTROLLER.optimize(
                OptimizeCommand(
                    cv_path=cv_path,
                    job_path=job_path,
                    output_path=output_path,
                    model=model,
                    ats=ats,
                ),
            ),
        ),
    )


@m2cv.command("setup")
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help=_PROJECT_DIR_HELP,
)
@click.option(
    "--theme",
    type=click.Choice(AVAILABLE_THEMES),
    default=None,
    help="Theme to install (M2CV_DEFAULT_THEME).",
)
def setup(project_dir: Path | None, theme: str | None) -> None:
    """Create package.json if needed and install resumed plus the theme."""

    _emit(
        _guarded(
            lambda: CONTROLLER.setup(SetupCommand(project_dir=project_dir, theme=theme)),
        ),
    )


@m2cv.command("check")
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help=_PROJECT_DIR_HELP,
)
def check(project_dir: Path | None) -> None:
    """Verify claude, npm, npx, resumed and the default theme are available."""

    result = _guarded(lambda: CONTROLLER.check(CheckCommand(project_dir=project_dir)))
    _emit(result)
    if not result.success:
        raise click.ClickException("Dependency check failed.")


@m2cv.command("themes")
def themes() -> None:
    """List supported JSON Resume themes."""

    _emit(CONTROLLER.themes())


def _guarded(action) -> CommandResult:
    try:
        return action()
    except (M2cvError, ValueError) as error:
        raise click.ClickException(str(error)) from error


def _emit(result: CommandResult) -> None:
    for line in result.lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    m2cv()
