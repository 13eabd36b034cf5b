"""Error taxonomy shared by executors and the generate pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class M2cvError(RuntimeError):
    """Base class for every failure surfaced to CLI users."""


class ExecutableNotFoundError(M2cvError):
    """Executable is neither on the search path nor in a fallback directory."""

    def __init__(self, message: str, *, name: str, searched: Sequence[Path] = ()) -> None:
        super().__init__(message)
        self.name = name
        self.searched = tuple(searched)


class ProcessStartError(M2cvError):
    """Child process could not be spawned at all."""

    def __init__(self, message: str, *, command: Sequence[str]) -> None:
        super().__init__(message)
        self.command = tuple(command)


class ProcessFailedError(M2cvError):
    """Child process finished abnormally; carries captured stderr."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str],
        exit_code: int | None,
        stderr: str,
    ) -> None:
        super().__init__(message)
        self.command = tuple(command)
        self.exit_code = exit_code
        self.stderr = stderr


class ProcessCancelledError(ProcessFailedError):
    """Caller cancelled the call and the process tree was terminated."""


class ProcessTimeoutError(ProcessFailedError):
    """Process exceeded its time budget and the process tree was terminated."""


class ExtractionError(M2cvError):
    """No well-formed JSON object could be recovered from generator output."""

    def __init__(self, message: str, *, failure: object, snippet: str) -> None:
        super().__init__(message)
        self.failure = failure
        self.snippet = snippet


class SchemaDefinitionError(M2cvError):
    """Embedded schema document is itself malformed."""


class SchemaValidationError(M2cvError):
    """Payload is not valid JSON or violates the schema."""

    def __init__(self, message: str, *, failure: object, violations: Sequence[object]) -> None:
        super().__init__(message)
        self.failure = failure
        self.violations = tuple(violations)


class PreconditionError(M2cvError):
    """Local installation is missing something the command needs."""

    def __init__(self, message: str, *, remedy: str | None = None) -> None:
        super().__init__(message)
        self.remedy = remedy


class ThemeNotInstalledError(PreconditionError):
    """Requested theme package is absent from the local node_modules."""

    def __init__(self, message: str, *, theme: str, package: str, remedy: str) -> None:
        super().__init__(message, remedy=remedy)
        self.theme = theme
        self.package = package
