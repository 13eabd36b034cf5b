"""Claude CLI executor for single-shot text generation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from m2cv.executor.process import DEFAULT_KILL_GRACE_SECONDS, run_captured

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FORMAT = "text"


@dataclass(slots=True)
class ExecuteRequest:
    """Inputs for one generator call."""

    prompt: str
    model: str | None = None
    output_format: str = DEFAULT_OUTPUT_FORMAT
    cancel_requested: Callable[[], bool] | None = None
    timeout_seconds: float | None = None


class TextGenerator(Protocol):
    """Anything that turns a prompt into response text."""

    def execute(
        self,
        prompt: str,
        *,
        model: str | None = None,
        output_format: str = DEFAULT_OUTPUT_FORMAT,
        cancel_requested: Callable[[], bool] | None = None,
        timeout_seconds: float | None = None,
    ) -> str:
        """Return the full response text or raise ``M2cvError``."""


class ClaudeExecutor:
    """Run ``claude -p`` with the prompt delivered on stdin.

    The prompt never appears on the command line, so its size is bounded by
    memory rather than the OS argument limit.
    """

    def __init__(
        self,
        claude_path: str = "claude",
        *,
        kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS,
    ) -> None:
        self.claude_path = claude_path
        self._kill_grace_seconds = kill_grace_seconds

    def execute(
        self,
        prompt: str,
        *,
        model: str | None = None,
        output_format: str = DEFAULT_OUTPUT_FORMAT,
        cancel_requested: Callable[[], bool] | None = None,
        timeout_seconds: float | None = None,
    ) -> str:
        """Send ``prompt`` to claude and return stdout."""

        return self.run(
            ExecuteRequest(
                prompt=prompt,
                model=model,
                output_format=output_format,
                cancel_requested=cancel_requested,
                timeout_seconds=timeout_seconds,
            ),
        )

    def run(self, request: ExecuteRequest) -> str:
        args = [self.claude_path, *build_claude_args(request)]
        logger.info(
            "Running claude (model=%s, format=%s, prompt=%d chars)",
            request.model or "default",
            request.output_format,
            len(request.prompt),
        )
        captured = run_captured(
            args,
            stdin_data=request.prompt,
            timeout_seconds=request.timeout_seconds,
            cancel_requested=request.cancel_requested,
            kill_grace_seconds=self._kill_grace_seconds,
            label="claude execution",
        )
        return captured.stdout


def build_claude_args(request: ExecuteRequest) -> list[str]:
    args = ["-p", "--output-format", request.output_format or DEFAULT_OUTPUT_FORMAT]
    if request.model:
        args.extend(["--model", request.model])
    return args
