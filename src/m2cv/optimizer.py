"""Tailor a Markdown CV to one job description."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from m2cv.errors import M2cvError
from m2cv.executor.claude import TextGenerator
from m2cv.prompts import build_optimize_prompt

logger = logging.getLogger(__name__)

OPTIMIZED_CV_NAME = "optimized-cv.md"


@dataclass(slots=True)
class OptimizeRequest:
    """Inputs for one tailoring run."""

    cv_markdown: str
    job_description: str
    output_path: Path
    model: str | None = None
    ats: bool = False
    timeout_seconds: float | None = None
    cancel_requested: Callable[[], bool] | None = None


class CvOptimizer:
    """Send CV plus job description to the generator and save the Markdown."""

    def __init__(self, generator: TextGenerator) -> None:
        self._generator = generator

    def optimize(self, request: OptimizeRequest) -> Path:
        if not request.job_description.strip():
            raise ValueError("Job description is empty.")

        prompt = build_optimize_prompt(
            request.cv_markdown,
            request.job_description,
            ats=request.ats,
        )
        markdown = self._generator.execute(
            prompt,
            model=request.model,
            cancel_requested=request.cancel_requested,
            timeout_seconds=request.timeout_seconds,
        )
        if not markdown.strip():
            raise M2cvError("claude returned an empty optimized CV; nothing written")

        request.output_path.parent.mkdir(parents=True, exist_ok=True)
        request.output_path.write_text(markdown, "utf-8")
        logger.info("Optimized CV written to %s (ats=%s)", request.output_path, request.ats)
        return request.output_path
