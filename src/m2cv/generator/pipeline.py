"""Generate flow: CV text -> claude -> JSON Resume -> PDF."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from m2cv.executor.claude import TextGenerator
from m2cv.generator.exporter import Exporter
from m2cv.generator.extractor import extract_json
from m2cv.generator.validator import SchemaValidator

logger = logging.getLogger(__name__)

RESUME_JSON_NAME = "resume.json"
RESUME_PDF_NAME = "resume.pdf"


@dataclass(slots=True)
class GenerateRequest:
    """Inputs for one prompt-to-PDF run."""

    prompt: str
    output_dir: Path
    theme: str
    project_dir: Path
    model: str | None = None
    timeout_seconds: float | None = None
    cancel_requested: Callable[[], bool] | None = None


@dataclass(slots=True)
class GenerateResult:
    """Files produced by a successful run."""

    json_path: Path
    pdf_path: Path


class ResumePipeline:
    """Wire generator, extractor, validator and exporter in order.

    ``resume.json`` is written before rendering so a failed export still leaves
    the intermediate document for inspection.
    """

    def __init__(
        self,
        *,
        generator: TextGenerator,
        validator: SchemaValidator,
        exporter: Exporter,
    ) -> None:
        self._generator = generator
        self._validator = validator
        self._exporter = exporter

    def generate_json(self, request: GenerateRequest) -> bytes:
        """Return a schema-valid JSON Resume payload for ``request.prompt``."""

        raw = self._generator.execute(
            request.prompt,
            model=request.model,
            cancel_requested=request.cancel_requested,
            timeout_seconds=request.timeout_seconds,
        )
        payload = extract_json(raw)
        self._validator.validate(payload)
        logger.info("Extracted valid JSON Resume payload (%d bytes)", len(payload))
        return payload

    def run(self, request: GenerateRequest) -> GenerateResult:
        # Fail on a missing theme before spending a generator call.
        self._exporter.check_theme_installed(request.project_dir, request.theme)

        payload = self.generate_json(request)

        request.output_dir.mkdir(parents=True, exist_ok=True)
        json_path = request.output_dir / RESUME_JSON_NAME
        json_path.write_bytes(payload)
        logger.info("JSON written to %s", json_path)

        pdf_path = request.output_dir / RESUME_PDF_NAME
        self._exporter.export_pdf(
            json_path,
            pdf_path,
            request.theme,
            request.project_dir,
            cancel_requested=request.cancel_requested,
        )
        logger.info("PDF written to %s", pdf_path)
        return GenerateResult(json_path=json_path, pdf_path=pdf_path)
