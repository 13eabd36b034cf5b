"""JSON extraction, schema validation and PDF export."""

from m2cv.generator.exporter import ExportRequest, Exporter
from m2cv.generator.extractor import (
    ExtractionFailure,
    ExtractionResult,
    extract_json,
    try_extract_json,
)
from m2cv.generator.pipeline import GenerateRequest, GenerateResult, ResumePipeline
from m2cv.generator.validator import (
    SchemaValidator,
    ValidationFailure,
    ValidationOutcome,
    Violation,
)

__all__ = [
    "ExportRequest",
    "ExtractionFailure",
    "ExtractionResult",
    "Exporter",
    "GenerateRequest",
    "GenerateResult",
    "ResumePipeline",
    "SchemaValidator",
    "ValidationFailure",
    "ValidationOutcome",
    "Violation",
    "extract_json",
    "try_extract_json",
]
