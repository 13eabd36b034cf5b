"""JSON Resume schema validation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from importlib import resources
from typing import Any

from jsonschema import exceptions as jsonschema_exceptions
from jsonschema.validators import validator_for

from m2cv.errors import SchemaDefinitionError, SchemaValidationError
from m2cv.generator.extractor import parse_strict_json

RESUME_SCHEMA_NAME = "resume.schema.json"


class ValidationFailure(str, Enum):
    """Why a payload was rejected."""

    INVALID_JSON = "invalid_json"
    SCHEMA_VIOLATION = "schema_violation"


@dataclass(slots=True, frozen=True)
class Violation:
    """One schema violation located by a JSONPath-style path."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


@dataclass(slots=True)
class ValidationOutcome:
    """Result of validating one payload."""

    is_valid: bool
    failure: ValidationFailure | None = None
    violations: list[Violation] = field(default_factory=list)

    @property
    def error_summary(self) -> str | None:
        if self.is_valid:
            return None
        lines = [f"  - {violation}" for violation in self.violations]
        return "schema validation failed:\n" + "\n".join(lines)


def load_schema(name: str = RESUME_SCHEMA_NAME) -> dict[str, Any]:
    """Load an embedded schema document from ``m2cv/assets/schema``."""

    resource = resources.files("m2cv.assets").joinpath("schema", name)
    try:
        text = resource.read_text("utf-8")
    except FileNotFoundError as error:
        raise SchemaDefinitionError(f"schema {name!r} not found") from error
    try:
        schema = json.loads(text)
    except json.JSONDecodeError as error:
        raise SchemaDefinitionError(f"failed to parse schema JSON {name!r}: {error}") from error
    if not isinstance(schema, dict):
        raise SchemaDefinitionError(f"schema {name!r} must be a JSON object")
    return schema


class SchemaValidator:
    """Validate payloads against a schema compiled once at construction.

    The compiled validator is never mutated afterwards, so one instance can be
    shared by concurrent callers.
    """

    def __init__(self, schema: dict[str, Any] | None = None) -> None:
        document = load_schema() if schema is None else schema
        validator_class = validator_for(document)
        try:
            validator_class.check_schema(document)
        except jsonschema_exceptions.SchemaError as error:
            raise SchemaDefinitionError(f"failed to compile schema: {error.message}") from error
        self._validator = validator_class(document)

    def check(self, payload: str | bytes) -> ValidationOutcome:
        """Parse and validate ``payload``; never raises for bad input."""

        try:
            document = parse_strict_json(payload)
        except ValueError as error:
            return ValidationOutcome(
                is_valid=False,
                failure=ValidationFailure.INVALID_JSON,
                violations=[Violation(path="$", reason=f"invalid JSON: {error}")],
            )

        violations = sorted(
            {
                Violation(path=error.json_path, reason=error.message)
                for error in self._validator.iter_errors(document)
            },
            key=lambda violation: (violation.path, violation.reason),
        )
        if violations:
            return ValidationOutcome(
                is_valid=False,
                failure=ValidationFailure.SCHEMA_VIOLATION,
                violations=violations,
            )
        return ValidationOutcome(is_valid=True)

    def validate(self, payload: str | bytes) -> None:
        """Raise ``SchemaValidationError`` unless ``payload`` is valid."""

        outcome = self.check(payload)
        if outcome.is_valid:
            return
        if outcome.failure is ValidationFailure.INVALID_JSON:
            message = outcome.violations[0].reason
        else:
            message = outcome.error_summary or "schema validation failed"
        raise SchemaValidationError(
            message,
            failure=outcome.failure,
            violations=outcome.violations,
        )
