"""Recover a JSON object from free-form generator output."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from m2cv.errors import ExtractionError

INPUT_SNIPPET_CHARS = 200
CANDIDATE_SNIPPET_CHARS = 500

_FENCED_BLOCK = re.compile(rb"```(?:json)?[ \t]*\r?\n?(.*?)\r?\n?```", re.DOTALL | re.IGNORECASE)


class ExtractionFailure(str, Enum):
    """Why no payload could be extracted."""

    NO_OBJECT_FOUND = "no_object_found"
    INVALID_JSON = "invalid_json"


@dataclass(slots=True)
class ExtractionResult:
    """Either a payload or a tagged failure with diagnostics."""

    payload: bytes | None
    failure: ExtractionFailure | None = None
    error_summary: str | None = None
    snippet: str = ""

    @property
    def is_success(self) -> bool:
        return self.failure is None and self.payload is not None


def try_extract_json(raw: str | bytes) -> ExtractionResult:
    """Extract the outermost ``{...}`` span, preferring a fenced block.

    The returned payload is a byte slice of the input, so original formatting
    is preserved. Arrays and scalars are never accepted.
    """

    data = raw.encode("utf-8") if isinstance(raw, str) else raw
    if not data.strip():
        return ExtractionResult(
            payload=None,
            failure=ExtractionFailure.NO_OBJECT_FOUND,
            error_summary="empty input: no content to extract JSON from",
        )

    content = strip_fenced_block(data)
    start = content.find(b"{")
    end = content.rfind(b"}")
    if start == -1 or end == -1 or start > end:
        snippet = _truncate(data, INPUT_SNIPPET_CHARS)
        return ExtractionResult(
            payload=None,
            failure=ExtractionFailure.NO_OBJECT_FOUND,
            error_summary=(
                "no JSON object found in output (expected '{' and '}')\n"
                f"Input snippet:\n{snippet}"
            ),
            snippet=snippet,
        )

    candidate = content[start : end + 1]
    try:
        parse_strict_json(candidate)
    except ValueError as error:
        snippet = _truncate(candidate, CANDIDATE_SNIPPET_CHARS)
        return ExtractionResult(
            payload=None,
            failure=ExtractionFailure.INVALID_JSON,
            error_summary=(
                f"extracted content is not valid JSON: {error}\nExtracted content:\n{snippet}"
            ),
            snippet=snippet,
        )
    return ExtractionResult(payload=candidate)


def extract_json(raw: str | bytes) -> bytes:
    """Return the extracted payload or raise ``ExtractionError``."""

    result = try_extract_json(raw)
    if result.payload is None or result.failure is not None:
        raise ExtractionError(
            result.error_summary or "no JSON object found",
            failure=result.failure or ExtractionFailure.NO_OBJECT_FOUND,
            snippet=result.snippet,
        )
    return result.payload


def parse_strict_json(data: str | bytes) -> Any:
    """Parse RFC 8259 JSON; ``NaN`` and ``Infinity`` raise ``ValueError``."""

    return json.loads(data, parse_constant=_reject_constant)


def strip_fenced_block(data: bytes) -> bytes:
    """Return the first fenced block's content, or ``data`` when unfenced."""

    match = _FENCED_BLOCK.search(data)
    if match is None:
        return data
    return match.group(1)


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not a valid JSON value")


def _truncate(data: bytes, max_chars: int) -> str:
    text = data.decode("utf-8", errors="replace")
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."
