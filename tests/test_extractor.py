from __future__ import annotations

import json

import allure
import pytest

from m2cv.errors import ExtractionError
from m2cv.generator.extractor import (
    ExtractionFailure,
    extract_json,
    strip_fenced_block,
    try_extract_json,
)

pytestmark = [
    allure.epic("Generate"),
    allure.feature("Output Extractor"),
]


def test_fenced_json_with_commentary() -> None:
    raw = 'Here is your resume:\n```json\n{"basics": {"name": "Ada"}}\n```\nLet me know!'

    assert extract_json(raw) == b'{"basics": {"name": "Ada"}}'


def test_untagged_fence_and_uppercase_tag() -> None:
    assert extract_json('```\n{"a": 1}\n```') == b'{"a": 1}'
    assert extract_json('```JSON\n{"a": 1}\n```') == b'{"a": 1}'


def test_prose_without_fence_is_bounded_by_outer_braces() -> None:
    raw = 'Sure! {"a": {"b": [1, 2]}} Hope that helps.'

    assert extract_json(raw) == b'{"a": {"b": [1, 2]}}'


def test_original_formatting_is_preserved() -> None:
    body = '{\n    "a" :  1,\n\n    "b": "x"\n}'

    assert extract_json(f"```json\n{body}\n```") == body.encode()


def test_re_extracting_clean_payload_is_a_no_op() -> None:
    payload = extract_json('intro\n```json\n{"work": [{"name": "ACME"}]}\n```')

    assert extract_json(payload) == payload


@pytest.mark.parametrize(
    "value",
    [
        {},
        {"basics": {"name": "Zoë", "profiles": []}},
        {"nested": {"list": [1, 2.5, None, True, {"k": "}{"}]}},
    ],
)
def test_wrapped_object_round_trips(value: dict) -> None:
    raw = f"Some notes first.\n```json\n{json.dumps(value, indent=2)}\n```\nTrailing remark."

    assert json.loads(extract_json(raw)) == value


@pytest.mark.parametrize(
    "raw",
    [
        "no braces at all",
        'just a closing brace } then an opening {',
        '{"a": 1',
        "",
        "   \n\t",
    ],
)
def test_no_object_found(raw: str) -> None:
    result = try_extract_json(raw)

    assert not result.is_success
    assert result.failure == ExtractionFailure.NO_OBJECT_FOUND
    with pytest.raises(ExtractionError) as excinfo:
        extract_json(raw)
    assert excinfo.value.failure == ExtractionFailure.NO_OBJECT_FOUND


def test_invalid_interior_json_is_never_best_effort() -> None:
    result = try_extract_json("Result: {name: 'Ada', }")

    assert result.failure == ExtractionFailure.INVALID_JSON
    assert result.payload is None
    assert "extracted content is not valid JSON" in (result.error_summary or "")
    assert result.snippet == "{name: 'Ada', }"


def test_snippets_are_bounded() -> None:
    raw = "x" * 1_000
    with pytest.raises(ExtractionError) as excinfo:
        extract_json(raw)
    assert excinfo.value.snippet == "x" * 200 + "..."

    candidate = "{" + "y" * 1_000 + "}"
    result = try_extract_json(candidate)
    assert result.snippet == candidate[:500] + "..."


def test_strip_fenced_block_returns_input_without_fence() -> None:
    assert strip_fenced_block(b'{"a": 1}') == b'{"a": 1}'
    assert strip_fenced_block(b'```json\n{"a": 1}\n```') == b'{"a": 1}'


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_number_tokens_are_invalid_json(token: str) -> None:
    result = try_extract_json(f'```json\n{{"a": {token}, "b": 1}}\n```')

    assert result.failure == ExtractionFailure.INVALID_JSON
    assert result.payload is None
    assert f"{token} is not a valid JSON value" in (result.error_summary or "")
