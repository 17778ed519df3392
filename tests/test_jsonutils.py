import json

import pytest

from utils.jsonutils import (
    PARSE_FAILURE_TITLE, extract_fenced_payload, is_parse_failure, parse_model_json,
)

PAYLOAD = '{"pathTitle": "Go Developer", "phases": [{"phaseTitle": "Basics", "steps": []}]}'


@pytest.mark.parametrize("wrapped", [
    "```json\n" + PAYLOAD + "\n```",
    "```\n" + PAYLOAD + "\n```",
    "  \n```JSON\n" + PAYLOAD + "\n```\n\n",
    "```json " + PAYLOAD + "```",
])
def test_fenced_json_parses_like_bare_json(wrapped):
    assert parse_model_json(wrapped) == json.loads(PAYLOAD)


def test_bare_json_with_surrounding_whitespace():
    assert parse_model_json("\n\t" + PAYLOAD + "  ") == json.loads(PAYLOAD)


def test_extract_leaves_unfenced_text_alone():
    assert extract_fenced_payload("  plain text  ") == "plain text"


def test_extract_ignores_fence_that_does_not_span_the_input():
    text = "Here you go:\n```json\n{}\n```"
    assert extract_fenced_payload(text) == text


def test_garbage_returns_sentinel():
    result = parse_model_json("I could not build a plan, sorry.")

    assert is_parse_failure(result)
    assert result["pathTitle"] == PARSE_FAILURE_TITLE
    assert result["phases"] == []
    assert "I could not build a plan, sorry." in result["error"]


def test_preview_is_bounded_to_300_chars():
    raw = "x" * 299 + "y" + "z" * 200
    result = parse_model_json(raw)

    preview = result["error"].split("Preview: ", 1)[1]
    assert preview == "x" * 299 + "y"
    assert len(preview) == 300


def test_decoded_value_is_returned_unvalidated():
    assert parse_model_json("[1, 2, 3]") == [1, 2, 3]
