"""Tests for the JSON repair-and-reparse engine."""

import pytest

from nexus.domain.errors import ExtractionFailure
from nexus.domain.json_repair import (
    MAX_REPAIR_ATTEMPTS,
    repair_and_parse,
    repair_json,
    strip_to_json,
)


def test_prose_fence_missing_comma_and_truncation():
    """Prose, a fence, a missing comma and a cut-off tail in one response."""
    text = 'Here is the data:\n```json\n{"clients":[{"name":"Ana"}] "transactions":[{"amount":10}\n'

    result = repair_and_parse(text)

    assert result.value == {"clients": [{"name": "Ana"}], "transactions": [{"amount": 10}]}
    assert result.attempts == 0
    assert not result.recovered


def test_fenced_valid_json():
    result = repair_and_parse('```json\n{"clients": [], "transactions": []}\n```')

    assert result.value == {"clients": [], "transactions": []}
    assert result.attempts == 0


def test_missing_comma_between_objects():
    result = repair_and_parse('{"transactions":[{"amount":1} {"amount":2}]}')

    assert result.value == {"transactions": [{"amount": 1}, {"amount": 2}]}


def test_missing_comma_between_values_and_keys():
    result = repair_and_parse('{"name":"Ana" "cpf":"123" "age":30 "active":true}')

    assert result.value == {"name": "Ana", "cpf": "123", "age": 30, "active": True}


def test_trailing_comma_and_open_brackets_are_closed():
    result = repair_and_parse('{"clients":[{"name":"Ana"},')

    assert result.value == {"clients": [{"name": "Ana"}]}
    assert result.attempts == 0


def test_closers_follow_nesting_order():
    assert repair_json('{"a":[{"b":[1,2') == '{"a":[{"b":[1,2]}]}'


def test_brackets_inside_strings_are_ignored():
    assert repair_json('{"a":"x]}[","b":[1') == '{"a":"x]}[","b":[1]}'


def test_truncated_mid_key_converges_on_last_complete_object():
    """A tail that cannot be closed is cut back to the last complete object."""
    text = (
        '{"transactions":[{"amount":10,"description":"Aluguel"},'
        '{"amount":20,"desc'
    )

    result = repair_and_parse(text)

    assert result.recovered
    assert result.attempts == 1
    assert result.value == {"transactions": [{"amount": 10, "description": "Aluguel"}]}


def test_no_brace_fails_fast():
    with pytest.raises(ExtractionFailure) as excinfo:
        repair_and_parse("Sorry, I could not read this document.")

    assert excinfo.value.attempts == 0


def test_attempts_are_bounded():
    """Garbage with many closing braces gives up after the attempt limit."""
    with pytest.raises(ExtractionFailure) as excinfo:
        repair_and_parse("{" + "x}" * 200)

    assert excinfo.value.attempts == MAX_REPAIR_ATTEMPTS


def test_candidate_shorter_than_minimum_is_not_parsed():
    with pytest.raises(ExtractionFailure):
        repair_and_parse('{"a":1} trailing }')


def test_custom_attempt_limit():
    with pytest.raises(ExtractionFailure) as excinfo:
        repair_and_parse("{" + "x}" * 200, max_attempts=3)

    assert excinfo.value.attempts == 3


def test_strip_to_json():
    assert strip_to_json("Result:\n```json\n[1, 2]\n```") == "[1, 2]"
    assert strip_to_json("no json here") is None


def test_valid_json_is_not_rewritten():
    """Seam patterns inside string values are left alone when the text parses."""
    assert repair_json('{"d":"x }{ y"}') == '{"d":"x }{ y"}'

    result = repair_and_parse('{"transactions":[{"description":"Pix } { Ana"}]}')
    assert result.value == {"transactions": [{"description": "Pix } { Ana"}]}
