"""
JSON_checker compliance tests for valid JSON inputs.

Validates that properly formatted documents decode successfully and produce
the same Python objects as the standard library.
"""

import json

import fsmjson

from .conftest import JsonTestCase


def test_json_checker_passes(json_pass_cases: list[JsonTestCase]) -> None:
    """
    Validates documents that must decode successfully per JSON_checker.

    Results are compared against the standard library decoder, which
    agrees with this one on every valid document.
    """
    for case in json_pass_cases:
        result = fsmjson.loads(case.input_data)
        assert result == json.loads(case.input_data), case.description


def test_basic_json_values(basic_json_values: list[JsonTestCase]) -> None:
    """
    Validates decoding of fundamental JSON value types.

    Covers all JSON primitive types and basic container structures
    to ensure core decoding works correctly.
    """
    for case in basic_json_values:
        result = fsmjson.loads(case.input_data)
        assert result == case.expected_output, case.description
        assert type(result) is type(case.expected_output), case.description


def test_empty_containers() -> None:
    """
    Validates decoding of empty JSON containers.
    """
    assert fsmjson.loads("[]") == []
    assert fsmjson.loads("{}") == {}
    assert fsmjson.loads(" [] ") == []  # With whitespace
    assert fsmjson.loads(" {} ") == {}  # With whitespace


def test_whitespace_handling() -> None:
    """
    Validates proper handling of JSON whitespace.
    """
    # Leading/trailing whitespace should be ignored
    assert fsmjson.loads(" null ") is None
    assert fsmjson.loads("\n\ttrue\n") is True
    assert fsmjson.loads("\r\n42\r\n") == 42

    # Whitespace in containers
    assert fsmjson.loads("[ 1 , 2 , 3 ]") == [1, 2, 3]
    assert fsmjson.loads('{ "key" : "value" }') == {"key": "value"}
    assert fsmjson.loads('{\n\t"key"\r\n:\t[\n]\n}') == {"key": []}
