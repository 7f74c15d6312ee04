# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the config validator.

We test:
  1. Valid mappings come back as a complete, normalized TrainingState
  2. Omitted optional settings get their defaults, unchecked
  3. Omitted required settings produce exactly the missing-setting message
  4. Wrong types are caught before the semantic check runs
  5. Every field is evaluated, errors come back in declaration order
  6. Validation is repeatable and never mutates its input
"""

import copy
from pathlib import Path
from typing import Any

import pytest

from fragtrain.config.exceptions import ConfigValidationError
from fragtrain.config.schema import (
    TRAINING_STATE_SCHEMA,
    Accepted,
    FieldSchema,
    Rejected,
    TrainingState,
    ValidationContext,
)
from fragtrain.config.validator import (
    InvalidConfig,
    ValidConfig,
    unknown_keys,
    validate_config,
    validate_entry,
)

CHALLENGE = "texts/example_text.txt"


def _exists(path: str) -> bool:
    return path == CHALLENGE


def _raw(**overrides: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "winProbability": 0.5,
        "fragmentLength": 80,
        "challengeFile": CHALLENGE,
    }
    raw.update(overrides)
    return raw


class TestValidConfig:
    def test_minimal_mapping_fills_in_defaults(self) -> None:
        result = validate_config(_raw(), path_exists=_exists)

        assert isinstance(result, ValidConfig)
        assert result.is_valid
        assert result.config.to_raw() == {
            "winProbability": 0.5,
            "fragmentLength": 80,
            "challengeIndex": 0,
            "challengeFile": CHALLENGE,
            "maxAttempts": 3,
        }

    def test_explicit_optional_values_are_checked_and_floored(self) -> None:
        result = validate_config(
            _raw(challengeIndex=2.5, maxAttempts=5.9, fragmentLength=2.9),
            path_exists=_exists,
        )
        state = result.unwrap()
        assert state.challenge_index == 2
        assert state.max_attempts == 5
        assert state.fragment_length == 2

    def test_result_is_a_training_state(self) -> None:
        state = validate_config(_raw(), path_exists=_exists).unwrap()
        assert isinstance(state, TrainingState)
        assert state.challenge_file == CHALLENGE

    def test_unknown_keys_are_ignored(self) -> None:
        result = validate_config(_raw(theme="dark"), path_exists=_exists)
        assert isinstance(result, ValidConfig)

    def test_real_filesystem_probe(self, valid_raw: dict[str, Any], challenge_file: Path) -> None:
        result = validate_config(valid_raw)
        assert isinstance(result, ValidConfig)
        assert result.config.challenge_file == str(challenge_file)


class TestMissingSettings:
    @pytest.mark.parametrize(
        ("key", "message"),
        [
            (
                "winProbability",
                "Missing required setting 'winProbability' of type number "
                "(Probability of winning on each challenge that the program should aim for.)",
            ),
            (
                "fragmentLength",
                "Missing required setting 'fragmentLength' of type number "
                "(Maximum length of the text fragment in each round.)",
            ),
            (
                "challengeFile",
                "Missing required setting 'challengeFile' of type string "
                "(Path to the file containing the textual data.)",
            ),
        ],
    )
    def test_missing_required_setting(self, key: str, message: str) -> None:
        raw = _raw()
        del raw[key]
        result = validate_config(raw, path_exists=_exists)

        assert isinstance(result, InvalidConfig)
        assert result.errors == (message,)

    def test_empty_mapping_reports_every_required_setting(self) -> None:
        result = validate_config({}, path_exists=_exists)
        assert isinstance(result, InvalidConfig)
        assert len(result.errors) == 3
        assert all(err.startswith("Missing required setting") for err in result.errors)

    def test_default_is_not_checked(self) -> None:
        calls: list[Any] = []

        def spy(value: Any, ctx: ValidationContext) -> Accepted:
            calls.append(value)
            return Accepted(value)

        schema = TRAINING_STATE_SCHEMA["maxAttempts"]
        spied = FieldSchema(
            key=schema.key,
            type=schema.type,
            check=spy,
            description=schema.description,
            is_required=False,
            default=schema.default,
        )
        ctx = ValidationContext(path_exists=_exists)
        assert validate_entry(spied, {}, ctx) == Accepted(3)
        assert calls == []


class TestTypeGate:
    def test_string_for_number(self) -> None:
        result = validate_config(_raw(fragmentLength="eighty"), path_exists=_exists)
        assert isinstance(result, InvalidConfig)
        assert result.errors == (
            "Invalid type of fragmentLength, expected a number, but got: eighty",
        )

    def test_boolean_for_number(self) -> None:
        result = validate_config(_raw(maxAttempts=True), path_exists=_exists)
        assert isinstance(result, InvalidConfig)
        assert result.errors == (
            "Invalid type of maxAttempts, expected a number, but got: true",
        )

    def test_null_is_a_type_error_not_a_missing_setting(self) -> None:
        result = validate_config(_raw(challengeIndex=None), path_exists=_exists)
        assert isinstance(result, InvalidConfig)
        assert result.errors == (
            "Invalid type of challengeIndex, expected a number, but got: null",
        )

    def test_check_is_not_run_on_wrong_type(self) -> None:
        probed: list[str] = []

        def probe(path: str) -> bool:
            probed.append(path)
            return True

        result = validate_config(_raw(challengeFile=42), path_exists=probe)
        assert isinstance(result, InvalidConfig)
        assert result.errors == (
            "Invalid type of challengeFile, expected a string, but got: 42",
        )
        assert probed == []


class TestSemanticErrors:
    @pytest.mark.parametrize("value", [0.0, 1.0])
    def test_win_probability_bounds_are_exclusive(self, value: float) -> None:
        result = validate_config(_raw(winProbability=value), path_exists=_exists)
        assert isinstance(result, InvalidConfig)

    def test_win_probability_inside_bounds_is_unchanged(self) -> None:
        state = validate_config(_raw(winProbability=0.5), path_exists=_exists).unwrap()
        assert state.win_probability == 0.5

    def test_fragment_length_zero(self) -> None:
        result = validate_config(_raw(fragmentLength=0), path_exists=_exists)
        assert isinstance(result, InvalidConfig)
        assert result.errors == ("The fragment length must be positive, but was 0",)

    def test_fragment_length_is_floored(self) -> None:
        state = validate_config(_raw(fragmentLength=2.9), path_exists=_exists).unwrap()
        assert state.fragment_length == 2


class TestAggregation:
    def test_three_broken_fields_in_declaration_order(self) -> None:
        result = validate_config(
            {"winProbability": 1.5, "fragmentLength": -3, "challengeFile": "missing.txt"},
            path_exists=_exists,
        )
        assert isinstance(result, InvalidConfig)
        assert not result.is_valid
        assert result.errors == (
            "The probability must be strictly between 0 and 1, but was 1.5",
            "The fragment length must be positive, but was -3",
            'Couldn\'t find the file "missing.txt".',
        )

    def test_every_field_broken(self) -> None:
        result = validate_config(
            {
                "winProbability": "high",
                "fragmentLength": 0,
                "challengeIndex": -1,
                "challengeFile": "missing.txt",
                "maxAttempts": 0,
            },
            path_exists=_exists,
        )
        assert isinstance(result, InvalidConfig)
        assert len(result.errors) == 5
        assert result.errors[0].startswith("Invalid type of winProbability")
        assert result.errors[2].startswith("The challenge index")
        assert result.errors[4].startswith("Expected a positive integer")

    def test_unwrap_raises_with_all_errors(self) -> None:
        result = validate_config({}, path_exists=_exists)
        with pytest.raises(ConfigValidationError) as excinfo:
            result.unwrap()
        assert excinfo.value.errors == result.errors


class TestPurity:
    def test_validation_is_repeatable(self) -> None:
        raw = _raw(fragmentLength=-3, maxAttempts=7.2)
        assert validate_config(raw, path_exists=_exists) == validate_config(raw, path_exists=_exists)

        raw = _raw(maxAttempts=7.2)
        assert validate_config(raw, path_exists=_exists) == validate_config(raw, path_exists=_exists)

    def test_input_is_not_mutated(self) -> None:
        raw = _raw(fragmentLength=2.9)
        before = copy.deepcopy(raw)
        validate_config(raw, path_exists=_exists)
        assert raw == before


class TestValidateEntry:
    def test_present_value_goes_through_check(self) -> None:
        ctx = ValidationContext(path_exists=_exists)
        schema = TRAINING_STATE_SCHEMA["challengeFile"]
        assert validate_entry(schema, {"challengeFile": CHALLENGE}, ctx) == Accepted(CHALLENGE)
        assert isinstance(validate_entry(schema, {"challengeFile": "nope"}, ctx), Rejected)


class TestUnknownKeys:
    def test_lists_undeclared_keys_in_input_order(self) -> None:
        assert unknown_keys(_raw(zeta=1, alpha=2)) == ["zeta", "alpha"]

    def test_no_unknown_keys(self) -> None:
        assert unknown_keys(_raw()) == []
