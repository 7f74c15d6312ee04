# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Schema registry for the training state.

A state file is a flat mapping of camelCase keys to primitive values. Each key
gets one FieldSchema entry that says:
  - what primitive kind the value must be (number, string, boolean)
  - whether the key may be left out, and what it falls back to if so
  - which semantic check the value must pass (ranges, flooring, file existence)
  - a human description that ends up in the error messages

The entries live in one ordered SchemaRegistry. Order matters: the validator
walks the registry front to back, and that is the order errors get reported in.

Everything here is built once at import time and never mutated afterwards.
A malformed entry (a required field with a default, an optional field without
one, a default of the wrong kind) is a developer bug and fails loudly with
ConfigSchemaError the moment the module is imported.
"""

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Union

from pydantic import BaseModel, ConfigDict, Field

from fragtrain.config.exceptions import ConfigSchemaError

ExistenceProbe = Callable[[str], bool]


class FieldType(str, Enum):
    """The closed set of primitive kinds a setting can have."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"

    def matches(self, value: Any) -> bool:
        """
        Check the runtime type of a raw value against this kind.

        bool is a subclass of int in Python, so it has to be excluded from
        NUMBER explicitly. Otherwise `fragmentLength: true` would sneak through
        as 1.
        """
        if self is FieldType.BOOLEAN:
            return isinstance(value, bool)
        if self is FieldType.STRING:
            return isinstance(value, str)
        return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class Accepted:
    """A value that passed validation, possibly normalized."""

    value: Any


@dataclass(frozen=True)
class Rejected:
    """A value that failed validation, with the message to show the user."""

    error: str


FieldOutcome = Union[Accepted, Rejected]


@dataclass(frozen=True)
class ValidationContext:
    """
    Capabilities a semantic check may use.

    Checks are pure functions of their value, except for the one place where
    validation has to look at the outside world: whether the challenge file
    exists. That lookup is handed in here so tests can swap it out.
    """

    path_exists: ExistenceProbe


Check = Callable[[Any, ValidationContext], FieldOutcome]


def format_value(value: Any) -> str:
    """
    Render a raw value for an error message.

    YAML users write `true`, `null` and `80`, so that's what they should see
    back: booleans and None in YAML spelling, integral floats without the
    trailing `.0`. Every other float keeps Python's own spelling, so
    `1e-07`, `inf` and `nan` appear exactly as str() gives them.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class FieldSchema:
    """
    The full validation contract for one configuration key.

    `default` is only meaningful for optional fields and is used verbatim
    when the key is absent. Defaults are trusted: the check never runs on them.

    `suggested` is a starting value to show people writing a fresh state
    file. Unlike `default` it is never filled in, so a required field may
    carry one.
    """

    key: str
    type: FieldType
    description: str
    check: Check
    is_required: bool = True
    default: Any = None
    suggested: Any = None

    def __post_init__(self) -> None:
        if not callable(self.check):
            raise ConfigSchemaError(f"Setting '{self.key}' has no callable check")
        if self.is_required and self.default is not None:
            raise ConfigSchemaError(
                f"Required setting '{self.key}' must not declare a default, "
                f"got {self.default!r}"
            )
        if not self.is_required:
            if self.default is None:
                raise ConfigSchemaError(
                    f"Optional setting '{self.key}' must declare a default"
                )
            if not self.type.matches(self.default):
                raise ConfigSchemaError(
                    f"Default of setting '{self.key}' must be a {self.type.value}, "
                    f"got {self.default!r}"
                )
        if self.suggested is not None and not self.type.matches(self.suggested):
            raise ConfigSchemaError(
                f"Suggested value of setting '{self.key}' must be a {self.type.value}, "
                f"got {self.suggested!r}"
            )

    @property
    def has_default(self) -> bool:
        return not self.is_required


class SchemaRegistry:
    """
    Ordered, read-only table of FieldSchema entries keyed by setting name.

    `model` is the pydantic class the validator builds once every field has
    been accepted. Its aliases must line up with the registry keys.
    """

    def __init__(self, fields: Iterable[FieldSchema], model: type[BaseModel]) -> None:
        entries: dict[str, FieldSchema] = {}
        for field in fields:
            if field.key in entries:
                raise ConfigSchemaError(f"Setting '{field.key}' is declared twice")
            entries[field.key] = field
        self._entries = MappingProxyType(entries)
        self.model = model

    def __getitem__(self, key: str) -> FieldSchema:
        if key not in self._entries:
            raise KeyError(f"Unknown setting '{key}'. Available: {list(self._entries)}")
        return self._entries[key]

    def entry(self, key: str) -> FieldSchema:
        """Look up the contract for one setting. Raises KeyError for unknown keys."""
        return self[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[FieldSchema]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> tuple[str, ...]:
        return tuple(self._entries)


# ── Semantic checks ─────────────────────────────────────────────────────────


def _floor_at_least(n: float, minimum: int, message: str) -> FieldOutcome:
    # inf passes the comparison but cannot be floored into an int
    if n >= minimum and not (isinstance(n, float) and math.isinf(n)):
        return Accepted(math.floor(n))
    return Rejected(message.format(value=format_value(n)))


def check_win_probability(n: float, ctx: ValidationContext) -> FieldOutcome:
    if 0.0 < n < 1.0:
        return Accepted(n)
    return Rejected(
        f"The probability must be strictly between 0 and 1, but was {format_value(n)}"
    )


def check_fragment_length(n: float, ctx: ValidationContext) -> FieldOutcome:
    return _floor_at_least(n, 1, "The fragment length must be positive, but was {value}")


def check_challenge_index(n: float, ctx: ValidationContext) -> FieldOutcome:
    return _floor_at_least(
        n, 0, "The challenge index must be non-negative (0-based), but was {value}"
    )


def check_challenge_file(path: str, ctx: ValidationContext) -> FieldOutcome:
    try:
        found = ctx.path_exists(path)
    except OSError:
        found = False
    if found:
        return Accepted(path)
    return Rejected(f'Couldn\'t find the file "{path}".')


def check_max_attempts(n: float, ctx: ValidationContext) -> FieldOutcome:
    return _floor_at_least(
        n, 1, "Expected a positive integer number of attempts, but got {value}."
    )


# ── Training state ──────────────────────────────────────────────────────────


class TrainingState(BaseModel):
    """
    The fully validated state the training loop starts from.

    Attributes are snake_case, but the model is keyed by the camelCase names
    used in state files. to_raw() gives back exactly that mapping, so a state
    can be saved and loaded again without translation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    win_probability: float = Field(
        alias="winProbability",
        gt=0.0,
        lt=1.0,
        description="Target share of challenges won without extra hints",
    )
    fragment_length: int = Field(
        alias="fragmentLength",
        ge=1,
        description="Maximal length of text fragments presented to the user",
    )
    challenge_index: int = Field(
        default=0,
        alias="challengeIndex",
        ge=0,
        description="0-based index of the current challenge",
    )
    challenge_file: str = Field(
        alias="challengeFile",
        description="Relative path of the file holding the challenge text",
    )
    max_attempts: int = Field(
        default=3,
        alias="maxAttempts",
        ge=1,
        description="How many times the same fragment may be attempted",
    )

    def to_raw(self) -> dict[str, Any]:
        """Return the camelCase mapping this state was validated from."""
        return self.model_dump(by_alias=True)


TRAINING_STATE_SCHEMA = SchemaRegistry(
    [
        FieldSchema(
            key="winProbability",
            type=FieldType.NUMBER,
            check=check_win_probability,
            description="Probability of winning on each challenge that the program should aim for.",
        ),
        FieldSchema(
            key="fragmentLength",
            type=FieldType.NUMBER,
            check=check_fragment_length,
            suggested=40,
            description="Maximum length of the text fragment in each round.",
        ),
        FieldSchema(
            key="challengeIndex",
            type=FieldType.NUMBER,
            check=check_challenge_index,
            is_required=False,
            default=0,
            description="Index of the current challenge.",
        ),
        FieldSchema(
            key="challengeFile",
            type=FieldType.STRING,
            check=check_challenge_file,
            description="Path to the file containing the textual data.",
        ),
        FieldSchema(
            key="maxAttempts",
            type=FieldType.NUMBER,
            check=check_max_attempts,
            is_required=False,
            default=3,
            description="Maximum number of attempts allowed on same fragment.",
        ),
    ],
    model=TrainingState,
)
