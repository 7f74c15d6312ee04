# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config validator: raw mapping in, ValidConfig or InvalidConfig out.

For every key in the registry, in registry order:
  1. Absent and required     -> "Missing required setting ..." error
     Absent and optional     -> the declared default, unchecked
  2. Present, wrong kind     -> "Invalid type of ..." error
  3. Present, right kind     -> the field's semantic check decides

Every field gets evaluated even after an earlier one failed. If anything
failed, the caller gets all the messages and no config at all; otherwise
the caller gets the full config and no messages. Never a mix.

Bad input is an ordinary outcome here, not an exception. validate_config
does not raise for anything the user put in the mapping. Callers that prefer
exceptions can call unwrap() on the result.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Union

from fragtrain.config.exceptions import ConfigValidationError
from fragtrain.config.schema import (
    TRAINING_STATE_SCHEMA,
    Accepted,
    ExistenceProbe,
    FieldOutcome,
    FieldSchema,
    Rejected,
    SchemaRegistry,
    TrainingState,
    ValidationContext,
    format_value,
)
from fragtrain.utils.filesystem import is_readable_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidConfig:
    """Every field passed. `config` holds the typed, normalized state."""

    config: TrainingState

    @property
    def is_valid(self) -> bool:
        return True

    def unwrap(self) -> TrainingState:
        return self.config


@dataclass(frozen=True)
class InvalidConfig:
    """At least one field failed. `errors` holds one message per failing field."""

    errors: tuple[str, ...]

    @property
    def is_valid(self) -> bool:
        return False

    def unwrap(self) -> TrainingState:
        raise ConfigValidationError(self.errors)


ValidationResult = Union[ValidConfig, InvalidConfig]


def validate_entry(schema: FieldSchema, raw: Mapping[str, Any], context: ValidationContext) -> FieldOutcome:
    """
    Validate a single setting against its contract.

    Only a missing key counts as absent. An explicit null is present with
    the wrong type, same as any other non-matching value.
    """
    if schema.key not in raw:
        if schema.is_required:
            return Rejected(
                f"Missing required setting '{schema.key}' of type {schema.type.value} "
                f"({schema.description})"
            )
        return Accepted(schema.default)

    value = raw[schema.key]
    if not schema.type.matches(value):
        return Rejected(
            f"Invalid type of {schema.key}, expected a {schema.type.value}, "
            f"but got: {format_value(value)}"
        )
    return schema.check(value, context)


def validate_config(
    raw: Mapping[str, Any],
    registry: SchemaRegistry = TRAINING_STATE_SCHEMA,
    path_exists: ExistenceProbe = is_readable_file,
) -> ValidationResult:
    """
    Validate a loaded config mapping against the registry.

    Args:
        raw: Untyped key/value mapping, e.g. straight out of yaml.safe_load.
            Not modified.
        registry: Schema to validate against. Defaults to the training state.
        path_exists: Existence probe for file settings. Defaults to a
            readable-regular-file check on the local filesystem.

    Returns:
        ValidConfig with the built state, or InvalidConfig with every error
        message in registry order.
    """
    context = ValidationContext(path_exists=path_exists)
    errors: list[str] = []
    accepted: dict[str, Any] = {}

    for schema in registry:
        outcome = validate_entry(schema, raw, context)
        if isinstance(outcome, Rejected):
            logger.debug("setting_rejected", extra={"key": schema.key, "error": outcome.error})
            errors.append(outcome.error)
        else:
            accepted[schema.key] = outcome.value

    if errors:
        return InvalidConfig(errors=tuple(errors))
    return ValidConfig(config=registry.model.model_validate(accepted))


def unknown_keys(raw: Mapping[str, Any], registry: SchemaRegistry = TRAINING_STATE_SCHEMA) -> list[str]:
    """Keys in the raw mapping the registry doesn't know about. The validator ignores them."""
    return [key for key in raw if key not in registry]
