# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the fragtrain CLI.

Each function here corresponds to one CLI subcommand, takes the parsed
argparse namespace, and returns an exit code. No print() calls. Everything
goes through the structured logger.
"""

import argparse
from pathlib import Path

from fragtrain.cli.exit_codes import CONFIG_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR
from fragtrain.config.exceptions import ConfigLoadError
from fragtrain.config.loader import load_raw_config
from fragtrain.config.schema import TRAINING_STATE_SCHEMA
from fragtrain.config.validator import InvalidConfig, unknown_keys, validate_config
from fragtrain.logging.logger import get_logger
from fragtrain.training.session import report_errors


def handle_validate(args: argparse.Namespace) -> int:
    """Validate a state file and report every problem with it."""
    logger = get_logger("fragtrain.cli.validate", log_level=args.log_level)

    if args.config is None:
        logger.error("No state file given, pass one with --config", extra={"command": "validate"})
        return USER_ERROR

    config_path = Path(args.config)
    try:
        raw = load_raw_config(config_path)
    except ConfigLoadError as err:
        logger.error("Configuration error", extra={"command": "validate", "error": str(err)})
        return CONFIG_ERROR

    for key in unknown_keys(raw):
        logger.warning("Ignoring unknown setting", extra={"key": str(key)})

    result = validate_config(raw)
    if isinstance(result, InvalidConfig):
        report_errors(result.errors, logger)
        return VALIDATION_ERROR

    logger.info(
        "State file is valid",
        extra={"config": str(config_path), "state": result.config.to_raw()},
    )
    return SUCCESS


def handle_schema(args: argparse.Namespace) -> int:
    """Describe every setting a state file can contain."""
    logger = get_logger("fragtrain.cli.schema", log_level=args.log_level)

    for field in TRAINING_STATE_SCHEMA:
        details: dict[str, object] = {
            "key": field.key,
            "type": field.type.value,
            "required": field.is_required,
            "description": field.description,
        }
        if field.has_default:
            details["default"] = field.default
        if field.suggested is not None:
            details["suggested"] = field.suggested
        logger.info("Setting", extra=details)

    return SUCCESS
