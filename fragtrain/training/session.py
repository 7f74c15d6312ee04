# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Training session runner.

Wires the pieces together in the only order that makes sense:
  1. Validate the raw state mapping
  2. Bail out with VALIDATION_ERROR, logging every error, if that failed
  3. Hand the validated state to the training loop
  4. Act on the termination command the loop returns

The loop is injected. Anything it raises propagates: a crashing loop is a
bug, not a configuration problem, and the caller gets the full traceback.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from fragtrain.cli.exit_codes import VALIDATION_ERROR
from fragtrain.config.schema import ExistenceProbe, TrainingState
from fragtrain.config.validator import InvalidConfig, validate_config
from fragtrain.logging.logger import get_logger
from fragtrain.training.termination import TerminationCommand, run_termination_command
from fragtrain.utils.filesystem import is_readable_file

TrainingLoop = Callable[[TrainingState], tuple[TerminationCommand, TrainingState]]


def report_errors(errors: tuple[str, ...], log: logging.Logger) -> None:
    """Log each validation error on its own line, then the total."""
    for err in errors:
        log.error(f"ERROR: {err}", extra={"error": err})
    log.error(
        f"There were {len(errors)} errors in the configuration. Exit.",
        extra={"error_count": len(errors)},
    )


def run_session(
    raw: Mapping[str, Any],
    loop: TrainingLoop,
    state_file: Path,
    path_exists: ExistenceProbe = is_readable_file,
    log: Optional[logging.Logger] = None,
) -> int:
    """
    Run one training session from a raw state mapping.

    Args:
        raw: Untyped settings, e.g. the output of load_raw_config.
        loop: The training loop. Only called if validation succeeds.
        state_file: Where WRITE_QUIT saves the final state.
        path_exists: Existence probe for `challengeFile`.
        log: Where validation errors and session progress go. Defaults to
            the structured JSON logger for this module.

    Returns:
        VALIDATION_ERROR if the settings were invalid, otherwise whatever
        the termination command produced.
    """
    if log is None:
        log = get_logger(__name__)

    result = validate_config(raw, path_exists=path_exists)
    if isinstance(result, InvalidConfig):
        report_errors(result.errors, log)
        return VALIDATION_ERROR

    initial_state = result.config
    log.info("Starting training session", extra={"state": initial_state.to_raw()})
    command, final_state = loop(initial_state)
    return run_termination_command(command, initial_state, final_state, state_file)
