# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Termination commands: how a training session ends.

The training loop finishes by handing back one of three commands, named and
spelled after their editor counterparts:

  wq  -> WRITE_QUIT  save the final state over the state file, then quit
  q!  -> FORCE_QUIT  quit, throwing away whatever progress was made
  q   -> QUIT        quit without saving, warning if progress gets lost

run_termination_command performs the effect and returns the process exit code.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from fragtrain.cli.exit_codes import RUNTIME_ERROR, SUCCESS
from fragtrain.config.loader import save_training_state
from fragtrain.config.schema import TrainingState

logger = logging.getLogger(__name__)


class TerminationKind(str, Enum):
    WRITE_QUIT = "WriteQuit"
    FORCE_QUIT = "ForceQuit"
    QUIT = "Quit"


@dataclass(frozen=True)
class TerminationCommand:
    kind: TerminationKind
    shortcut: str


WRITE_QUIT = TerminationCommand(TerminationKind.WRITE_QUIT, "wq")
FORCE_QUIT = TerminationCommand(TerminationKind.FORCE_QUIT, "q!")
QUIT = TerminationCommand(TerminationKind.QUIT, "q")

_BY_SHORTCUT: dict[str, TerminationCommand] = {
    command.shortcut: command for command in (WRITE_QUIT, FORCE_QUIT, QUIT)
}


def parse_termination_shortcut(text: str) -> TerminationCommand:
    """
    Map what the user typed to a termination command.

    Raises:
        ValueError: If the text isn't one of the known shortcuts.
    """
    shortcut = text.strip()
    if shortcut not in _BY_SHORTCUT:
        raise ValueError(
            f"Unknown termination shortcut '{shortcut}'. Known: {sorted(_BY_SHORTCUT)}"
        )
    return _BY_SHORTCUT[shortcut]


def run_termination_command(
    command: TerminationCommand,
    initial_state: TrainingState,
    final_state: TrainingState,
    state_file: Path,
) -> int:
    """
    Carry out a termination command and return the exit code.

    Only WRITE_QUIT touches the disk. A failed write keeps the previous state
    file intact and is reported as RUNTIME_ERROR.
    """
    if command.kind is TerminationKind.WRITE_QUIT:
        try:
            save_training_state(final_state, state_file)
        except OSError as err:
            logger.error(
                "Could not save training state",
                extra={"state_file": str(state_file), "error": str(err)},
            )
            return RUNTIME_ERROR
        logger.info("Training state saved", extra={"state_file": str(state_file)})
        return SUCCESS

    if command.kind is TerminationKind.QUIT and final_state != initial_state:
        logger.warning(
            "Quitting without saving, progress since start is discarded "
            "(use 'wq' to save or 'q!' to silence this)",
            extra={"state_file": str(state_file)},
        )

    logger.info("Training session ended", extra={"command": command.kind.value})
    return SUCCESS
