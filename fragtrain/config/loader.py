# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
State file loader: reads YAML from disk and hands it to the validator.

The loading pipeline is deliberately simple and linear:
  1. Read raw text from the file
  2. Parse as YAML into a plain dict
  3. Run the schema validator over the dict
  4. Return the frozen TrainingState

Step 2 is where load_raw_config stops. Anything beyond that (validation,
error reporting) is up to the caller. load_training_state does all four steps
and raises if any of them fails.

save_training_state is the inverse: it writes a state back out in the same
camelCase layout, atomically, so the next load picks it up unchanged.
"""

from pathlib import Path
from typing import Any

import yaml

from fragtrain.config.exceptions import ConfigLoadError, ConfigValidationError
from fragtrain.config.schema import ExistenceProbe, TrainingState
from fragtrain.config.validator import InvalidConfig, validate_config
from fragtrain.utils.filesystem import atomic_write, is_readable_file


def load_raw_config(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML state file and return the parsed dict, unvalidated.

    We explicitly check for file existence and readability before parsing,
    because yaml.safe_load gives cryptic errors on missing files.

    Args:
        config_path: Absolute or relative path to the YAML file.

    Returns:
        Parsed YAML content as a dictionary. An empty file gives an empty dict.

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, or isn't a
            YAML mapping.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def load_training_state(
    config_path: Path,
    path_exists: ExistenceProbe = is_readable_file,
) -> TrainingState:
    """
    Load and validate a state file into a frozen TrainingState.

    Args:
        config_path: Path to a YAML state file.
        path_exists: Existence probe used for `challengeFile`.

    Returns:
        A fully validated, frozen TrainingState.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: One or more settings failed validation. The
            exception carries every message, not just the first.
    """
    raw_data = load_raw_config(config_path)
    result = validate_config(raw_data, path_exists=path_exists)
    if isinstance(result, InvalidConfig):
        raise ConfigValidationError(result.errors, source=str(config_path))
    return result.config


def save_training_state(state: TrainingState, config_path: Path) -> None:
    """
    Write a state to disk as YAML, keys in schema order.

    Raises:
        OSError: If the file can't be written. Any previous file is left intact.
    """
    content = yaml.safe_dump(state.to_raw(), sort_keys=False, default_flow_style=False)
    atomic_write(config_path, content)
