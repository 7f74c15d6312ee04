# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the configuration system.

We keep these separate so that CLI and other layers can catch config-specific
failures without importing the entire config machinery.

Note that the validator itself never raises for bad input. It returns an
InvalidConfig result instead. ConfigValidationError only shows up when a
caller explicitly asks for the raising flavour (ValidationResult.unwrap or
load_training_state).
"""

from typing import Iterable


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a state file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a state file parses fine but fails schema validation.

    Carries every collected error message, in schema declaration order, so
    callers can report all of them instead of just the first one.
    """

    def __init__(self, errors: Iterable[str], source: str | None = None) -> None:
        self.errors: tuple[str, ...] = tuple(errors)
        self.source = source
        header = "Config validation failed"
        if source is not None:
            header += f" for {source}"
        super().__init__(header + ":\n" + "\n".join(f"  - {err}" for err in self.errors))


class ConfigSchemaError(ConfigError):
    """Raised when the schema definition itself is malformed (developer bug)."""
