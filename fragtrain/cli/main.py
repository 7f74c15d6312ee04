# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for fragtrain.

Every operation is a subcommand of `fragtrain`. The global options
(--config, --log-level) are inherited by every subcommand through argparse's
parent parser mechanism.

Usage:
    fragtrain validate --config state.yaml
    fragtrain schema
"""

import argparse
import sys

from fragtrain.cli.commands import handle_schema, handle_validate
from fragtrain.cli.exit_codes import USER_ERROR


def _build_global_parser(inherited: bool = False) -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False so its help doesn't collide with the subcommand parsers.

    The root parser and every subparser both get these options, so they work
    on either side of the subcommand name. argparse writes a subparser's
    defaults over whatever the root parser already parsed, so the subparser
    copies (inherited=True) use SUPPRESS and only set a value when the option
    is actually given after the subcommand.
    """
    config_default = argparse.SUPPRESS if inherited else None
    level_default = argparse.SUPPRESS if inherited else "INFO"

    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=config_default,
        help="Path to the YAML training state file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=level_default,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level.",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    commands = [
        ("validate", "Validate a training state file.", handle_validate),
        ("schema", "Describe the settings a state file may contain.", handle_schema),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler)


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    If no subcommand is given, we show help and exit with USER_ERROR.
    """
    root_parser = argparse.ArgumentParser(
        prog="fragtrain",
        description="fragtrain: text-fragment training state tools.",
        parents=[_build_global_parser()],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, _build_global_parser(inherited=True))

    args = root_parser.parse_args(argv)

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
