# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Drives the parse of a command tree.

For one command the steps are:

1. Environment overlay (`load_env_vars`): unset flags with a bound
   environment variable take the variable's value. Failures are collected
   and raised together as one `EnvOverlayError`.
2. Token parsing through the command's `FlagSet`. Errors raise
   `ParseFailedError` straight away.
3. The remaining tokens are stored as the command's arguments and the
   command is marked parsed.
4. Routing: when the first remaining token names a subcommand, the rest of
   the tokens are parsed by that subcommand. An unknown first token is not
   an error; it simply stays a positional argument.
5. Post-parse validation (mutex groups, required groups, enum values) of
   every command on the routed chain, root first. Skipped for the whole
   chain when any of its commands was given a builtin flag such as `--help`.

Because the overlay runs before token parsing and `set()` always overwrites,
the precedence is command line > environment > default.
"""
from __future__ import annotations

import os
from typing import TYPE_CHECKING

from flagtree.exceptions import EnvOverlayError, FlagTreeError, FlagValidationError
from flagtree.logger import logger
from flagtree.validation import validate_command

if TYPE_CHECKING:
    from flagtree.command import Command


def load_env_vars(command: Command) -> None:
    """
    Fill unset flags of `command` from their bound environment variables.

    The variable name is the root's env prefix followed by the bound name.
    Empty or absent variables are ignored, and each variable is applied at
    most once per pass.

    Raises:
        EnvOverlayError: Listing every flag whose environment value was rejected.
    """
    prefix = command.env_prefix
    processed: set[str] = set()
    errors: list[FlagTreeError] = []
    for flag in command.flags.list():
        if not flag.env_var or flag.is_set():
            continue
        env_name = f"{prefix}{flag.env_var}"
        if env_name in processed:
            continue
        processed.add(env_name)
        value = os.environ.get(env_name, "")
        if not value:
            continue
        try:
            flag.set(value)
        except FlagTreeError as error:
            errors.append(
                FlagValidationError(
                    f"environment variable {env_name} for flag {flag.display_name}",
                    cause=error,
                )
            )
            continue
        logger.debug("[%s] %s loaded from %s", command.path, flag.display_name, env_name)
    if errors:
        raise EnvOverlayError(errors)


def parse_command(command: Command, tokens: list[str]) -> list[str]:
    """
    Run the overlay and token parsing for `command` alone, without routing
    or post-parse validation.

    Returns:
        list[str]: The tokens left after flag parsing.
    """
    if command.is_parsed:
        return command.args
    load_env_vars(command)
    remaining = command.flag_set.parse(tokens)
    command._capture_args(remaining)
    return remaining


def validate_chain(chain: list[Command]) -> None:
    """
    Validate every command of a parsed root-to-leaf chain, in that order.

    Nothing is validated when any command of the chain has a builtin flag
    set, so `app serve --help` shows help even if `app` has unmet groups.
    """
    for command in chain:
        if command.builtins.any_set():
            logger.debug("[%s] builtin flag set, skipping validation", command.path)
            return
    for command in chain:
        validate_command(command)


def _parse_tree(command: Command, tokens: list[str], route: bool, chain: list[Command]) -> Command:
    chain.append(command)
    remaining = parse_command(command, tokens)
    routed = command
    if route and remaining and command.has_subcommands():
        child = command.get_subcommand(remaining[0])
        if child is None:
            logger.debug(
                "[%s] '%s' is not a subcommand, keeping it as an argument",
                command.path,
                remaining[0],
            )
        elif child.is_parsed:
            routed = child.routed_command
        else:
            logger.debug("[%s] routing to subcommand '%s'", command.path, child.name)
            routed = _parse_tree(child, remaining[1:], route, chain)
    command._set_routed(routed)
    return routed


def parse_and_route(command: Command, tokens: list[str], route: bool = True) -> Command:
    """
    Parse `tokens` for `command` and, if `route` is set, for the selected subcommands.

    Routing finishes before any command is validated; see `validate_chain()`.
    A command is parsed at most once. Calling this again on a parsed command
    returns the command that was routed to the first time.

    Returns:
        Command: The deepest command that was parsed.
    """
    if command.is_parsed:
        return command.routed_command
    chain: list[Command] = []
    routed = _parse_tree(command, tokens, route, chain)
    validate_chain(chain)
    return routed
