"""CLI argument parsing and parameter conversion utilities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from vmprovision.constants import Command, TAG_VALUE_SEPARATOR

STRING_FLAGS = frozenset(
    (
        "-c",
        "--command",
        "-n",
        "--name",
        "-v",
        "--value",
        "-f",
        "--file",
        "-r",
        "--region",
    )
)
"""Flags whose values are taken as typed rather than evaluated by Fire."""


def quote_string_flags(argv: Sequence[str]) -> list[str]:
    """Quote the values of string flags so Fire passes them through unchanged.

    Fire evaluates flag values as Python literals: ``1.50`` arrives as
    ``1.5``, ``0x10`` as ``16`` and ``None`` as None. A ``repr()`` quoted
    value evaluates back to the exact string that was typed.

    Parameters
    ----------
    argv : Sequence[str]
        Command-line arguments, without the program name

    Returns
    -------
    list[str]
        Arguments with every string flag value quoted. Arguments after a
        bare ``--`` belong to Fire and are left alone
    """
    quoted: list[str] = []
    args = list(argv)
    index = 0

    while index < len(args):
        arg = args[index]

        if arg == "--":
            quoted.extend(args[index:])
            break

        flag, sep, inline_value = arg.partition("=")

        if flag in STRING_FLAGS and sep:
            quoted.append(f"{flag}={inline_value!r}")
        elif arg in STRING_FLAGS and index + 1 < len(args):
            quoted.extend([arg, repr(args[index + 1])])
            index += 1
        else:
            quoted.append(arg)

        index += 1

    return quoted


def parse_flag_value(value: Any) -> str:
    """Convert a flag value into the string handed to the handlers.

    Strings are returned verbatim. Python callers of ``VMProvision.run`` may
    pass a tuple or list of values, which is joined with commas.

    Parameters
    ----------
    value : Any
        Flag value

    Returns
    -------
    str
        String form of the value; empty string for None
    """
    if value is None:
        return ""

    if isinstance(value, str):
        return value

    if isinstance(value, (tuple, list)):
        return TAG_VALUE_SEPARATOR.join(parse_flag_value(v) for v in value)

    return str(value)


def parse_command(command: Any) -> Command:
    """Parse the -c flag into a known command.

    Parameters
    ----------
    command : Any
        Command flag value

    Returns
    -------
    Command
        Matching command

    Raises
    ------
    ValueError
        If the command is not one of the supported commands
    """
    command_str = parse_flag_value(command)

    try:
        return Command(command_str)
    except ValueError:
        expected = ", ".join(c.value for c in Command)
        raise ValueError(
            f"Unknown command '{command_str}'. Expected one of: {expected}"
        ) from None
