"""CLI argument parsing and handling."""

from __future__ import annotations

from vmprovision.cli.parsing import parse_command, parse_flag_value, quote_string_flags

__all__ = [
    "parse_command",
    "parse_flag_value",
    "quote_string_flags",
]
