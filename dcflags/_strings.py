"""Utilities and constants for working with strings."""

from __future__ import annotations

import functools
import re
import textwrap
from typing import Any, List, Literal

from typing_extensions import get_args, get_origin

from . import _resolver

Delimeter = Literal["-", "_"]

LONG_FLAG_PREFIX = "--"
SEPARATOR_TOKEN = "--"
HELP_ALIASES = ("-h", "--help")


def flag_name_from_field_name(name: str, delimeter: Delimeter) -> str:
    """Replace underscores with the delimeter, except when leading.

    ('dry_run', '-') => 'dry-run'
    ('_private_thing', '-') => '_private-thing'
    ('dry-run', '_') => 'dry_run'
    """
    if delimeter == "-":
        stripped = name.lstrip("_")
        return name[: len(name) - len(stripped)] + stripped.replace("_", "-")
    return name.replace("-", "_")


def dedent(text: str) -> str:
    """Same as textwrap.dedent, but ignores the first line."""
    first_line, line_break, rest = text.partition("\n")
    if line_break == "":
        return textwrap.dedent(text)
    return f"{first_line.strip()}\n{textwrap.dedent(rest)}"


def hyphen_separated_from_camel_case(name: str, delimeter: Delimeter = "-") -> str:
    return (
        re.compile("((?<=[a-z0-9])[A-Z]|(?!^)[A-Z](?=[a-z]))")
        .sub(delimeter + r"\1", name)
        .lower()
    )


def subcommand_name_from_type(typ: Any, delimeter: Delimeter = "-") -> str:
    """Default subcommand name for a union member.

    StartServer => start-server
    Annotated[Union[Add, Remove], None] => add-remove
    """
    from .conf import _confstruct  # Prevent circular imports

    typ, configs = _resolver.unwrap_annotated(typ, _confstruct._SubcommandConfig)
    for config in configs:
        if config.name is not None:
            return config.name

    if _resolver.is_union(typ):
        return delimeter.join(
            subcommand_name_from_type(t, delimeter) for t in get_args(typ)
        )
    orig = get_origin(typ)
    if orig is not None and hasattr(orig, "__name__"):
        return hyphen_separated_from_camel_case(orig.__name__, delimeter)
    if hasattr(typ, "__name__"):
        return hyphen_separated_from_camel_case(typ.__name__, delimeter)
    return hyphen_separated_from_camel_case(str(typ), delimeter)


@functools.lru_cache(maxsize=None)
def _get_ansi_pattern() -> re.Pattern:
    # https://stackoverflow.com/a/14693789
    return re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def strip_ansi_sequences(x: str) -> str:
    return _get_ansi_pattern().sub("", x)


def multi_metavar_from_single(single: str) -> str:
    if len(strip_ansi_sequences(single)) >= 32:
        # Shorten long metavars
        return f"[{single} [...]]"
    else:
        return f"[{single} [{single} ...]]"


def remove_single_line_breaks(helptext: str) -> str:
    lines = helptext.split("\n")
    output_parts: List[str] = []
    for line in lines:
        # Remove trailing whitespace.
        line = line.rstrip()

        # Empty line.
        if len(line) == 0:
            prev_is_break = len(output_parts) >= 1 and output_parts[-1] == "\n"
            if not prev_is_break:
                output_parts.append("\n")
            output_parts.append("\n")

        # Non-empty line.
        else:
            if not line[0].isalpha():
                output_parts.append("\n")
            prev_is_break = len(output_parts) >= 1 and output_parts[-1] == "\n"
            if len(output_parts) >= 1 and not prev_is_break:
                output_parts.append(" ")
            output_parts.append(line)

    return "".join(output_parts).rstrip()
