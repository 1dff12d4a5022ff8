"""Recursive dispatch for tagged-union schemas.

Each level of a `Union` schema consumes exactly one token, the name of the
chosen variant, and hands the rest of the tokens to that variant's schema."""

from __future__ import annotations

import difflib
import logging
from typing import Any, Optional, Sequence, Union

from . import _calling, _strings
from ._errors import MissingSubcommandError, UnknownSubcommandError
from ._parsers import ParserSpecification, SubcommandsSpecification
from ._scanner import ArgumentScanner, HelpHandler, request_help

logger = logging.getLogger(__name__)


def parse_with_spec(
    spec: Union[ParserSpecification, SubcommandsSpecification],
    args: Sequence[str],
    *,
    prog: str,
    help_handler: Optional[HelpHandler] = None,
    add_help: bool = True,
) -> Any:
    """Parse `args` against a bound schema, recursing through subcommands."""
    if isinstance(spec, SubcommandsSpecification):
        return dispatch(
            spec, args, prog=prog, help_handler=help_handler, add_help=add_help
        )

    values = ArgumentScanner(
        spec, args, prog=prog, help_handler=help_handler, add_help=add_help
    ).run()
    return _calling.callable_with_values(spec, values)()


def dispatch(
    spec: SubcommandsSpecification,
    args: Sequence[str],
    *,
    prog: str,
    help_handler: Optional[HelpHandler] = None,
    add_help: bool = True,
) -> Any:
    choices = tuple(spec.parser_from_name.keys())
    if len(args) == 0:
        raise MissingSubcommandError(choices=choices, prog=prog)

    token = args[0]
    if add_help and token in _strings.HELP_ALIASES:
        request_help(spec, prog, help_handler)

    if token not in spec.parser_from_name:
        raise UnknownSubcommandError(
            token,
            choices=choices,
            suggestions=difflib.get_close_matches(token, choices, n=3),
            prog=prog,
        )

    logger.debug("%s: dispatching to subcommand %s", prog, token)
    return parse_with_spec(
        spec.parser_from_name[token],
        args[1:],
        prog=f"{prog} {token}",
        help_handler=help_handler,
        add_help=add_help,
    )
