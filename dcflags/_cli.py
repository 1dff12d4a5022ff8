"""Core public API."""

from __future__ import annotations

import pathlib
import sys
from typing import Any, Callable, Optional, Sequence, Type, TypeVar, overload

from . import _help_formatting, _parsers, _strings, _subcommands, conf
from ._errors import EmptyInputError, HelpRequested, ParseError
from ._scanner import HelpHandler

OutT = TypeVar("OutT")


def _default_prog() -> str:
    return pathlib.Path(sys.argv[0]).name if len(sys.argv) > 0 else "prog"


def _bind(
    schema: Any,
    config: Optional[Sequence[conf._markers.Marker]],
    use_underscores: bool,
) -> _parsers.ParserSpecification | _parsers.SubcommandsSpecification:
    delimeter: _strings.Delimeter = "_" if use_underscores else "-"
    return _parsers.spec_from_type(
        schema, frozenset(() if config is None else config), delimeter
    )


@overload
def parse(
    schema: Type[OutT],
    args: Sequence[str],
    *,
    prog: Optional[str] = None,
    help_handler: Optional[HelpHandler] = None,
    config: Optional[Sequence[conf._markers.Marker]] = None,
    use_underscores: bool = False,
    add_help: bool = True,
) -> OutT: ...


@overload
def parse(
    schema: Callable[..., OutT],
    args: Sequence[str],
    *,
    prog: Optional[str] = None,
    help_handler: Optional[HelpHandler] = None,
    config: Optional[Sequence[conf._markers.Marker]] = None,
    use_underscores: bool = False,
    add_help: bool = True,
) -> OutT: ...


@overload
def parse(
    schema: Any,
    args: Sequence[str],
    *,
    prog: Optional[str] = None,
    help_handler: Optional[HelpHandler] = None,
    config: Optional[Sequence[conf._markers.Marker]] = None,
    use_underscores: bool = False,
    add_help: bool = True,
) -> Any: ...


def parse(
    schema: Any,
    args: Sequence[str],
    *,
    prog: Optional[str] = None,
    help_handler: Optional[HelpHandler] = None,
    config: Optional[Sequence[conf._markers.Marker]] = None,
    use_underscores: bool = False,
    add_help: bool = True,
) -> Any:
    """Parse a sequence of tokens into an instance of `schema`.

    This is the core entry point: it never prints and never exits. Failures are
    raised as :class:`dcflags.ParseError` subclasses, invalid schemas as
    :class:`dcflags.SchemaDefinitionError`.

    Args:
        schema: A dataclass, a function, or a `Union` of those. Members of a `Union`
            become subcommands. For functions, the return value is returned.
        args: Tokens to parse. This should *not* include the program name; see
            :func:`dcflags.parse_argv` for that.

    Keyword Args:
        prog: Name of the program, used to scope error messages. Subcommands
            append their names to it. Defaults to the name of the running script.
        help_handler: Called with the matched (possibly nested) schema and its
            `prog` when `-h` or `--help` is encountered. A
            :class:`dcflags.HelpRequested` exception is raised afterwards.
        config: Markers from :mod:`dcflags.conf` to apply to every field.
        use_underscores: Use underscores instead of hyphens in flag names,
            `--dry_run` instead of `--dry-run`.
        add_help: Recognize `-h` and `--help`.

    Returns:
        The populated schema instance, or the return value of a function schema.
    """
    spec = _bind(schema, config, use_underscores)
    return _subcommands.parse_with_spec(
        spec,
        args,
        prog=_default_prog() if prog is None else prog,
        help_handler=help_handler,
        add_help=add_help,
    )


def parse_argv(
    schema: Any,
    argv: Sequence[str],
    *,
    prog: Optional[str] = None,
    help_handler: Optional[HelpHandler] = None,
    config: Optional[Sequence[conf._markers.Marker]] = None,
    use_underscores: bool = False,
    add_help: bool = True,
) -> Any:
    """Like :func:`dcflags.parse`, but for a full argument vector like `sys.argv`.

    `argv[0]` is the program name. It's used as `prog` when no `prog` is passed in,
    and is never parsed. An empty `argv` raises :class:`dcflags.EmptyInputError`.
    """
    if len(argv) == 0:
        raise EmptyInputError(prog=_default_prog() if prog is None else prog)
    return parse(
        schema,
        argv[1:],
        prog=pathlib.Path(argv[0]).name if prog is None else prog,
        help_handler=help_handler,
        config=config,
        use_underscores=use_underscores,
        add_help=add_help,
    )


@overload
def cli(
    schema: Type[OutT],
    *,
    args: Optional[Sequence[str]] = None,
    prog: Optional[str] = None,
    description: Optional[str] = None,
    config: Optional[Sequence[conf._markers.Marker]] = None,
    use_underscores: bool = False,
    add_help: bool = True,
    console_outputs: bool = True,
) -> OutT: ...


@overload
def cli(
    schema: Callable[..., OutT],
    *,
    args: Optional[Sequence[str]] = None,
    prog: Optional[str] = None,
    description: Optional[str] = None,
    config: Optional[Sequence[conf._markers.Marker]] = None,
    use_underscores: bool = False,
    add_help: bool = True,
    console_outputs: bool = True,
) -> OutT: ...


@overload
def cli(
    schema: Any,
    *,
    args: Optional[Sequence[str]] = None,
    prog: Optional[str] = None,
    description: Optional[str] = None,
    config: Optional[Sequence[conf._markers.Marker]] = None,
    use_underscores: bool = False,
    add_help: bool = True,
    console_outputs: bool = True,
) -> Any: ...


def cli(
    schema: Any,
    *,
    args: Optional[Sequence[str]] = None,
    prog: Optional[str] = None,
    description: Optional[str] = None,
    config: Optional[Sequence[conf._markers.Marker]] = None,
    use_underscores: bool = False,
    add_help: bool = True,
    console_outputs: bool = True,
) -> Any:
    """Call or instantiate `schema`, with inputs populated from the command line.

    This wraps :func:`dcflags.parse` with the behavior scripts usually want: help
    is printed to stdout followed by exit code 0, and parse errors are printed to
    stderr followed by exit code 2.

    Example::

        import dataclasses

        import dcflags

        @dataclasses.dataclass
        class Args:
            '''Serve some files.'''

            name: str = "joe"
            port: dcflags.conf.UInt16 = 8080

        args = dcflags.cli(Args)

    Args:
        schema: A dataclass, a function, or a `Union` of those.

    Keyword Args:
        args: Tokens to parse. If not set, `sys.argv[1:]` is used.
        prog: Name of the program printed in helptext. Defaults to the name of the
            running script.
        description: Description text for the parser, displayed when the `--help`
            flag is passed in. If not specified, the schema's docstring is used.
        config: Markers from :mod:`dcflags.conf` to apply to every field.
        use_underscores: Use underscores instead of hyphens in flag names.
        add_help: Add `-h` and `--help` flags.
        console_outputs: If False, help and error messages are not printed. Exit
            codes are unchanged.

    Returns:
        The populated schema instance, or the return value of a function schema.
    """
    if args is None:
        args = sys.argv[1:]
    if prog is None:
        prog = _default_prog()

    spec = _bind(schema, config, use_underscores)

    def help_handler(
        matched_spec: _parsers.ParserSpecification
        | _parsers.SubcommandsSpecification,
        matched_prog: str,
    ) -> None:
        if not console_outputs:
            return
        _help_formatting.print_help(
            matched_spec,
            matched_prog,
            # A custom description only replaces the root docstring.
            description=description if matched_spec is spec else None,
            add_help=add_help,
        )

    try:
        return _subcommands.parse_with_spec(
            spec, args, prog=prog, help_handler=help_handler, add_help=add_help
        )
    except HelpRequested:
        sys.exit(0)
    except ParseError as e:
        if console_outputs:
            print(
                *_help_formatting.format_error(
                    e,
                    _help_formatting.spec_from_prog(spec, prog, e.prog),
                    add_help=add_help,
                ),
                sep="\n",
                file=sys.stderr,
                flush=True,
            )
        sys.exit(2)
